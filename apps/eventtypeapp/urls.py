from django.urls import include, path
from rest_framework.routers import SimpleRouter

from apps.eventtypeapp.views import EventTypeViewSet

router = SimpleRouter()
router.register(r"", EventTypeViewSet, basename="event-type")

urlpatterns = [
    path("", include(router.urls)),
]
