from django.urls import include, path
from rest_framework.routers import SimpleRouter

from apps.teamapp.views import TeamViewSet

router = SimpleRouter()
router.register(r"", TeamViewSet, basename="team")

urlpatterns = [
    path("", include(router.urls)),
]
