from django.urls import include, path
from rest_framework.routers import SimpleRouter

from apps.hostapp.views import HostViewSet

router = SimpleRouter()
router.register(r"", HostViewSet, basename="host")

urlpatterns = [
    path("", include(router.urls)),
]
