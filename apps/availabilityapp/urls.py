# apps/availabilityapp/urls.py
from django.urls import include, path
from rest_framework.routers import SimpleRouter

from apps.availabilityapp.views import HostAvailabilityViewSet

router = SimpleRouter()
router.register(r"hosts", HostAvailabilityViewSet, basename="host-availability")

urlpatterns = [
    path("", include(router.urls)),
]
