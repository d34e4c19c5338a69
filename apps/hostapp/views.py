from drf_yasg.utils import swagger_auto_schema
from rest_framework import viewsets

from apps.hostapp.models import Host
from apps.hostapp.serializers import HostSerializer


class HostViewSet(viewsets.ModelViewSet):
    """Hosts whose calendars are managed by the engine"""

    queryset = Host.objects.all()
    serializer_class = HostSerializer
    filterset_fields = ["is_active", "timezone"]
    ordering_fields = ["name", "created_at"]

    @swagger_auto_schema(operation_description="List hosts")
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)
