# apps/hostapp/services/host_service.py
import logging

from django.core.exceptions import ValidationError

from apps.hostapp.models import Host
from core.exceptions import ResourceNotFoundException

logger = logging.getLogger(__name__)


class HostService:
    @staticmethod
    def get_host(host) -> Host:
        """
        Resolve a host reference.

        Args:
            host: Host instance or host id

        Returns:
            Host

        Raises:
            ResourceNotFoundException: no host with that id
        """
        if isinstance(host, Host):
            return host
        try:
            return Host.objects.get(id=host)
        except (Host.DoesNotExist, ValidationError, ValueError, TypeError):
            raise ResourceNotFoundException(f"Host {host} not found.")
