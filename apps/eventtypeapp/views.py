from rest_framework import viewsets

from apps.eventtypeapp.models import EventType
from apps.eventtypeapp.serializers import EventTypeSerializer


class EventTypeViewSet(viewsets.ModelViewSet):
    queryset = EventType.objects.select_related("host")
    serializer_class = EventTypeSerializer
    filterset_fields = ["host", "is_active"]
    ordering_fields = ["title", "duration_minutes"]
