# apps/eventtypeapp/tests/factories.py
import uuid

import factory
from factory.django import DjangoModelFactory

from apps.eventtypeapp.models import EventType
from apps.hostapp.tests.factories import HostFactory


class EventTypeFactory(DjangoModelFactory):
    class Meta:
        model = EventType

    id = factory.LazyFunction(uuid.uuid4)
    host = factory.SubFactory(HostFactory)
    title = factory.Sequence(lambda n: f"Meeting {n}")
    duration_minutes = 30
    buffer_before_minutes = 0
    buffer_after_minutes = 0
    minimum_notice_minutes = 0
    max_booking_window_days = 60
    slot_interval_minutes = 15
