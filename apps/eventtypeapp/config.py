# apps/eventtypeapp/config.py
"""Immutable per-request event configuration passed into every resolver call."""

from dataclasses import dataclass

from django.conf import settings
from django.core.exceptions import ValidationError

from apps.eventtypeapp.models import EventType
from core.exceptions import InvalidDataException, ResourceNotFoundException


@dataclass(frozen=True)
class EventConfiguration:
    duration_minutes: int
    buffer_before_minutes: int = 0
    buffer_after_minutes: int = 0
    minimum_notice_minutes: int = 0
    max_booking_window_days: int = 60
    slot_interval_minutes: int = 15

    def __post_init__(self):
        if self.duration_minutes is None or self.duration_minutes <= 0:
            raise InvalidDataException("Duration must be a positive number of minutes.")
        if self.slot_interval_minutes is None or self.slot_interval_minutes <= 0:
            raise InvalidDataException("Slot interval must be a positive number of minutes.")
        if self.buffer_before_minutes < 0 or self.buffer_after_minutes < 0:
            raise InvalidDataException("Buffers cannot be negative.")
        if self.minimum_notice_minutes < 0:
            raise InvalidDataException("Minimum notice cannot be negative.")
        if self.max_booking_window_days < 1:
            raise InvalidDataException("Booking window must be at least one day.")

    @classmethod
    def from_event_type(cls, event_type, duration_minutes=None):
        """
        Build the configuration from an EventType row.

        Args:
            event_type: EventType instance
            duration_minutes: Optional duration overriding the event type's own

        Returns:
            EventConfiguration
        """
        return cls(
            duration_minutes=duration_minutes or event_type.duration_minutes,
            buffer_before_minutes=event_type.buffer_before_minutes,
            buffer_after_minutes=event_type.buffer_after_minutes,
            minimum_notice_minutes=event_type.minimum_notice_minutes,
            max_booking_window_days=event_type.max_booking_window_days,
            slot_interval_minutes=event_type.slot_interval_minutes,
        )

    @classmethod
    def default(cls, duration_minutes):
        """Configuration for ad-hoc requests that name no event type"""
        return cls(
            duration_minutes=duration_minutes,
            slot_interval_minutes=settings.SLOT_INTERVAL_MINUTES,
        )


def resolve_event_configuration(event_type_id=None, duration_minutes=None):
    """
    Load the configuration for a request.

    Args:
        event_type_id: Optional EventType id
        duration_minutes: Requested duration (overrides the event type's)

    Returns:
        (EventConfiguration, EventType or None)

    Raises:
        ResourceNotFoundException: unknown event type
        InvalidDataException: neither an event type nor a duration given
    """
    if event_type_id:
        try:
            event_type = EventType.objects.get(id=event_type_id)
        except (EventType.DoesNotExist, ValidationError, ValueError, TypeError):
            raise ResourceNotFoundException(f"Event type {event_type_id} not found.")
        return EventConfiguration.from_event_type(event_type, duration_minutes), event_type

    if duration_minutes is None:
        raise InvalidDataException("Either event_type_id or duration_minutes is required.")
    return EventConfiguration.default(duration_minutes), None
