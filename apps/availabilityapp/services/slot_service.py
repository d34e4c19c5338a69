# apps/availabilityapp/services/slot_service.py
import logging
from datetime import datetime
from typing import Dict, List, Optional

from django.conf import settings

from apps.availabilityapp.services.availability_service import AvailabilityService
from apps.availabilityapp.services.conflict_filter import available_only, filter_conflicts
from apps.availabilityapp.services.slot_generator import CandidateSlot, generate_slots
from apps.bookingapp.models import Booking
from apps.bookingapp.utils.time_windows import (
    parse_calendar_date,
    resolve_timezone,
    to_iso,
)
from apps.eventtypeapp.config import EventConfiguration, resolve_event_configuration
from apps.hostapp.services.host_service import HostService

logger = logging.getLogger(__name__)


def serialize_slot(slot: CandidateSlot, tz) -> Dict[str, str]:
    return {
        "start_time": to_iso(slot.start_time, tz),
        "end_time": to_iso(slot.end_time, tz),
    }


class SlotService:
    """Open windows -> grid slots -> conflict flags, for one host and day"""

    @classmethod
    def get_flagged_slots(
        cls,
        host,
        calendar_date,
        event_config: EventConfiguration,
        now: Optional[datetime] = None,
    ) -> List[CandidateSlot]:
        """
        Every candidate slot of the day with its available flag.

        Args:
            host: Host instance or id
            calendar_date: Date on the host's clock
            event_config: Duration, grid step, buffers, notice and window
            now: Current instant, for tests

        Returns:
            List of CandidateSlot
        """
        host = HostService.get_host(host)
        if not host.is_active:
            return []

        windows = AvailabilityService.resolve_open_windows(host, calendar_date)
        if not windows:
            return []

        candidates = generate_slots(
            windows, event_config.duration_minutes, event_config.slot_interval_minutes
        )
        if not candidates:
            return []

        # Bookings are read fresh on every call
        day_start = min(start for start, _ in windows)
        day_end = max(end for _, end in windows)
        bookings = list(
            Booking.objects.for_host(host.id)
            .active()
            .around(day_start, day_end, settings.MAX_BUFFER_MINUTES)
        )
        return filter_conflicts(candidates, bookings, event_config, now=now, tz=host.tz)

    @classmethod
    def get_available_slots(
        cls,
        host,
        calendar_date,
        event_config: EventConfiguration,
        now: Optional[datetime] = None,
    ) -> List[CandidateSlot]:
        return available_only(cls.get_flagged_slots(host, calendar_date, event_config, now=now))

    @classmethod
    def get_open_slots(
        cls,
        host_id,
        calendar_date,
        duration_minutes: Optional[int] = None,
        timezone: str = "UTC",
        event_type_id=None,
        now: Optional[datetime] = None,
    ) -> List[Dict[str, str]]:
        """
        Bookable slots of a host for one day, rendered for the requester.

        Args:
            host_id: Host id
            calendar_date: Date on the host's clock
            duration_minutes: Requested length (defaults to the event type's)
            timezone: Requester's IANA timezone for the output
            event_type_id: Optional event type supplying buffers, notice and window
            now: Current instant, for tests

        Returns:
            List of {"start_time", "end_time"} ISO-8601 strings
        """
        requester_tz = resolve_timezone(timezone)
        host = HostService.get_host(host_id)
        calendar_date = parse_calendar_date(calendar_date)
        event_config, _ = resolve_event_configuration(event_type_id, duration_minutes)

        slots = cls.get_available_slots(host, calendar_date, event_config, now=now)
        logger.info(f"{len(slots)} open slots for host {host.id} on {calendar_date}")
        return [serialize_slot(slot, requester_tz) for slot in slots]
