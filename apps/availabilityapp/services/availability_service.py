# apps/availabilityapp/services/availability_service.py
import logging
import uuid
from datetime import date, datetime, time, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from django.conf import settings
from django.core.cache import cache
from django.db import transaction
from django.utils import timezone

from apps.availabilityapp.models import DateOverride, WeeklyRule
from apps.availabilityapp.services.conflict_filter import (
    conflicting_bookings,
    filter_conflicts,
)
from apps.availabilityapp.services.slot_generator import CandidateSlot
from apps.bookingapp.models import Booking
from apps.bookingapp.utils.time_windows import (
    TimeWindow,
    localize,
    parse_calendar_date,
    parse_clock_time,
    parse_instant,
    to_subject_local,
)
from apps.eventtypeapp.config import resolve_event_configuration
from apps.hostapp.services.host_service import HostService
from core.cache.key_generator import availability_rules_key, availability_version_key
from core.exceptions import InvalidDataException

logger = logging.getLogger(__name__)

# Type definitions for wall-clock ranges
TimeRange = Tuple[time, time]  # (start_time, end_time)

MAX_RANGE_DAYS = 366


class AvailabilityService:
    """
    Resolves a host's open windows for a calendar date and manages the weekly
    rules and date overrides they come from.

    The calendar date is always a date on the host's own clock.
    """

    @classmethod
    def resolve_open_windows(cls, host, calendar_date) -> List[TimeWindow]:
        """
        Open windows of a host on one calendar day.

        A date override wins over the weekly rules: a blocked override closes
        the day, an available one supplies the only window. Without an
        override every weekly rule for the weekday becomes a window.

        Args:
            host: Host instance or id
            calendar_date: Date (or YYYY-MM-DD) on the host's clock

        Returns:
            List of (start, end) aware datetimes in the host timezone, ordered
            by start. An empty list means a day off.
        """
        host = HostService.get_host(host)
        calendar_date = parse_calendar_date(calendar_date)
        tz = host.tz

        windows = []
        for start, end in cls._get_day_ranges(host.id, calendar_date):
            window_start = localize(calendar_date, start, tz)
            window_end = localize(calendar_date, end, tz)
            # A window swallowed by a DST gap has no bookable time
            if window_start < window_end:
                windows.append((window_start, window_end))
        return windows

    @classmethod
    def _get_day_ranges(cls, host_id, calendar_date: date) -> List[TimeRange]:
        """Wall-clock ranges for the day, read through the short-TTL cache"""
        cache_key = availability_rules_key(
            host_id, calendar_date, version=cls._get_cache_version(host_id)
        )
        cached_result = cache.get(cache_key)
        if cached_result is not None:
            return cached_result

        override = DateOverride.objects.filter(host_id=host_id, date=calendar_date).first()
        if override is not None:
            if override.is_available:
                ranges = [(override.start_time, override.end_time)]
            else:
                ranges = []
        else:
            ranges = list(
                WeeklyRule.objects.filter(host_id=host_id, day_of_week=calendar_date.weekday())
                .order_by("start_time")
                .values_list("start_time", "end_time")
            )

        cache.set(cache_key, ranges, settings.AVAILABILITY_CACHE_TTL)
        return ranges

    @staticmethod
    def _get_cache_version(host_id):
        return cache.get(availability_version_key(host_id))

    @staticmethod
    def invalidate_host_cache(host_id):
        """Retire every cached day of a host by moving it to a new generation"""
        cache.set(availability_version_key(host_id), uuid.uuid4().hex[:12], None)
        logger.debug(f"Availability cache invalidated for host {host_id}")

    # ------------------------------------------------------------------
    # Weekly schedule
    # ------------------------------------------------------------------
    @classmethod
    def set_weekly_schedule(cls, host, rules: Iterable[Dict]) -> List[WeeklyRule]:
        """
        Replace the whole weekly schedule of a host.

        Args:
            host: Host instance or id
            rules: Dicts with day_of_week (0 = Monday), start_time and end_time

        Returns:
            The new WeeklyRule rows

        Raises:
            InvalidDataException: if any rule is malformed; nothing is written
        """
        host = HostService.get_host(host)

        new_rules = []
        for index, rule in enumerate(rules):
            try:
                day_of_week = int(rule["day_of_week"])
                start_time = parse_clock_time(rule["start_time"])
                end_time = parse_clock_time(rule["end_time"])
            except (KeyError, TypeError, ValueError) as e:
                raise InvalidDataException(f"Rule {index} is incomplete: {e}")
            if day_of_week not in range(7):
                raise InvalidDataException(
                    f"Rule {index}: day_of_week must be between 0 (Monday) and 6 (Sunday)."
                )
            if start_time >= end_time:
                raise InvalidDataException(f"Rule {index}: start_time must be before end_time.")
            new_rules.append(
                WeeklyRule(
                    host=host,
                    day_of_week=day_of_week,
                    start_time=start_time,
                    end_time=end_time,
                )
            )

        with transaction.atomic():
            WeeklyRule.objects.filter(host=host).delete()
            created = WeeklyRule.objects.bulk_create(new_rules)

        # bulk_create sends no signals
        cls.invalidate_host_cache(host.id)
        logger.info(f"Weekly schedule of host {host.id} replaced with {len(created)} rules")
        return created

    @staticmethod
    def get_weekly_schedule(host) -> List[WeeklyRule]:
        host = HostService.get_host(host)
        return list(WeeklyRule.objects.filter(host=host).order_by("day_of_week", "start_time"))

    # ------------------------------------------------------------------
    # Date overrides
    # ------------------------------------------------------------------
    @staticmethod
    def set_date_override(
        host,
        override_date,
        is_available: bool,
        start_time=None,
        end_time=None,
        reason: str = "",
    ) -> DateOverride:
        """
        Create or replace the override of a host for one date.

        Args:
            host: Host instance or id
            override_date: Date (or YYYY-MM-DD) on the host's clock
            is_available: False blocks the day, True replaces its windows
            start_time: Window start, required when available
            end_time: Window end, required when available
            reason: Optional free text

        Returns:
            The stored DateOverride
        """
        host = HostService.get_host(host)
        override_date = parse_calendar_date(override_date)

        if is_available:
            if start_time is None or end_time is None:
                raise InvalidDataException(
                    "An available override needs both start_time and end_time."
                )
            start_time = parse_clock_time(start_time)
            end_time = parse_clock_time(end_time)
            if start_time >= end_time:
                raise InvalidDataException("start_time must be before end_time.")
        else:
            start_time = end_time = None

        override, created = DateOverride.objects.update_or_create(
            host=host,
            date=override_date,
            defaults={
                "is_available": bool(is_available),
                "start_time": start_time,
                "end_time": end_time,
                "reason": reason or "",
            },
        )
        logger.info(
            f"{'Created' if created else 'Updated'} override for host {host.id} on {override_date}"
        )
        return override

    @staticmethod
    def delete_date_override(host, override_date) -> bool:
        host = HostService.get_host(host)
        override_date = parse_calendar_date(override_date)
        deleted, _ = DateOverride.objects.filter(host=host, date=override_date).delete()
        return deleted > 0

    @staticmethod
    def get_date_overrides(host, start_date=None, end_date=None) -> List[DateOverride]:
        host = HostService.get_host(host)
        queryset = DateOverride.objects.filter(host=host)
        if start_date:
            queryset = queryset.filter(date__gte=parse_calendar_date(start_date))
        if end_date:
            queryset = queryset.filter(date__lte=parse_calendar_date(end_date))
        return list(queryset.order_by("date"))

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------
    @classmethod
    def get_availability_range(cls, host, start_date, end_date) -> Dict[date, List[TimeWindow]]:
        """
        Open windows for every day of an inclusive date range.

        Args:
            host: Host instance or id
            start_date: First date
            end_date: Last date

        Returns:
            Dict mapping each date to its open windows
        """
        host = HostService.get_host(host)
        start_date = parse_calendar_date(start_date)
        end_date = parse_calendar_date(end_date)
        if end_date < start_date:
            raise InvalidDataException("end_date must not be before start_date.")
        if (end_date - start_date).days >= MAX_RANGE_DAYS:
            raise InvalidDataException(f"Date range cannot exceed {MAX_RANGE_DAYS} days.")

        result = {}
        current = start_date
        while current <= end_date:
            result[current] = cls.resolve_open_windows(host, current)
            current += timedelta(days=1)
        return result

    @classmethod
    def check_slot_availability(
        cls,
        host,
        start_time,
        duration_minutes: Optional[int] = None,
        event_type=None,
        now: Optional[datetime] = None,
    ) -> Dict:
        """
        Check whether one specific slot could be booked right now.

        Args:
            host: Host instance or id
            start_time: Slot start (aware datetime or ISO-8601 string)
            duration_minutes: Slot length (defaults to the event type's)
            event_type: Optional EventType or its id
            now: Current instant, for tests

        Returns:
            Dict with "available" and, when unavailable, a "reason" of
            outside_availability, conflict, minimum_notice or
            beyond_booking_window
        """
        host = HostService.get_host(host)
        start_time = parse_instant(start_time)
        now = now or timezone.now()
        event_type_id = getattr(event_type, "id", event_type)
        config, _ = resolve_event_configuration(event_type_id, duration_minutes)
        end_time = start_time + timedelta(minutes=config.duration_minutes)

        result = {
            "available": False,
            "start_time": start_time,
            "end_time": end_time,
            "reason": None,
        }

        local_date = to_subject_local(start_time, host.tz).date()
        windows = cls.resolve_open_windows(host, local_date)
        if not any(ws <= start_time and end_time <= we for ws, we in windows):
            result["reason"] = "outside_availability"
            return result

        bookings = list(
            Booking.objects.for_host(host.id)
            .active()
            .around(start_time, end_time, settings.MAX_BUFFER_MINUTES)
        )
        if conflicting_bookings(start_time, end_time, bookings):
            result["reason"] = "conflict"
            return result

        slot = filter_conflicts(
            [CandidateSlot(start_time, end_time)], bookings, config, now=now, tz=host.tz
        )[0]
        if not slot.available:
            notice_cutoff = now + timedelta(minutes=config.minimum_notice_minutes)
            result["reason"] = (
                "minimum_notice" if start_time < notice_cutoff else "beyond_booking_window"
            )
            return result

        result["available"] = True
        return result
