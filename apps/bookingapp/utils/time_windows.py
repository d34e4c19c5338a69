# apps/bookingapp/utils/time_windows.py
"""
Time window arithmetic shared by the availability, conflict and admission code.

Every interval is half-open ``[start, end)``: two intervals that only touch
never overlap. All instants are timezone-aware; timezone names are parsed in
one place only (:func:`resolve_timezone`).
"""

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Tuple, Union

import pytz
from django.utils.dateparse import parse_date, parse_datetime, parse_time

from core.exceptions import InvalidDataException, InvalidTimezoneException

TimeWindow = Tuple[datetime, datetime]  # (start, end), both aware


def resolve_timezone(name: Union[str, tzinfo]) -> tzinfo:
    """
    Parse an IANA timezone name.

    Args:
        name: Timezone name such as "Europe/Berlin" (tzinfo objects pass through)

    Returns:
        pytz timezone

    Raises:
        InvalidTimezoneException: if the name is not a known zone
    """
    if isinstance(name, tzinfo):
        return name
    if not name:
        raise InvalidTimezoneException("Timezone is required.")
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        raise InvalidTimezoneException(f"Unknown timezone: {name}")


def is_valid_timezone(name: str) -> bool:
    try:
        resolve_timezone(name)
    except InvalidTimezoneException:
        return False
    return True


def ensure_aware(instant: datetime) -> datetime:
    if instant.tzinfo is None or instant.tzinfo.utcoffset(instant) is None:
        raise InvalidDataException(f"Datetime {instant.isoformat()} has no timezone offset.")
    return instant


def parse_instant(value: Union[str, datetime]) -> datetime:
    """Parse an ISO-8601 string with an explicit offset into an aware datetime"""
    if isinstance(value, datetime):
        return ensure_aware(value)
    try:
        parsed = parse_datetime(value) if isinstance(value, str) else None
    except ValueError:
        parsed = None
    if parsed is None:
        raise InvalidDataException(f"Invalid datetime: {value}")
    return ensure_aware(parsed)


def parse_calendar_date(value: Union[str, date]) -> date:
    """Parse a YYYY-MM-DD calendar date"""
    if isinstance(value, datetime):
        raise InvalidDataException("Expected a calendar date, got a datetime.")
    if isinstance(value, date):
        return value
    try:
        parsed = parse_date(value) if isinstance(value, str) else None
    except ValueError:
        parsed = None
    if parsed is None:
        raise InvalidDataException(f"Invalid date: {value}")
    return parsed


def parse_clock_time(value: Union[str, time]) -> time:
    """Parse an HH:MM wall-clock time"""
    if isinstance(value, time):
        return value
    try:
        parsed = parse_time(value) if isinstance(value, str) else None
    except ValueError:
        parsed = None
    if parsed is None:
        raise InvalidDataException(f"Invalid time: {value}")
    return parsed


def to_subject_local(instant: datetime, subject_tz: Union[str, tzinfo]) -> datetime:
    """
    Express an absolute instant on the subject's wall clock.

    Args:
        instant: Aware datetime
        subject_tz: Subject timezone (name or tzinfo)

    Returns:
        Aware datetime in the subject timezone denoting the same instant
    """
    tz = resolve_timezone(subject_tz)
    return ensure_aware(instant).astimezone(tz)


def localize(local_date: date, local_time: time, subject_tz: Union[str, tzinfo]) -> datetime:
    """
    Attach a subject timezone to a wall-clock date and time.

    Times falling in a DST gap are shifted forward by the gap; ambiguous times
    resolve to the standard-time reading.
    """
    tz = resolve_timezone(subject_tz)
    naive = datetime.combine(local_date, local_time)
    if hasattr(tz, "localize"):
        return tz.normalize(tz.localize(naive, is_dst=False))
    return naive.replace(tzinfo=tz)


def day_bounds(local_date: date, subject_tz: Union[str, tzinfo]) -> TimeWindow:
    """
    Absolute bounds of a calendar day on the subject's clock.

    Returns ``(start_of_day, start_of_next_day)``; on DST transition days the
    interval is 23 or 25 hours long.
    """
    start = localize(local_date, time.min, subject_tz)
    end = localize(local_date + timedelta(days=1), time.min, subject_tz)
    return start, end


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Half-open overlap test: touching intervals do not overlap"""
    return a_start < b_end and b_start < a_end


def expand_interval(
    start: datetime, end: datetime, buffer_before: int = 0, buffer_after: int = 0
) -> TimeWindow:
    """
    Pad an interval with buffers

    Args:
        start: Interval start
        end: Interval end
        buffer_before: Minutes to add before start
        buffer_after: Minutes to add after end

    Returns:
        (padded_start, padded_end)
    """
    return (
        start - timedelta(minutes=buffer_before or 0),
        end + timedelta(minutes=buffer_after or 0),
    )


def to_iso(instant: datetime, target_tz: Union[str, tzinfo]) -> str:
    """ISO-8601 rendering of an instant in the requester's timezone"""
    return to_subject_local(instant, target_tz).isoformat()
