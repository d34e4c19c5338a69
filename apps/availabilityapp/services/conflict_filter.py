# apps/availabilityapp/services/conflict_filter.py
"""
Marks candidate slots that cannot be booked.

A slot is unavailable when it overlaps an active booking padded by that
booking's own buffers, when it starts inside the minimum notice period, or
when its date lies past the booking window.
"""

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

import pytz
from django.utils import timezone

from apps.availabilityapp.services.slot_generator import CandidateSlot
from apps.bookingapp.models import ACTIVE_BOOKING_STATUSES
from apps.bookingapp.utils.time_windows import (
    expand_interval,
    overlaps,
    resolve_timezone,
    to_subject_local,
)

logger = logging.getLogger(__name__)


def blocked_interval(booking):
    """The interval an existing booking occupies, buffers included"""
    return expand_interval(
        booking.start_time, booking.end_time, booking.buffer_before, booking.buffer_after
    )


def conflicting_bookings(
    start_time: datetime,
    end_time: datetime,
    bookings: Iterable,
    buffer_before: int = 0,
    buffer_after: int = 0,
) -> List:
    """
    Active bookings that block a new booking of [start_time, end_time).

    A booking blocks when the new interval overlaps it padded by its own
    buffers, or when the new booking padded by buffer_before/buffer_after
    overlaps its raw interval.

    Args:
        start_time: Candidate start
        end_time: Candidate end
        bookings: Existing bookings (any status)
        buffer_before: Minutes the new booking keeps free before its start
        buffer_after: Minutes the new booking keeps free after its end

    Returns:
        The bookings that block the candidate
    """
    padded_start, padded_end = expand_interval(start_time, end_time, buffer_before, buffer_after)
    conflicts = []
    for booking in bookings:
        if booking.status not in ACTIVE_BOOKING_STATUSES:
            continue
        blocked_start, blocked_end = blocked_interval(booking)
        if overlaps(start_time, end_time, blocked_start, blocked_end) or overlaps(
            padded_start, padded_end, booking.start_time, booking.end_time
        ):
            conflicts.append(booking)
    return conflicts


def filter_conflicts(
    candidates: Iterable[CandidateSlot],
    existing_bookings: Iterable,
    event_config,
    now: Optional[datetime] = None,
    tz=pytz.utc,
) -> List[CandidateSlot]:
    """
    Flag every candidate slot as available or not.

    Args:
        candidates: Slots from generate_slots
        existing_bookings: Bookings of the host around the slots
        event_config: EventConfiguration (notice and booking window)
        now: Current instant (defaults to timezone.now())
        tz: Timezone in which "today" and the slot date are evaluated

    Returns:
        The full list of candidates, each with its available flag set
    """
    now = now or timezone.now()
    tz = resolve_timezone(tz)
    notice_cutoff = now + timedelta(minutes=event_config.minimum_notice_minutes)
    last_bookable_date = to_subject_local(now, tz).date() + timedelta(
        days=event_config.max_booking_window_days
    )

    blocked = [
        blocked_interval(booking)
        for booking in existing_bookings
        if booking.status in ACTIVE_BOOKING_STATUSES
    ]

    flagged = []
    for slot in candidates:
        available = (
            slot.available
            and slot.start_time >= notice_cutoff
            and to_subject_local(slot.start_time, tz).date() <= last_bookable_date
            and not any(
                overlaps(slot.start_time, slot.end_time, blocked_start, blocked_end)
                for blocked_start, blocked_end in blocked
            )
        )
        flagged.append(replace(slot, available=available))

    logger.debug(
        f"Filtered {len(flagged)} slots against {len(blocked)} active bookings, "
        f"{sum(1 for s in flagged if s.available)} available"
    )
    return flagged


def available_only(slots: Iterable[CandidateSlot]) -> List[CandidateSlot]:
    return [slot for slot in slots if slot.available]
