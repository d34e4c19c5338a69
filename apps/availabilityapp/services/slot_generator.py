# apps/availabilityapp/services/slot_generator.py
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, List

import pytz

from apps.bookingapp.utils.time_windows import TimeWindow
from core.exceptions import InvalidDataException


@dataclass(frozen=True)
class CandidateSlot:
    """A grid-aligned interval considered for booking; never persisted"""

    start_time: datetime
    end_time: datetime
    available: bool = True

    def as_window(self) -> TimeWindow:
        return self.start_time, self.end_time


def generate_slots(
    open_windows: Iterable[TimeWindow], duration_minutes: int, step_minutes: int = 15
) -> List[CandidateSlot]:
    """
    Walk each open window on a fixed grid and emit every slot that fits.

    Slots start at the window start and advance by ``step_minutes``; a slot is
    emitted while ``start + duration <= window_end``. Windows are processed in
    the order given, each one chronologically.

    Args:
        open_windows: (start, end) pairs of aware datetimes
        duration_minutes: Length of every slot
        step_minutes: Grid spacing between slot starts

    Returns:
        List of CandidateSlot, all marked available
    """
    if duration_minutes is None or duration_minutes <= 0:
        raise InvalidDataException("Duration must be a positive number of minutes.")
    if step_minutes is None or step_minutes <= 0:
        raise InvalidDataException("Slot step must be a positive number of minutes.")

    duration = timedelta(minutes=duration_minutes)
    step = timedelta(minutes=step_minutes)

    slots = []
    for window_start, window_end in open_windows:
        # Absolute arithmetic in UTC keeps DST days exact
        current = window_start.astimezone(pytz.utc)
        end = window_end.astimezone(pytz.utc)
        while current + duration <= end:
            slots.append(CandidateSlot(current, current + duration))
            current += step
    return slots
