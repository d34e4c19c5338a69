# apps/teamapp/services/team_availability_service.py
import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from django.core.exceptions import ValidationError

from apps.availabilityapp.services.availability_service import AvailabilityService
from apps.availabilityapp.services.slot_generator import CandidateSlot
from apps.availabilityapp.services.slot_service import SlotService, serialize_slot
from apps.bookingapp.utils.time_windows import (
    parse_calendar_date,
    parse_instant,
    resolve_timezone,
)
from apps.eventtypeapp.config import EventConfiguration, resolve_event_configuration
from apps.hostapp.models import Host
from apps.teamapp.models import SchedulingMode, Team
from core.exceptions import InvalidDataException, ResourceNotFoundException

logger = logging.getLogger(__name__)

# Type definitions
MemberSlots = Tuple[Host, List[CandidateSlot]]  # (member host, available slots)


class TeamAvailabilityService:
    """
    Combines the open slots of every accepted team member.

    COLLECTIVE keeps only the slots every member has (exact start and end);
    ROUND_ROBIN offers any slot at least one member has.
    """

    @staticmethod
    def get_team(team) -> Team:
        if isinstance(team, Team):
            return team
        try:
            return Team.objects.get(id=team)
        except (Team.DoesNotExist, ValidationError, ValueError, TypeError):
            raise ResourceNotFoundException(f"Team {team} not found.")

    @staticmethod
    def resolve_mode(mode, team: Team) -> str:
        """Normalize a mode name; None means the team's own mode"""
        if not mode:
            return team.scheduling_mode
        normalized = str(mode).lower()
        if normalized not in SchedulingMode.values:
            raise InvalidDataException(
                f"Unknown scheduling mode {mode!r}; use COLLECTIVE or ROUND_ROBIN."
            )
        return normalized

    @classmethod
    def get_member_slots(
        cls,
        team: Team,
        calendar_date,
        event_config: EventConfiguration,
        now: Optional[datetime] = None,
    ) -> List[MemberSlots]:
        """
        Available slots of each accepted member for the date.

        The date is read on each member's own clock.
        """
        return [
            (member.host, SlotService.get_available_slots(member.host, calendar_date, event_config, now=now))
            for member in team.accepted_members()
        ]

    @staticmethod
    def intersect_slots(slot_lists: Sequence[List[CandidateSlot]]) -> List[CandidateSlot]:
        """Slots present in every list, matched on exact (start, end)"""
        if not slot_lists:
            return []

        common = {slot.as_window() for slot in slot_lists[0]}
        for slots in slot_lists[1:]:
            common &= {slot.as_window() for slot in slots}
            if not common:
                return []

        return [CandidateSlot(start, end) for start, end in sorted(common)]

    @staticmethod
    def union_slots(slot_lists: Sequence[List[CandidateSlot]]) -> List[CandidateSlot]:
        """Slots present in any list, de-duplicated and sorted by start"""
        merged = set()
        for slots in slot_lists:
            merged.update(slot.as_window() for slot in slots)
        return [CandidateSlot(start, end) for start, end in sorted(merged)]

    @classmethod
    def combine(cls, member_slots: List[MemberSlots], mode: str) -> List[CandidateSlot]:
        slot_lists = [slots for _, slots in member_slots]
        if mode == SchedulingMode.COLLECTIVE:
            return cls.intersect_slots(slot_lists)
        return cls.union_slots(slot_lists)

    @classmethod
    def get_team_availability(
        cls,
        team_id,
        calendar_date,
        duration_minutes: Optional[int] = None,
        timezone: str = "UTC",
        mode: Optional[str] = None,
        event_type_id=None,
        now: Optional[datetime] = None,
    ) -> Dict:
        """
        Team slots for one date plus each member's own available slots.

        Args:
            team_id: Team id
            calendar_date: Date (or YYYY-MM-DD)
            duration_minutes: Requested length (defaults to the event type's)
            timezone: Requester's IANA timezone for the output
            mode: COLLECTIVE or ROUND_ROBIN (defaults to the team's mode)
            event_type_id: Optional event type supplying buffers, notice and window
            now: Current instant, for tests

        Returns:
            Dict with team_id, date, mode, slots and members
        """
        requester_tz = resolve_timezone(timezone)
        team = cls.get_team(team_id)
        mode = cls.resolve_mode(mode, team)
        calendar_date = parse_calendar_date(calendar_date)
        event_config, _ = resolve_event_configuration(event_type_id, duration_minutes)

        member_slots = cls.get_member_slots(team, calendar_date, event_config, now=now)
        slots = cls.combine(member_slots, mode)
        logger.info(
            f"Team {team.id} {mode} availability on {calendar_date}: "
            f"{len(slots)} slots across {len(member_slots)} members"
        )

        return {
            "team_id": str(team.id),
            "date": calendar_date.isoformat(),
            "mode": mode,
            "slots": [serialize_slot(slot, requester_tz) for slot in slots],
            "members": [
                {
                    "host_id": str(host.id),
                    "name": host.name,
                    "slots": [serialize_slot(slot, requester_tz) for slot in host_slots],
                }
                for host, host_slots in member_slots
            ],
        }

    @classmethod
    def get_team_slots(
        cls,
        team_id,
        calendar_date,
        duration_minutes: Optional[int] = None,
        timezone: str = "UTC",
        mode: Optional[str] = None,
        event_type_id=None,
        now: Optional[datetime] = None,
    ) -> List[Dict[str, str]]:
        return cls.get_team_availability(
            team_id,
            calendar_date,
            duration_minutes=duration_minutes,
            timezone=timezone,
            mode=mode,
            event_type_id=event_type_id,
            now=now,
        )["slots"]

    @classmethod
    def get_available_members_for_slot(
        cls,
        team,
        start_time,
        duration_minutes: int,
        event_type_id=None,
        now: Optional[datetime] = None,
    ) -> List[Host]:
        """
        Accepted members who could take exactly this slot.

        Args:
            team: Team instance or id
            start_time: Slot start
            duration_minutes: Slot length
            event_type_id: Optional event type for notice and window
            now: Current instant, for tests

        Returns:
            Hosts ordered by id
        """
        team = cls.get_team(team)
        start_time = parse_instant(start_time)

        available = []
        for member in team.accepted_members():
            result = AvailabilityService.check_slot_availability(
                member.host,
                start_time,
                duration_minutes=duration_minutes,
                event_type=event_type_id,
                now=now,
            )
            if result["available"]:
                available.append(member.host)
        return available

