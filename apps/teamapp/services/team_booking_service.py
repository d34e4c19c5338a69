# apps/teamapp/services/team_booking_service.py
import logging
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from apps.bookingapp.models import Booking, BookingStatus
from apps.bookingapp.services.booking_service import BookingService, admission_transaction
from apps.teamapp.models import SchedulingMode
from apps.teamapp.services.member_allocation_service import MemberAllocationService
from apps.teamapp.services.team_availability_service import TeamAvailabilityService
from core.exceptions import BookingConflictException, InvalidDataException

logger = logging.getLogger(__name__)


def slot_duration_minutes(start_time: datetime, end_time: datetime) -> int:
    return int((end_time - start_time) / timedelta(minutes=1))


class TeamBookingService:
    """
    Books a team meeting.

    ROUND_ROBIN books one member chosen by recent load; COLLECTIVE books every
    accepted member in a single transaction, or nobody.
    """

    @classmethod
    def validate_team_availability(
        cls,
        team,
        start_time,
        duration_minutes: int,
        mode: Optional[str] = None,
        event_type_id=None,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Check a team slot before booking.

        Returns:
            {"valid": bool, "assigned_host_id": str or None}
        """
        team = TeamAvailabilityService.get_team(team)
        mode = TeamAvailabilityService.resolve_mode(mode, team)
        members = list(team.accepted_members())
        if not members:
            return {"valid": False, "assigned_host_id": None}

        if mode == SchedulingMode.COLLECTIVE:
            available = TeamAvailabilityService.get_available_members_for_slot(
                team, start_time, duration_minutes, event_type_id=event_type_id, now=now
            )
            return {"valid": len(available) == len(members), "assigned_host_id": None}

        host = MemberAllocationService.assign_round_robin_member(
            team, start_time, duration_minutes, event_type_id=event_type_id, now=now
        )
        return {"valid": host is not None, "assigned_host_id": str(host.id) if host else None}

    @classmethod
    def create_team_booking(
        cls,
        team_id,
        start_time,
        end_time,
        event_type_id=None,
        guest_info: Optional[Dict[str, Any]] = None,
        mode: Optional[str] = None,
        status: str = BookingStatus.CONFIRMED,
        idempotency_key: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> List[Booking]:
        """
        Book a slot with a team.

        Args:
            team_id: Team id
            start_time: Slot start
            end_time: Slot end
            event_type_id: Optional event type whose buffers are snapshotted
            guest_info: Dict with name, email and optional phone, timezone, notes
            mode: COLLECTIVE or ROUND_ROBIN (defaults to the team's mode)
            status: PENDING or CONFIRMED
            idempotency_key: Optional client key
            now: Current instant, for tests

        Returns:
            The created bookings (one for round robin, one per member for collective)

        Raises:
            BookingConflictException: no member (round robin) or not every
                member (collective) can take the slot
        """
        team = TeamAvailabilityService.get_team(team_id)
        mode = TeamAvailabilityService.resolve_mode(mode, team)
        start_time, end_time = BookingService.validate_interval(start_time, end_time)
        guest = BookingService.validate_guest_info(guest_info)
        event_type = BookingService.get_event_type(event_type_id)

        if mode == SchedulingMode.ROUND_ROBIN:
            return [
                cls._book_round_robin(
                    team, start_time, end_time, event_type, guest, status, idempotency_key, now
                )
            ]
        return cls._book_collective(
            team, start_time, end_time, event_type, guest, status, idempotency_key, now
        )

    @classmethod
    def _book_round_robin(
        cls, team, start_time, end_time, event_type, guest, status, idempotency_key, now
    ) -> Booking:
        duration = slot_duration_minutes(start_time, end_time)
        eligible = TeamAvailabilityService.get_available_members_for_slot(
            team, start_time, duration, event_type_id=getattr(event_type, "id", None), now=now
        )
        ranked = MemberAllocationService.rank_members(eligible, now=now)
        if not ranked:
            raise BookingConflictException("No team member is available at that time.")

        # The preferred member may have been booked since the check; try the next one
        for host in ranked:
            try:
                booking = BookingService.admit_booking(
                    host.id,
                    start_time,
                    end_time,
                    event_type_id=getattr(event_type, "id", None),
                    guest_info=guest,
                    status=status,
                    idempotency_key=idempotency_key,
                    team=team,
                )
            except BookingConflictException:
                logger.info(f"Round-robin candidate {host.id} was taken, trying next member")
                continue
            logger.info(f"Round-robin booking {booking.id} assigned to host {host.id}")
            return booking

        raise BookingConflictException("No team member is available at that time.")

    @staticmethod
    def find_group_by_idempotency_key(idempotency_key) -> Optional[List[Booking]]:
        """The bookings an earlier collective request with this key produced"""
        existing = BookingService.find_booking_by_idempotency_key(idempotency_key)
        if existing is None:
            return None
        if existing.group_id:
            return list(Booking.objects.filter(group_id=existing.group_id).order_by("host_id"))
        return [existing]

    @classmethod
    def _book_collective(
        cls, team, start_time, end_time, event_type, guest, status, idempotency_key, now
    ) -> List[Booking]:
        if idempotency_key:
            replay = cls.find_group_by_idempotency_key(idempotency_key)
            if replay is not None:
                logger.info(f"Idempotent replay of collective booking {idempotency_key}")
                return replay

        members = list(team.accepted_members())
        if not members:
            raise InvalidDataException(f"Team {team.id} has no accepted members.")

        duration = slot_duration_minutes(start_time, end_time)
        group_id = uuid.uuid4()
        bookings = []
        try:
            available = TeamAvailabilityService.get_available_members_for_slot(
                team, start_time, duration, event_type_id=getattr(event_type, "id", None), now=now
            )
            if len(available) != len(members):
                raise BookingConflictException("Not every team member is available at that time.")

            with admission_transaction():
                hosts = BookingService.lock_hosts(member.host_id for member in members)
                for index, host in enumerate(hosts):
                    bookings.append(
                        BookingService.create_locked_booking(
                            host,
                            start_time,
                            end_time,
                            event_type,
                            guest,
                            status=status,
                            team=team,
                            group_id=group_id,
                            # The key marks the group through its first booking
                            idempotency_key=(idempotency_key or None) if index == 0 else None,
                        )
                    )
        except BookingConflictException:
            # A concurrent request with the same key may have won the race
            if idempotency_key:
                replay = cls.find_group_by_idempotency_key(idempotency_key)
                if replay is not None:
                    return replay
            raise

        logger.info(f"Collective booking group {group_id} created for {len(bookings)} members")
        return bookings
