# apps/teamapp/services/member_allocation_service.py
"""
Round-robin member assignment.

The member with the fewest pending, confirmed or completed bookings created
in the trailing lookback window gets the booking. Ties go to the lowest host
id in string order, so the choice is deterministic.
"""

import logging
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional

from django.conf import settings
from django.db.models import Count
from django.utils import timezone

from apps.bookingapp.models import LOAD_BOOKING_STATUSES, Booking
from apps.bookingapp.utils.time_windows import parse_calendar_date
from apps.hostapp.models import Host
from apps.teamapp.services.team_availability_service import TeamAvailabilityService
from core.exceptions import InvalidDataException

logger = logging.getLogger(__name__)


class MemberAllocationService:
    @staticmethod
    def get_recent_load(host_ids: Iterable, now: Optional[datetime] = None) -> Dict[str, int]:
        """
        Bookings created per host within the lookback window.

        Args:
            host_ids: Hosts to count for
            now: End of the window (defaults to timezone.now())

        Returns:
            Dict of str(host_id) -> booking count (0 for hosts without bookings)
        """
        now = now or timezone.now()
        since = now - timedelta(days=settings.ROUND_ROBIN_LOOKBACK_DAYS)
        host_ids = [str(host_id) for host_id in host_ids]

        counts = (
            Booking.objects.filter(
                host_id__in=host_ids,
                status__in=LOAD_BOOKING_STATUSES,
                created_at__gte=since,
                created_at__lte=now,
            )
            .values("host_id")
            .annotate(booking_count=Count("id"))
        )
        load = {host_id: 0 for host_id in host_ids}
        for row in counts:
            load[str(row["host_id"])] = row["booking_count"]
        return load

    @classmethod
    def rank_members(cls, hosts: Iterable[Host], now: Optional[datetime] = None) -> List[Host]:
        """Hosts ordered by recent load, then by id"""
        hosts = list(hosts)
        if not hosts:
            return []
        load = cls.get_recent_load([host.id for host in hosts], now=now)
        return sorted(hosts, key=lambda host: (load[str(host.id)], str(host.id)))

    @classmethod
    def assign_round_robin_member(
        cls,
        team,
        start_time,
        duration_minutes: int,
        event_type_id=None,
        now: Optional[datetime] = None,
    ) -> Optional[Host]:
        """
        Pick the member to receive a round-robin booking.

        Returns:
            The least loaded free member, or None when nobody is free
        """
        eligible = TeamAvailabilityService.get_available_members_for_slot(
            team, start_time, duration_minutes, event_type_id=event_type_id, now=now
        )
        ranked = cls.rank_members(eligible, now=now)
        if not ranked:
            logger.info(f"No team member free at {start_time} for team {getattr(team, 'id', team)}")
            return None
        return ranked[0]

    @classmethod
    def get_load_distribution(cls, team, start_date, end_date, event_type_id=None) -> List[Dict]:
        """
        Bookings created per accepted member within an inclusive date range.

        Returns:
            List of {"host_id", "name", "booking_count"}, busiest first
        """
        team = TeamAvailabilityService.get_team(team)
        start_date = parse_calendar_date(start_date)
        end_date = parse_calendar_date(end_date)
        if end_date < start_date:
            raise InvalidDataException("end_date must not be before start_date.")

        queryset = Booking.objects.filter(
            status__in=LOAD_BOOKING_STATUSES,
            created_at__date__gte=start_date,
            created_at__date__lte=end_date,
        )
        if event_type_id:
            queryset = queryset.filter(event_type_id=event_type_id)

        distribution = []
        for member in team.accepted_members():
            distribution.append(
                {
                    "host_id": str(member.host.id),
                    "name": member.host.name,
                    "booking_count": queryset.filter(host_id=member.host_id).count(),
                }
            )
        return sorted(distribution, key=lambda row: (-row["booking_count"], row["host_id"]))
