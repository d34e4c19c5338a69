"""
Team views for Slotkeeper
Team availability, member assignment and team bookings
"""

from drf_yasg.utils import swagger_auto_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.bookingapp.serializers import BookingSerializer
from apps.hostapp.serializers import HostSerializer
from apps.teamapp.models import Team
from apps.teamapp.serializers import (
    AvailableMembersQuerySerializer,
    LoadDistributionQuerySerializer,
    TeamBookingCreateSerializer,
    TeamSerializer,
    TeamSlotQuerySerializer,
)
from apps.teamapp.services.member_allocation_service import MemberAllocationService
from apps.teamapp.services.team_availability_service import TeamAvailabilityService
from apps.teamapp.services.team_booking_service import TeamBookingService


class TeamViewSet(viewsets.ReadOnlyModelViewSet):
    """
    API endpoint for teams.

    A collective team is booked as a whole; a round-robin team hands each
    booking to the least loaded free member.
    """

    queryset = Team.objects.prefetch_related("members__host")
    serializer_class = TeamSerializer
    filterset_fields = ["scheduling_mode", "is_active"]
    ordering_fields = ["name", "created_at"]

    @swagger_auto_schema(
        operation_summary="Team slots with each member's own slots",
        query_serializer=TeamSlotQuerySerializer,
        tags=["Teams"],
    )
    @action(detail=True, methods=["get"])
    def availability(self, request, pk=None):
        serializer = TeamSlotQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = TeamAvailabilityService.get_team_availability(
            pk,
            data["date"],
            duration_minutes=data.get("duration_minutes"),
            timezone=data["timezone"],
            mode=data.get("mode"),
            event_type_id=data.get("event_type_id"),
        )
        return Response(result)

    @swagger_auto_schema(
        operation_summary="Bookable team slots for one date",
        query_serializer=TeamSlotQuerySerializer,
        tags=["Teams"],
    )
    @action(detail=True, methods=["get"])
    def slots(self, request, pk=None):
        serializer = TeamSlotQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        slots = TeamAvailabilityService.get_team_slots(
            pk,
            data["date"],
            duration_minutes=data.get("duration_minutes"),
            timezone=data["timezone"],
            mode=data.get("mode"),
            event_type_id=data.get("event_type_id"),
        )
        return Response(slots)

    @swagger_auto_schema(
        operation_summary="Members free for a specific slot",
        query_serializer=AvailableMembersQuerySerializer,
        responses={200: HostSerializer(many=True)},
        tags=["Teams"],
    )
    @action(detail=True, methods=["get"], url_path="available-members")
    def available_members(self, request, pk=None):
        serializer = AvailableMembersQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        hosts = TeamAvailabilityService.get_available_members_for_slot(
            pk,
            data["start_time"],
            data["duration_minutes"],
            event_type_id=data.get("event_type_id"),
        )
        return Response(HostSerializer(hosts, many=True).data)

    @swagger_auto_schema(
        operation_summary="Bookings created per member in a date range",
        query_serializer=LoadDistributionQuerySerializer,
        tags=["Teams"],
    )
    @action(detail=True, methods=["get"], url_path="load-distribution")
    def load_distribution(self, request, pk=None):
        serializer = LoadDistributionQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        distribution = MemberAllocationService.get_load_distribution(
            pk,
            data["start_date"],
            data["end_date"],
            event_type_id=data.get("event_type_id"),
        )
        return Response(distribution)

    @swagger_auto_schema(
        operation_summary="Book a team slot",
        request_body=TeamBookingCreateSerializer,
        responses={
            201: BookingSerializer(many=True),
            400: "Bad Request - Invalid data",
            404: "Not Found - Team or event type not found",
            409: "Conflict - No member (or not every member) is free",
            504: "Timeout - Outcome unknown, look the booking up before retrying",
        },
        tags=["Teams"],
    )
    @action(detail=True, methods=["post"])
    def book(self, request, pk=None):
        serializer = TeamBookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        bookings = TeamBookingService.create_team_booking(
            pk,
            data["start_time"],
            data["end_time"],
            event_type_id=data.get("event_type_id"),
            guest_info=data["guest"],
            mode=data.get("mode"),
            status=data["status"],
            idempotency_key=data.get("idempotency_key") or request.headers.get("Idempotency-Key"),
        )
        return Response(BookingSerializer(bookings, many=True).data, status=status.HTTP_201_CREATED)
