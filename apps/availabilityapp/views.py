"""
Availability views for Slotkeeper
Open slots, slot checks, weekly schedules and date overrides of a host
"""

from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.availabilityapp.serializers import (
    DateOverrideSerializer,
    DateRangeQuerySerializer,
    SlotCheckQuerySerializer,
    SlotQuerySerializer,
    SlotSerializer,
    WeeklyRuleSerializer,
    WeeklyScheduleSerializer,
)
from apps.availabilityapp.services.availability_service import AvailabilityService
from apps.availabilityapp.services.slot_service import SlotService
from apps.bookingapp.utils.time_windows import to_iso
from apps.hostapp.services.host_service import HostService
from core.exceptions import ResourceNotFoundException


class HostAvailabilityViewSet(viewsets.ViewSet):
    """
    Availability of one host.

    Dates are calendar dates on the host's clock; slot instants are returned
    in the requester's timezone.
    """

    @swagger_auto_schema(
        operation_summary="Open slots of a host for one date",
        query_serializer=SlotQuerySerializer,
        responses={
            200: SlotSerializer(many=True),
            400: "Bad Request - Invalid date, duration or timezone",
            404: "Not Found - Host or event type not found",
        },
        tags=["Availability"],
    )
    @action(detail=True, methods=["get"])
    def slots(self, request, pk=None):
        serializer = SlotQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        slots = SlotService.get_open_slots(
            pk,
            data["date"],
            duration_minutes=data.get("duration_minutes"),
            timezone=data["timezone"],
            event_type_id=data.get("event_type_id"),
        )
        return Response(slots)

    @swagger_auto_schema(
        operation_summary="Check whether a specific slot can be booked",
        query_serializer=SlotCheckQuerySerializer,
        tags=["Availability"],
    )
    @action(detail=True, methods=["get"])
    def check(self, request, pk=None):
        serializer = SlotCheckQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = AvailabilityService.check_slot_availability(
            pk,
            data["start_time"],
            duration_minutes=data.get("duration_minutes"),
            event_type=data.get("event_type_id"),
        )
        return Response(
            {
                "available": result["available"],
                "reason": result["reason"],
                "start_time": result["start_time"].isoformat(),
                "end_time": result["end_time"].isoformat(),
            }
        )

    @swagger_auto_schema(
        operation_summary="Open windows per day for a date range",
        query_serializer=DateRangeQuerySerializer,
        tags=["Availability"],
    )
    @action(detail=True, methods=["get"], url_path="range")
    def availability_range(self, request, pk=None):
        serializer = DateRangeQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        host = HostService.get_host(pk)
        windows_by_date = AvailabilityService.get_availability_range(
            host,
            serializer.validated_data["start_date"],
            serializer.validated_data["end_date"],
        )
        return Response(
            {
                day.isoformat(): [
                    {"start_time": to_iso(start, host.tz), "end_time": to_iso(end, host.tz)}
                    for start, end in windows
                ]
                for day, windows in windows_by_date.items()
            }
        )

    @swagger_auto_schema(
        method="get",
        operation_summary="Weekly schedule of a host",
        responses={200: WeeklyRuleSerializer(many=True)},
        tags=["Availability"],
    )
    @swagger_auto_schema(
        method="put",
        operation_summary="Replace the weekly schedule of a host",
        request_body=WeeklyScheduleSerializer,
        responses={200: WeeklyRuleSerializer(many=True)},
        tags=["Availability"],
    )
    @action(detail=True, methods=["get", "put"], url_path="weekly-schedule")
    def weekly_schedule(self, request, pk=None):
        if request.method == "PUT":
            serializer = WeeklyScheduleSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            rules = AvailabilityService.set_weekly_schedule(pk, serializer.validated_data["rules"])
        else:
            rules = AvailabilityService.get_weekly_schedule(pk)
        return Response(WeeklyRuleSerializer(rules, many=True).data)

    @swagger_auto_schema(
        method="get",
        operation_summary="Date overrides of a host",
        manual_parameters=[
            openapi.Parameter("start_date", openapi.IN_QUERY, type=openapi.TYPE_STRING, format="date"),
            openapi.Parameter("end_date", openapi.IN_QUERY, type=openapi.TYPE_STRING, format="date"),
        ],
        responses={200: DateOverrideSerializer(many=True)},
        tags=["Availability"],
    )
    @swagger_auto_schema(
        method="put",
        operation_summary="Create or replace the override for a date",
        request_body=DateOverrideSerializer,
        responses={200: DateOverrideSerializer},
        tags=["Availability"],
    )
    @action(detail=True, methods=["get", "put"])
    def overrides(self, request, pk=None):
        if request.method == "PUT":
            serializer = DateOverrideSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            data = serializer.validated_data
            override = AvailabilityService.set_date_override(
                pk,
                data["date"],
                data.get("is_available", False),
                start_time=data.get("start_time"),
                end_time=data.get("end_time"),
                reason=data.get("reason", ""),
            )
            return Response(DateOverrideSerializer(override).data)

        overrides = AvailabilityService.get_date_overrides(
            pk,
            start_date=request.query_params.get("start_date"),
            end_date=request.query_params.get("end_date"),
        )
        return Response(DateOverrideSerializer(overrides, many=True).data)

    @swagger_auto_schema(
        operation_summary="Delete the override for a date",
        responses={204: "Deleted", 404: "Not Found - No override for that date"},
        tags=["Availability"],
    )
    @action(
        detail=True,
        methods=["delete"],
        url_path=r"overrides/(?P<override_date>\d{4}-\d{2}-\d{2})",
    )
    def delete_override(self, request, pk=None, override_date=None):
        if not AvailabilityService.delete_date_override(pk, override_date):
            raise ResourceNotFoundException(f"No override on {override_date}.")
        return Response(status=status.HTTP_204_NO_CONTENT)
