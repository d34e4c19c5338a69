"""
Booking app views for Slotkeeper
Handles booking creation, listing, cancellation and rescheduling
"""

from django_filters.rest_framework import DjangoFilterBackend
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.response import Response

from apps.bookingapp.filters import BookingFilter
from apps.bookingapp.models import Booking
from apps.bookingapp.serializers import (
    BookingCancelSerializer,
    BookingCreateSerializer,
    BookingRescheduleSerializer,
    BookingSerializer,
)
from apps.bookingapp.services.booking_service import BookingService
from core.exceptions import ResourceNotFoundException


class BookingViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    API endpoint for bookings.

    Creation, cancellation and rescheduling go through the admission
    controller; a 409 response means the time was just taken.
    """

    queryset = Booking.objects.select_related("host", "event_type", "team")
    serializer_class = BookingSerializer
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_class = BookingFilter
    search_fields = ["guest_name", "guest_email", "host__name"]
    ordering_fields = ["start_time", "created_at", "status"]
    ordering = ["-start_time"]

    @swagger_auto_schema(
        operation_summary="Create a booking",
        request_body=BookingCreateSerializer,
        manual_parameters=[
            openapi.Parameter(
                "Idempotency-Key",
                openapi.IN_HEADER,
                description="Repeating a key returns the booking it first created",
                type=openapi.TYPE_STRING,
                required=False,
            )
        ],
        responses={
            201: BookingSerializer,
            400: "Bad Request - Invalid data",
            404: "Not Found - Host or event type not found",
            409: "Conflict - That time was just taken",
            504: "Timeout - Outcome unknown, look the booking up before retrying",
        },
        tags=["Bookings"],
    )
    def create(self, request, *args, **kwargs):
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        booking = BookingService.admit_booking(
            host_id=data["host_id"],
            start_time=data["start_time"],
            end_time=data["end_time"],
            event_type_id=data.get("event_type_id"),
            guest_info=data["guest"],
            status=data["status"],
            idempotency_key=data.get("idempotency_key") or request.headers.get("Idempotency-Key"),
        )
        return Response(self.get_serializer(booking).data, status=status.HTTP_201_CREATED)

    @swagger_auto_schema(
        operation_summary="Cancel a booking",
        request_body=BookingCancelSerializer,
        responses={200: BookingSerializer, 404: "Not Found - Booking not found"},
        tags=["Bookings"],
    )
    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        """Cancel a booking; its time is free again immediately"""
        serializer = BookingCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        booking = BookingService.cancel_booking(pk, reason=serializer.validated_data.get("reason", ""))
        return Response(self.get_serializer(booking).data)

    @swagger_auto_schema(
        operation_summary="Reschedule a booking",
        request_body=BookingRescheduleSerializer,
        responses={
            200: BookingSerializer,
            404: "Not Found - Booking not found",
            409: "Conflict - The new time is taken",
        },
        tags=["Bookings"],
    )
    @action(detail=True, methods=["post"])
    def reschedule(self, request, pk=None):
        serializer = BookingRescheduleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        booking = BookingService.reschedule_booking(
            pk,
            serializer.validated_data["start_time"],
            serializer.validated_data["end_time"],
        )
        return Response(self.get_serializer(booking).data)

    @swagger_auto_schema(
        operation_summary="Find a booking by idempotency key",
        manual_parameters=[
            openapi.Parameter("key", openapi.IN_QUERY, type=openapi.TYPE_STRING, required=True)
        ],
        responses={200: BookingSerializer, 404: "Not Found - No booking for that key"},
        tags=["Bookings"],
    )
    @action(detail=False, methods=["get"], url_path="by-idempotency-key")
    def by_idempotency_key(self, request):
        """Lets clients re-check after an outcome-unknown timeout"""
        key = request.query_params.get("key", "")
        booking = BookingService.find_booking_by_idempotency_key(key)
        if booking is None:
            raise ResourceNotFoundException(f"No booking for idempotency key {key!r}.")
        return Response(self.get_serializer(booking).data)
