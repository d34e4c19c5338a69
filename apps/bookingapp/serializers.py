# apps/bookingapp/serializers.py
from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from apps.bookingapp.models import Booking, BookingStatus


class BookingSerializer(serializers.ModelSerializer):
    """Booking as returned by the API"""

    host_name = serializers.CharField(source="host.name", read_only=True)
    status_display = serializers.CharField(source="get_status_display", read_only=True)
    duration_minutes = serializers.IntegerField(read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "host",
            "host_name",
            "event_type",
            "team",
            "group_id",
            "start_time",
            "end_time",
            "duration_minutes",
            "status",
            "status_display",
            "buffer_before",
            "buffer_after",
            "guest_name",
            "guest_email",
            "guest_phone",
            "guest_timezone",
            "notes",
            "cancellation_reason",
            "idempotency_key",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class GuestInfoSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True)
    timezone = serializers.CharField(max_length=64, required=False, default="UTC")
    notes = serializers.CharField(required=False, allow_blank=True)


class BookingCreateSerializer(serializers.Serializer):
    """Input for creating a booking"""

    host_id = serializers.UUIDField()
    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField()
    event_type_id = serializers.UUIDField(required=False, allow_null=True)
    guest = GuestInfoSerializer()
    status = serializers.ChoiceField(
        choices=[BookingStatus.PENDING, BookingStatus.CONFIRMED],
        default=BookingStatus.CONFIRMED,
    )
    idempotency_key = serializers.CharField(max_length=128, required=False, allow_blank=True)

    def validate(self, data):
        if data["end_time"] <= data["start_time"]:
            raise serializers.ValidationError(_("End time must be after start time"))
        return data


class BookingCancelSerializer(serializers.Serializer):
    """Serializer for cancelling a booking"""

    reason = serializers.CharField(required=False, allow_blank=True)


class BookingRescheduleSerializer(serializers.Serializer):
    """Serializer for rescheduling a booking"""

    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField()

    def validate(self, data):
        if data["end_time"] <= data["start_time"]:
            raise serializers.ValidationError(_("End time must be after start time"))
        return data
