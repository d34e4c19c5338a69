# apps/teamapp/serializers.py
from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from apps.bookingapp.models import BookingStatus
from apps.bookingapp.serializers import GuestInfoSerializer
from apps.teamapp.models import SchedulingMode, Team, TeamMember


class TeamMemberSerializer(serializers.ModelSerializer):
    host_name = serializers.CharField(source="host.name", read_only=True)
    host_timezone = serializers.CharField(source="host.timezone", read_only=True)

    class Meta:
        model = TeamMember
        fields = ["id", "host", "host_name", "host_timezone", "role", "is_accepted", "joined_at"]
        read_only_fields = fields


class TeamSerializer(serializers.ModelSerializer):
    members = TeamMemberSerializer(many=True, read_only=True)
    scheduling_mode_display = serializers.CharField(
        source="get_scheduling_mode_display", read_only=True
    )

    class Meta:
        model = Team
        fields = [
            "id",
            "name",
            "slug",
            "scheduling_mode",
            "scheduling_mode_display",
            "is_active",
            "members",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ModeField(serializers.CharField):
    """Scheduling mode, accepted in any letter case"""

    def to_internal_value(self, data):
        value = super().to_internal_value(data).lower()
        if value not in SchedulingMode.values:
            raise serializers.ValidationError(
                _("Mode must be one of: %(modes)s") % {"modes": ", ".join(SchedulingMode.values)}
            )
        return value


class TeamSlotQuerySerializer(serializers.Serializer):
    date = serializers.DateField()
    duration_minutes = serializers.IntegerField(required=False, min_value=1)
    timezone = serializers.CharField(required=False, default="UTC")
    mode = ModeField(required=False)
    event_type_id = serializers.UUIDField(required=False)

    def validate(self, data):
        if not data.get("duration_minutes") and not data.get("event_type_id"):
            raise serializers.ValidationError(
                _("Either duration_minutes or event_type_id is required")
            )
        return data


class AvailableMembersQuerySerializer(serializers.Serializer):
    start_time = serializers.DateTimeField()
    duration_minutes = serializers.IntegerField(min_value=1)
    event_type_id = serializers.UUIDField(required=False)


class LoadDistributionQuerySerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    event_type_id = serializers.UUIDField(required=False)


class TeamBookingCreateSerializer(serializers.Serializer):
    """Input for booking a team slot"""

    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField()
    event_type_id = serializers.UUIDField(required=False, allow_null=True)
    mode = ModeField(required=False)
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
