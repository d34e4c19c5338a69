# apps/availabilityapp/serializers.py
from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from apps.availabilityapp.models import DateOverride, WeeklyRule


class WeeklyRuleSerializer(serializers.ModelSerializer):
    day_name = serializers.CharField(source="get_day_of_week_display", read_only=True)

    class Meta:
        model = WeeklyRule
        fields = ["id", "day_of_week", "day_name", "start_time", "end_time"]
        read_only_fields = ["id"]
        extra_kwargs = {
            "day_of_week": {
                "help_text": _("Day of the week, 0 = Monday through 6 = Sunday")
            }
        }

    def validate(self, data):
        if data["start_time"] >= data["end_time"]:
            raise serializers.ValidationError(_("Start time must be before end time"))
        return data


class WeeklyScheduleSerializer(serializers.Serializer):
    """Full replacement of a host's weekly rules"""

    rules = WeeklyRuleSerializer(many=True)


class DateOverrideSerializer(serializers.ModelSerializer):
    class Meta:
        model = DateOverride
        fields = ["id", "date", "is_available", "start_time", "end_time", "reason"]
        read_only_fields = ["id"]

    def validate(self, data):
        if data.get("is_available"):
            start_time = data.get("start_time")
            end_time = data.get("end_time")
            if start_time is None or end_time is None:
                raise serializers.ValidationError(
                    _("Available overrides need both start and end time")
                )
            if start_time >= end_time:
                raise serializers.ValidationError(_("Start time must be before end time"))
        return data


class SlotQuerySerializer(serializers.Serializer):
    date = serializers.DateField()
    duration_minutes = serializers.IntegerField(required=False, min_value=1)
    timezone = serializers.CharField(required=False, default="UTC")
    event_type_id = serializers.UUIDField(required=False)

    def validate(self, data):
        if not data.get("duration_minutes") and not data.get("event_type_id"):
            raise serializers.ValidationError(
                _("Either duration_minutes or event_type_id is required")
            )
        return data


class SlotCheckQuerySerializer(serializers.Serializer):
    start_time = serializers.DateTimeField()
    duration_minutes = serializers.IntegerField(required=False, min_value=1)
    event_type_id = serializers.UUIDField(required=False)

    def validate(self, data):
        if not data.get("duration_minutes") and not data.get("event_type_id"):
            raise serializers.ValidationError(
                _("Either duration_minutes or event_type_id is required")
            )
        return data


class DateRangeQuerySerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()


class SlotSerializer(serializers.Serializer):
    start_time = serializers.CharField()
    end_time = serializers.CharField()
