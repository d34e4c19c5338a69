from rest_framework import serializers

from apps.bookingapp.utils.time_windows import is_valid_timezone
from apps.hostapp.models import Host


class HostSerializer(serializers.ModelSerializer):
    class Meta:
        model = Host
        fields = ["id", "name", "email", "timezone", "is_active", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_timezone(self, value):
        if not is_valid_timezone(value):
            raise serializers.ValidationError(f"Unknown timezone: {value}")
        return value
