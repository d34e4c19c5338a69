# apps/bookingapp/filters.py
from django.utils import timezone
from django_filters import rest_framework as filters

from apps.bookingapp.models import ACTIVE_BOOKING_STATUSES, Booking, BookingStatus


class BookingFilter(filters.FilterSet):
    """Booking listing filters: host, status and date range"""

    # Date filtering
    start_date = filters.DateFilter(field_name="start_time", lookup_expr="date__gte")
    end_date = filters.DateFilter(field_name="start_time", lookup_expr="date__lte")

    # Status filtering
    status = filters.ChoiceFilter(field_name="status", choices=BookingStatus.choices)
    statuses = filters.MultipleChoiceFilter(field_name="status", choices=BookingStatus.choices)
    active = filters.BooleanFilter(method="filter_active")

    host = filters.UUIDFilter(field_name="host__id")
    event_type = filters.UUIDFilter(field_name="event_type__id")
    team = filters.UUIDFilter(field_name="team__id")
    guest_email = filters.CharFilter(field_name="guest_email", lookup_expr="iexact")

    # Time range helpers
    upcoming = filters.BooleanFilter(method="filter_upcoming")
    past = filters.BooleanFilter(method="filter_past")

    class Meta:
        model = Booking
        fields = [
            "host",
            "event_type",
            "team",
            "status",
            "statuses",
            "active",
            "start_date",
            "end_date",
            "guest_email",
            "upcoming",
            "past",
        ]

    def filter_active(self, queryset, name, value):
        if value is None:
            return queryset
        if value:
            return queryset.filter(status__in=ACTIVE_BOOKING_STATUSES)
        return queryset.exclude(status__in=ACTIVE_BOOKING_STATUSES)

    def filter_upcoming(self, queryset, name, value):
        if value:
            return queryset.filter(start_time__gt=timezone.now())
        return queryset

    def filter_past(self, queryset, name, value):
        if value:
            return queryset.filter(start_time__lt=timezone.now())
        return queryset
