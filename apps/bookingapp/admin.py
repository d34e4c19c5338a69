# apps/bookingapp/admin.py
from django.contrib import admin

from apps.bookingapp.models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    """Admin configuration for bookings"""

    list_display = [
        "id",
        "host",
        "guest_name",
        "start_time",
        "end_time",
        "status",
        "team",
    ]
    list_filter = ["status", "start_time", "host", "team"]
    search_fields = ["guest_name", "guest_email", "host__name"]
    readonly_fields = ["created_at", "updated_at", "buffer_before", "buffer_after", "group_id"]
    date_hierarchy = "start_time"
