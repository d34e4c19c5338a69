from django.contrib import admin

from apps.eventtypeapp.models import EventType


@admin.register(EventType)
class EventTypeAdmin(admin.ModelAdmin):
    list_display = [
        "title",
        "host",
        "duration_minutes",
        "buffer_before_minutes",
        "buffer_after_minutes",
        "minimum_notice_minutes",
        "max_booking_window_days",
        "is_active",
    ]
    list_filter = ["is_active"]
    search_fields = ["title", "host__name"]
