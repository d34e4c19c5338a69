from django.contrib import admin

from apps.availabilityapp.models import DateOverride, WeeklyRule


@admin.register(WeeklyRule)
class WeeklyRuleAdmin(admin.ModelAdmin):
    list_display = ["host", "day_of_week", "start_time", "end_time"]
    list_filter = ["day_of_week"]
    search_fields = ["host__name"]


@admin.register(DateOverride)
class DateOverrideAdmin(admin.ModelAdmin):
    list_display = ["host", "date", "is_available", "start_time", "end_time", "reason"]
    list_filter = ["is_available", "date"]
    search_fields = ["host__name", "reason"]
    date_hierarchy = "date"
