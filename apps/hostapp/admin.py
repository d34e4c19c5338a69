from django.contrib import admin

from apps.hostapp.models import Host


@admin.register(Host)
class HostAdmin(admin.ModelAdmin):
    list_display = ["name", "email", "timezone", "is_active", "created_at"]
    list_filter = ["is_active", "timezone"]
    search_fields = ["name", "email"]
    readonly_fields = ["created_at", "updated_at"]
