# apps/bookingapp/models.py
import uuid
from datetime import timedelta

from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _
from model_utils import FieldTracker

from apps.eventtypeapp.models import EventType
from apps.hostapp.models import Host


class BookingStatus(models.TextChoices):
    PENDING = "pending", _("Pending")
    CONFIRMED = "confirmed", _("Confirmed")
    CANCELLED = "cancelled", _("Cancelled")
    COMPLETED = "completed", _("Completed")
    NO_SHOW = "no_show", _("No Show")


# Only these statuses occupy the host's calendar
ACTIVE_BOOKING_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)

# Statuses counted as load for round-robin assignment
LOAD_BOOKING_STATUSES = (
    BookingStatus.PENDING,
    BookingStatus.CONFIRMED,
    BookingStatus.COMPLETED,
)


class BookingQuerySet(models.QuerySet):
    def active(self):
        return self.filter(status__in=ACTIVE_BOOKING_STATUSES)

    def for_host(self, host_id):
        return self.filter(host_id=host_id)

    def overlapping(self, start_time, end_time):
        """Bookings whose raw interval intersects [start_time, end_time)"""
        return self.filter(start_time__lt=end_time, end_time__gt=start_time)

    def around(self, start_time, end_time, padding_minutes):
        """Bookings that could block [start_time, end_time) with buffers up to padding_minutes"""
        padding = timedelta(minutes=padding_minutes)
        return self.overlapping(start_time - padding, end_time + padding)


class Booking(models.Model):
    """
    A meeting on a host's calendar.

    Buffers are copied from the event type when the booking is admitted so
    that editing the event type later does not move already blocked time.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    host = models.ForeignKey(
        Host,
        on_delete=models.CASCADE,
        related_name="bookings",
        verbose_name=_("Host"),
    )
    event_type = models.ForeignKey(
        EventType,
        on_delete=models.SET_NULL,
        related_name="bookings",
        verbose_name=_("Event Type"),
        null=True,
        blank=True,
    )
    team = models.ForeignKey(
        "teamapp.Team",
        on_delete=models.SET_NULL,
        related_name="bookings",
        verbose_name=_("Team"),
        null=True,
        blank=True,
    )
    # Shared by the bookings created together for a collective team meeting
    group_id = models.UUIDField(_("Group ID"), null=True, blank=True, db_index=True)
    start_time = models.DateTimeField(_("Start Time"), db_index=True)
    end_time = models.DateTimeField(_("End Time"), db_index=True)
    status = models.CharField(
        _("Status"),
        max_length=20,
        choices=BookingStatus.choices,
        default=BookingStatus.CONFIRMED,
        db_index=True,
    )
    buffer_before = models.PositiveIntegerField(_("Buffer Before (minutes)"), default=0)
    buffer_after = models.PositiveIntegerField(_("Buffer After (minutes)"), default=0)
    guest_name = models.CharField(_("Guest Name"), max_length=255)
    guest_email = models.EmailField(_("Guest Email"))
    guest_phone = models.CharField(_("Guest Phone"), max_length=32, blank=True)
    guest_timezone = models.CharField(_("Guest Timezone"), max_length=64, default="UTC")
    notes = models.TextField(_("Notes"), blank=True)
    cancellation_reason = models.TextField(_("Cancellation Reason"), blank=True)
    idempotency_key = models.CharField(
        _("Idempotency Key"), max_length=128, null=True, blank=True, unique=True
    )
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    objects = BookingQuerySet.as_manager()

    # Track field changes for signals
    tracker = FieldTracker(fields=["status", "start_time", "end_time"])

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-start_time"]
        indexes = [
            models.Index(fields=["host", "start_time", "status"], name="booking_host_start_idx"),
            models.Index(fields=["host", "created_at"], name="booking_host_created_idx"),
        ]

    def __str__(self):
        return f"{self.guest_name} with {self.host.name} - {self.start_time.strftime('%Y-%m-%d %H:%M')}"

    @property
    def is_active(self):
        return self.status in ACTIVE_BOOKING_STATUSES

    @property
    def duration_minutes(self):
        return int((self.end_time - self.start_time).total_seconds() // 60)

    def clean(self):
        """Validate time constraints"""
        if self.end_time <= self.start_time:
            raise ValidationError(_("End time must be after start time"))

    def save(self, *args, **kwargs):
        self.clean()
        super().save(*args, **kwargs)

    def mark_completed(self):
        """Mark booking as completed"""
        self.status = BookingStatus.COMPLETED
        self.save(update_fields=["status", "updated_at"])

    def mark_cancelled(self, reason=""):
        """Mark booking as cancelled; it stops blocking immediately"""
        self.status = BookingStatus.CANCELLED
        self.cancellation_reason = reason or ""
        self.save(update_fields=["status", "cancellation_reason", "updated_at"])
