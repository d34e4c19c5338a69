# apps/eventtypeapp/models.py
import uuid

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

MAX_BUFFER_MINUTES = 240


class EventType(models.Model):
    """Meeting template: duration, buffers, notice and booking horizon"""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    host = models.ForeignKey(
        "hostapp.Host",
        on_delete=models.CASCADE,
        related_name="event_types",
        verbose_name=_("Host"),
        null=True,
        blank=True,
    )
    title = models.CharField(_("Title"), max_length=255)
    duration_minutes = models.PositiveIntegerField(
        _("Duration (minutes)"),
        default=30,
        validators=[MinValueValidator(5), MaxValueValidator(480)],
    )
    buffer_before_minutes = models.PositiveIntegerField(
        _("Buffer Before (minutes)"),
        default=0,
        validators=[MaxValueValidator(MAX_BUFFER_MINUTES)],
    )
    buffer_after_minutes = models.PositiveIntegerField(
        _("Buffer After (minutes)"),
        default=0,
        validators=[MaxValueValidator(MAX_BUFFER_MINUTES)],
    )
    minimum_notice_minutes = models.PositiveIntegerField(
        _("Minimum Notice (minutes)"), default=0
    )
    max_booking_window_days = models.PositiveIntegerField(
        _("Max Booking Window (days)"),
        default=60,
        validators=[MinValueValidator(1), MaxValueValidator(365)],
    )
    slot_interval_minutes = models.PositiveIntegerField(
        _("Slot Interval (minutes)"),
        default=15,
        validators=[MinValueValidator(1)],
    )
    is_active = models.BooleanField(_("Active"), default=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Event Type")
        verbose_name_plural = _("Event Types")
        ordering = ["title"]

    def __str__(self):
        return f"{self.title} ({self.duration_minutes} min)"

    def clean(self):
        if not 5 <= self.duration_minutes <= 480:
            raise ValidationError(_("Duration must be between 5 and 480 minutes"))
        if self.buffer_before_minutes > MAX_BUFFER_MINUTES or self.buffer_after_minutes > MAX_BUFFER_MINUTES:
            raise ValidationError(
                _("Buffers cannot exceed %(max)s minutes") % {"max": MAX_BUFFER_MINUTES}
            )
        if not 1 <= self.max_booking_window_days <= 365:
            raise ValidationError(_("Booking window must be between 1 and 365 days"))
        if self.slot_interval_minutes < 1:
            raise ValidationError(_("Slot interval must be positive"))

    def save(self, *args, **kwargs):
        self.clean()
        super().save(*args, **kwargs)

    def to_config(self):
        from apps.eventtypeapp.config import EventConfiguration

        return EventConfiguration.from_event_type(self)
