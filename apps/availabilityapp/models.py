# apps/availabilityapp/models.py
import uuid

from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.hostapp.models import Host


class WeeklyRule(models.Model):
    """Recurring weekly window, wall-clock time in the host's timezone"""

    # Same numbering as date.weekday()
    WEEKDAY_CHOICES = (
        (0, _("Monday")),
        (1, _("Tuesday")),
        (2, _("Wednesday")),
        (3, _("Thursday")),
        (4, _("Friday")),
        (5, _("Saturday")),
        (6, _("Sunday")),
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    host = models.ForeignKey(
        Host,
        on_delete=models.CASCADE,
        related_name="weekly_rules",
        verbose_name=_("Host"),
    )
    day_of_week = models.IntegerField(_("Day of Week"), choices=WEEKDAY_CHOICES)
    start_time = models.TimeField(_("Start Time"))
    end_time = models.TimeField(_("End Time"))

    class Meta:
        verbose_name = _("Weekly Rule")
        verbose_name_plural = _("Weekly Rules")
        ordering = ["day_of_week", "start_time"]
        indexes = [models.Index(fields=["host", "day_of_week"], name="weekly_rule_host_day_idx")]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(start_time__lt=models.F("end_time")),
                name="weekly_rule_start_before_end",
            ),
        ]

    def __str__(self):
        return f"{self.host.name} - {self.get_day_of_week_display()}: {self.start_time.strftime('%H:%M')} - {self.end_time.strftime('%H:%M')}"

    def clean(self):
        if self.day_of_week not in range(7):
            raise ValidationError(_("Day of week must be between 0 (Monday) and 6 (Sunday)"))
        if self.start_time >= self.end_time:
            raise ValidationError(_("Start time must be before end time"))

    def save(self, *args, **kwargs):
        self.clean()
        super().save(*args, **kwargs)


class DateOverride(models.Model):
    """
    Date-specific availability replacing the weekly rules for that day.

    A blocked override closes the whole day; an available override supplies
    the single window for the day.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    host = models.ForeignKey(
        Host,
        on_delete=models.CASCADE,
        related_name="date_overrides",
        verbose_name=_("Host"),
    )
    date = models.DateField(_("Date"))
    is_available = models.BooleanField(_("Is Available"), default=False)
    start_time = models.TimeField(_("Start Time"), null=True, blank=True)
    end_time = models.TimeField(_("End Time"), null=True, blank=True)
    reason = models.CharField(_("Reason"), max_length=255, blank=True)

    class Meta:
        verbose_name = _("Date Override")
        verbose_name_plural = _("Date Overrides")
        unique_together = ("host", "date")
        ordering = ["date"]

    def __str__(self):
        if not self.is_available:
            return f"{self.host.name} - {self.date.strftime('%Y-%m-%d')} (Blocked)"
        return f"{self.host.name} - {self.date.strftime('%Y-%m-%d')}: {self.start_time.strftime('%H:%M')} - {self.end_time.strftime('%H:%M')}"

    def clean(self):
        if self.is_available:
            if self.start_time is None or self.end_time is None:
                raise ValidationError(_("Available overrides need both start and end time"))
            if self.start_time >= self.end_time:
                raise ValidationError(_("Start time must be before end time"))

    def save(self, *args, **kwargs):
        self.clean()
        super().save(*args, **kwargs)
