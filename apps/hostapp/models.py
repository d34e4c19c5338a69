# apps/hostapp/models.py
import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.bookingapp.utils.time_windows import resolve_timezone


class Host(models.Model):
    """
    A bookable person or resource.

    All weekly rules and date overrides of a host are wall-clock times in the
    host's own timezone. Admissions lock this row to serialize bookings.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(_("Name"), max_length=255)
    email = models.EmailField(_("Email"), blank=True)
    timezone = models.CharField(_("Timezone"), max_length=64, default="UTC")
    is_active = models.BooleanField(_("Active"), default=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Host")
        verbose_name_plural = _("Hosts")
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.timezone})"

    @property
    def tz(self):
        """The host's timezone as a tzinfo object"""
        return resolve_timezone(self.timezone)

    def clean(self):
        # Raises InvalidTimezoneException for unknown names
        resolve_timezone(self.timezone)

    def save(self, *args, **kwargs):
        self.clean()
        super().save(*args, **kwargs)
