# apps/availabilityapp/signals.py
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from apps.availabilityapp.models import DateOverride, WeeklyRule
from apps.availabilityapp.services.availability_service import AvailabilityService


@receiver(post_save, sender=WeeklyRule)
@receiver(post_delete, sender=WeeklyRule)
def weekly_rule_changed(sender, instance, **kwargs):
    """A weekly rule touches every future date of its weekday"""
    AvailabilityService.invalidate_host_cache(instance.host_id)


@receiver(post_save, sender=DateOverride)
@receiver(post_delete, sender=DateOverride)
def date_override_changed(sender, instance, **kwargs):
    AvailabilityService.invalidate_host_cache(instance.host_id)
