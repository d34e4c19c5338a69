# apps/bookingapp/signals.py
import logging

from django.db.models.signals import post_save
from django.dispatch import receiver

from apps.bookingapp.models import Booking, BookingStatus

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Booking)
def booking_post_save(sender, instance, created, **kwargs):
    """
    Log booking lifecycle transitions.

    Slot lists are computed from live bookings on every read, so nothing has
    to be invalidated here.
    """
    if created:
        logger.info(
            f"Booking {instance.id} created for host {instance.host_id} "
            f"{instance.start_time.isoformat()} - {instance.end_time.isoformat()} ({instance.status})"
        )
        return

    if instance.tracker.has_changed("status"):
        previous = instance.tracker.previous("status")
        if instance.status == BookingStatus.CANCELLED:
            logger.info(f"Booking {instance.id} cancelled (was {previous}); its time is free again")
        else:
            logger.info(f"Booking {instance.id} status {previous} -> {instance.status}")

    if instance.tracker.has_changed("start_time") or instance.tracker.has_changed("end_time"):
        logger.info(
            f"Booking {instance.id} rescheduled from "
            f"{instance.tracker.previous('start_time')} to {instance.start_time.isoformat()}"
        )
