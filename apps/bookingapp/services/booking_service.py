"""
Booking admission for Slotkeeper.

Admission is the only serialized path in the engine. Every create or
reschedule locks the host row inside one database transaction, re-reads the
host's active bookings and re-applies the buffer-aware overlap rule before
writing. Two requests for overlapping time on the same host therefore queue
at the database, across any number of service processes, and only the first
one can commit.
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import IntegrityError, OperationalError, connection, transaction

from apps.availabilityapp.services.conflict_filter import conflicting_bookings
from apps.bookingapp.models import Booking, BookingStatus
from apps.bookingapp.utils.time_windows import parse_instant, resolve_timezone
from apps.eventtypeapp.models import EventType
from apps.hostapp.models import Host
from core.exceptions import (
    AdmissionOutcomeUnknownException,
    BookingConflictException,
    InvalidDataException,
    ResourceNotFoundException,
)

logger = logging.getLogger(__name__)

TIMEOUT_MARKERS = ("lock timeout", "statement timeout", "canceling statement", "database is locked")


def _apply_admission_timeout():
    """Bound lock waits and statements of the current transaction"""
    if connection.vendor != "postgresql":
        # SQLite waits on its busy timeout (OPTIONS["timeout"])
        return
    timeout_ms = int(settings.BOOKING_ADMISSION_TIMEOUT_SECONDS * 1000)
    with connection.cursor() as cursor:
        cursor.execute(f"SET LOCAL lock_timeout = {timeout_ms}")
        cursor.execute(f"SET LOCAL statement_timeout = {timeout_ms}")


@contextmanager
def admission_transaction():
    """
    Transaction wrapper shared by every admission path.

    Store-level constraint violations become BookingConflictException and
    timeouts or lost connections become AdmissionOutcomeUnknownException.
    """
    try:
        with transaction.atomic():
            _apply_admission_timeout()
            yield
    except IntegrityError as e:
        logger.info(f"Admission rejected by store constraint: {e}")
        raise BookingConflictException()
    except OperationalError as e:
        if any(marker in str(e).lower() for marker in TIMEOUT_MARKERS):
            logger.warning(f"Admission timed out, outcome unknown: {e}")
        else:
            logger.error(f"Store error during admission, outcome unknown: {e}")
        raise AdmissionOutcomeUnknownException()


class BookingService:
    """
    Creates, reschedules and cancels bookings.

    Admissions never consult the availability cache and are never retried
    here; a conflict is final for the request.
    """

    @staticmethod
    def lock_host(host_id) -> Host:
        """Lock the host row for the rest of the current transaction"""
        try:
            return Host.objects.select_for_update().get(id=host_id)
        except (Host.DoesNotExist, ValidationError, ValueError):
            raise ResourceNotFoundException(f"Host {host_id} not found.")

    @classmethod
    def lock_hosts(cls, host_ids: Iterable) -> List[Host]:
        """Lock several hosts in a fixed (id) order so concurrent callers cannot deadlock"""
        return [cls.lock_host(host_id) for host_id in sorted(set(host_ids), key=str)]

    @staticmethod
    def find_conflicts(
        host_id,
        start_time: datetime,
        end_time: datetime,
        buffer_before: int = 0,
        buffer_after: int = 0,
        exclude_booking_id=None,
    ) -> List[Booking]:
        """
        Active bookings of a host that block [start_time, end_time), read live.

        Args:
            host_id: Host id
            start_time: Requested start
            end_time: Requested end
            buffer_before: Buffer the new booking keeps before its start
            buffer_after: Buffer the new booking keeps after its end
            exclude_booking_id: Booking to ignore (the one being rescheduled)

        Returns:
            The blocking bookings
        """
        queryset = (
            Booking.objects.for_host(host_id)
            .active()
            .around(start_time, end_time, settings.MAX_BUFFER_MINUTES)
        )
        if exclude_booking_id is not None:
            queryset = queryset.exclude(id=exclude_booking_id)
        return conflicting_bookings(
            start_time, end_time, list(queryset), buffer_before, buffer_after
        )

    @classmethod
    def create_locked_booking(
        cls,
        host: Host,
        start_time: datetime,
        end_time: datetime,
        event_type: Optional[EventType],
        guest: Dict[str, Any],
        **fields,
    ) -> Booking:
        """
        Check and insert a booking; the caller must hold the host lock.

        Raises:
            ResourceNotFoundException: the host is not taking bookings
            BookingConflictException: the time overlaps an active booking
        """
        if not host.is_active:
            raise ResourceNotFoundException(f"Host {host.id} is not accepting bookings.")

        buffer_before = event_type.buffer_before_minutes if event_type else 0
        buffer_after = event_type.buffer_after_minutes if event_type else 0
        conflicts = cls.find_conflicts(host.id, start_time, end_time, buffer_before, buffer_after)
        if conflicts:
            logger.info(
                f"Booking conflict for host {host.id} at {start_time.isoformat()}: "
                f"{len(conflicts)} blocking booking(s)"
            )
            raise BookingConflictException()

        return Booking.objects.create(
            host=host,
            event_type=event_type,
            start_time=start_time,
            end_time=end_time,
            buffer_before=buffer_before,
            buffer_after=buffer_after,
            guest_name=guest["name"],
            guest_email=guest["email"],
            guest_phone=guest.get("phone", ""),
            guest_timezone=guest.get("timezone", "UTC"),
            notes=guest.get("notes", ""),
            **fields,
        )

    @classmethod
    def admit_booking(
        cls,
        host_id,
        start_time,
        end_time,
        event_type_id=None,
        guest_info: Optional[Dict[str, Any]] = None,
        status: str = BookingStatus.CONFIRMED,
        idempotency_key: Optional[str] = None,
        team=None,
    ) -> Booking:
        """
        Admit a booking for a host if the time is still free.

        Args:
            host_id: Host id
            start_time: Aware datetime or ISO-8601 string with offset
            end_time: Aware datetime or ISO-8601 string with offset
            event_type_id: Optional event type whose buffers are snapshotted
            guest_info: Dict with name, email and optional phone, timezone, notes
            status: PENDING or CONFIRMED
            idempotency_key: Optional client key; repeating it returns the first booking
            team: Optional team the booking was made through

        Returns:
            The new (or previously created) Booking

        Raises:
            BookingConflictException: the time was just taken
            AdmissionOutcomeUnknownException: the store did not answer in time
        """
        start_time, end_time = cls.validate_interval(start_time, end_time)
        guest = cls.validate_guest_info(guest_info)
        event_type = cls.get_event_type(event_type_id)
        if status not in (BookingStatus.PENDING, BookingStatus.CONFIRMED):
            raise InvalidDataException("New bookings must be pending or confirmed.")

        if idempotency_key:
            existing = cls.find_booking_by_idempotency_key(idempotency_key)
            if existing is not None:
                logger.info(f"Idempotent replay of booking {existing.id}")
                return existing

        try:
            with admission_transaction():
                host = cls.lock_host(host_id)
                booking = cls.create_locked_booking(
                    host,
                    start_time,
                    end_time,
                    event_type,
                    guest,
                    status=status,
                    idempotency_key=idempotency_key or None,
                    team=team,
                )
        except BookingConflictException:
            # A concurrent request with the same key may have won the race
            if idempotency_key:
                existing = cls.find_booking_by_idempotency_key(idempotency_key)
                if existing is not None:
                    return existing
            raise

        logger.info(f"Admitted booking {booking.id} for host {booking.host_id}")
        return booking

    @classmethod
    def reschedule_booking(cls, booking_id, start_time, end_time) -> Booking:
        """
        Move an active booking, under the same lock and rule as admission.

        The booking itself is ignored when looking for conflicts.
        """
        start_time, end_time = cls.validate_interval(start_time, end_time)
        booking = cls.get_booking(booking_id)

        with admission_transaction():
            cls.lock_host(booking.host_id)
            booking = Booking.objects.select_for_update().get(id=booking.id)
            if not booking.is_active:
                raise InvalidDataException(f"A {booking.status} booking cannot be rescheduled.")

            conflicts = cls.find_conflicts(
                booking.host_id,
                start_time,
                end_time,
                booking.buffer_before,
                booking.buffer_after,
                exclude_booking_id=booking.id,
            )
            if conflicts:
                logger.info(f"Reschedule of booking {booking.id} conflicts with existing bookings")
                raise BookingConflictException()

            booking.start_time = start_time
            booking.end_time = end_time
            booking.save(update_fields=["start_time", "end_time", "updated_at"])

        return booking

    @classmethod
    def cancel_booking(cls, booking_id, reason: str = "") -> Booking:
        """
        Cancel a booking; the time is free for new bookings immediately.

        Cancelling an already cancelled booking is a no-op.
        """
        with transaction.atomic():
            try:
                booking = Booking.objects.select_for_update().get(id=booking_id)
            except (Booking.DoesNotExist, ValidationError, ValueError):
                raise ResourceNotFoundException(f"Booking {booking_id} not found.")

            if booking.status == BookingStatus.CANCELLED:
                return booking
            if not booking.is_active:
                raise InvalidDataException(f"A {booking.status} booking cannot be cancelled.")

            booking.mark_cancelled(reason)

        return booking

    @staticmethod
    def find_booking_by_idempotency_key(idempotency_key: str) -> Optional[Booking]:
        """Look up the booking a key produced; used to re-check after a timeout"""
        if not idempotency_key:
            return None
        return Booking.objects.filter(idempotency_key=idempotency_key).first()

    @staticmethod
    def get_booking(booking_id) -> Booking:
        try:
            return Booking.objects.select_related("host", "event_type").get(id=booking_id)
        except (Booking.DoesNotExist, ValidationError, ValueError):
            raise ResourceNotFoundException(f"Booking {booking_id} not found.")

    @staticmethod
    def get_event_type(event_type_id) -> Optional[EventType]:
        if not event_type_id:
            return None
        try:
            return EventType.objects.get(id=event_type_id)
        except (EventType.DoesNotExist, ValidationError, ValueError):
            raise ResourceNotFoundException(f"Event type {event_type_id} not found.")

    @staticmethod
    def validate_guest_info(guest_info: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Normalize guest details; name and a valid email are required"""
        guest_info = guest_info or {}
        name = (guest_info.get("name") or "").strip()
        email = (guest_info.get("email") or "").strip()
        if not name:
            raise InvalidDataException("Guest name is required.")
        try:
            validate_email(email)
        except ValidationError:
            raise InvalidDataException(f"Invalid guest email: {email!r}")

        guest_timezone = guest_info.get("timezone") or "UTC"
        resolve_timezone(guest_timezone)

        return {
            "name": name,
            "email": email,
            "phone": guest_info.get("phone") or "",
            "timezone": guest_timezone,
            "notes": guest_info.get("notes") or "",
        }

    @staticmethod
    def validate_interval(start_time, end_time):
        start_time = parse_instant(start_time)
        end_time = parse_instant(end_time)
        if end_time <= start_time:
            raise InvalidDataException("end_time must be after start_time.")
        return start_time, end_time
