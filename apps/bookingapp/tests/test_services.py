# apps/bookingapp/tests/test_services.py
from datetime import datetime
from unittest.mock import patch

import pytz
from django.db import IntegrityError, OperationalError
from django.test import TestCase

from apps.bookingapp.models import Booking, BookingStatus
from apps.bookingapp.services.booking_service import BookingService, admission_transaction
from apps.bookingapp.tests.factories import BookingFactory
from apps.eventtypeapp.tests.factories import EventTypeFactory
from apps.hostapp.tests.factories import HostFactory
from core.exceptions import (
    AdmissionOutcomeUnknownException,
    BookingConflictException,
    InvalidDataException,
    InvalidTimezoneException,
    ResourceNotFoundException,
)

GUEST = {"name": "Ada Guest", "email": "ada@example.com"}


def utc(*args):
    return datetime(*args, tzinfo=pytz.utc)


class AdmitBookingTest(TestCase):
    def setUp(self):
        self.host = HostFactory()
        self.start = utc(2030, 6, 3, 10, 0)
        self.end = utc(2030, 6, 3, 10, 30)

    def admit(self, start=None, end=None, **kwargs):
        kwargs.setdefault("guest_info", GUEST)
        return BookingService.admit_booking(
            self.host.id, start or self.start, end or self.end, **kwargs
        )

    def test_admit_creates_confirmed_booking(self):
        booking = self.admit()

        self.assertEqual(booking.status, BookingStatus.CONFIRMED)
        self.assertEqual(booking.host_id, self.host.id)
        self.assertEqual(booking.guest_email, "ada@example.com")
        self.assertEqual(booking.guest_timezone, "UTC")

    def test_admit_accepts_iso_strings(self):
        booking = self.admit("2030-06-03T12:00:00+02:00", "2030-06-03T12:30:00+02:00")
        self.assertEqual(booking.start_time, self.start)

    def test_overlapping_booking_is_rejected(self):
        self.admit()
        with self.assertRaises(BookingConflictException):
            self.admit(utc(2030, 6, 3, 10, 15), utc(2030, 6, 3, 10, 45))
        self.assertEqual(Booking.objects.filter(host=self.host).count(), 1)

    def test_back_to_back_bookings_are_allowed(self):
        self.admit()
        booking = self.admit(self.end, utc(2030, 6, 3, 11, 0))
        self.assertEqual(booking.start_time, self.end)

    def test_other_hosts_are_independent(self):
        self.admit()
        other = HostFactory()
        booking = BookingService.admit_booking(other.id, self.start, self.end, guest_info=GUEST)
        self.assertEqual(booking.host_id, other.id)

    def test_buffers_are_snapshotted_and_enforced(self):
        event_type = EventTypeFactory(host=self.host, buffer_before_minutes=10, buffer_after_minutes=15)
        booking = self.admit(event_type_id=event_type.id)
        self.assertEqual((booking.buffer_before, booking.buffer_after), (10, 15))

        with self.assertRaises(BookingConflictException):
            self.admit(utc(2030, 6, 3, 10, 40), utc(2030, 6, 3, 11, 0))
        with self.assertRaises(BookingConflictException):
            self.admit(utc(2030, 6, 3, 9, 30), utc(2030, 6, 3, 9, 55))

        self.admit(utc(2030, 6, 3, 10, 45), utc(2030, 6, 3, 11, 0))

    def test_new_booking_buffers_block_in_either_order(self):
        buffered = EventTypeFactory(host=self.host, buffer_before_minutes=15, buffer_after_minutes=15)
        later_start, later_end = utc(2030, 6, 3, 10, 40), utc(2030, 6, 3, 11, 10)

        # Buffered meeting first, unbuffered one inside its after-buffer
        self.admit(event_type_id=buffered.id)
        with self.assertRaises(BookingConflictException):
            self.admit(later_start, later_end)

        # Unbuffered meeting first, buffered one would pad over its start
        other = HostFactory()
        other_type = EventTypeFactory(host=other, buffer_before_minutes=15, buffer_after_minutes=15)
        BookingService.admit_booking(other.id, later_start, later_end, guest_info=GUEST)
        with self.assertRaises(BookingConflictException):
            BookingService.admit_booking(
                other.id, self.start, self.end, event_type_id=other_type.id, guest_info=GUEST
            )

        self.assertEqual(Booking.objects.filter(host=self.host).count(), 1)
        self.assertEqual(Booking.objects.filter(host=other).count(), 1)

    def test_new_booking_may_start_where_its_buffer_ends(self):
        BookingFactory(host=self.host, start_time=utc(2030, 6, 3, 10, 45), end_time=utc(2030, 6, 3, 11, 15))
        event_type = EventTypeFactory(host=self.host, buffer_before_minutes=15, buffer_after_minutes=15)

        booking = self.admit(event_type_id=event_type.id)
        self.assertEqual(booking.buffer_after, 15)

    def test_inactive_host_is_not_bookable(self):
        self.host.is_active = False
        self.host.save()

        with self.assertRaises(ResourceNotFoundException):
            self.admit()
        self.assertEqual(Booking.objects.count(), 0)
        self.admit(utc(2030, 6, 3, 9, 30), utc(2030, 6, 3, 9, 50))

    def test_event_type_change_does_not_touch_existing_buffers(self):
        event_type = EventTypeFactory(host=self.host, buffer_after_minutes=15)
        booking = self.admit(event_type_id=event_type.id)

        event_type.buffer_after_minutes = 0
        event_type.save()

        booking.refresh_from_db()
        self.assertEqual(booking.buffer_after, 15)

    def test_cancelled_booking_frees_time(self):
        booking = self.admit()
        BookingService.cancel_booking(booking.id, reason="Changed plans")

        replacement = self.admit()
        self.assertNotEqual(replacement.id, booking.id)

    def test_idempotency_key_replays_first_booking(self):
        first = self.admit(idempotency_key="req-1")
        second = self.admit(idempotency_key="req-1")

        self.assertEqual(first.id, second.id)
        self.assertEqual(Booking.objects.count(), 1)

    def test_invalid_interval(self):
        with self.assertRaises(InvalidDataException):
            self.admit(self.end, self.start)
        with self.assertRaises(InvalidDataException):
            self.admit("2030-06-03T10:00:00", "2030-06-03T10:30:00")

    def test_invalid_guest(self):
        with self.assertRaises(InvalidDataException):
            self.admit(guest_info={"name": "Ada", "email": "not-an-email"})
        with self.assertRaises(InvalidDataException):
            self.admit(guest_info={"email": "ada@example.com"})
        with self.assertRaises(InvalidTimezoneException):
            self.admit(guest_info={**GUEST, "timezone": "Atlantis/Capital"})

    def test_unknown_host_and_event_type(self):
        with self.assertRaises(ResourceNotFoundException):
            BookingService.admit_booking(
                "00000000-0000-0000-0000-000000000000", self.start, self.end, guest_info=GUEST
            )
        with self.assertRaises(ResourceNotFoundException):
            self.admit(event_type_id="00000000-0000-0000-0000-000000000000")

    def test_new_booking_status_must_be_pending_or_confirmed(self):
        self.assertEqual(self.admit(status=BookingStatus.PENDING).status, BookingStatus.PENDING)
        with self.assertRaises(InvalidDataException):
            self.admit(utc(2030, 6, 3, 12, 0), utc(2030, 6, 3, 12, 30), status=BookingStatus.COMPLETED)

    @patch.object(BookingService, "lock_host", side_effect=OperationalError("database is locked"))
    def test_store_timeout_reports_unknown_outcome(self, mock_lock):
        with self.assertRaises(AdmissionOutcomeUnknownException):
            self.admit()
        self.assertEqual(Booking.objects.count(), 0)


class AdmissionTransactionTest(TestCase):
    def test_integrity_error_becomes_conflict(self):
        with self.assertRaises(BookingConflictException):
            with admission_transaction():
                raise IntegrityError("conflicting key value violates exclusion constraint")

    def test_operational_error_becomes_outcome_unknown(self):
        with self.assertRaises(AdmissionOutcomeUnknownException):
            with admission_transaction():
                raise OperationalError("canceling statement due to lock timeout")


class RescheduleBookingTest(TestCase):
    def setUp(self):
        self.host = HostFactory()
        self.booking = BookingFactory(
            host=self.host, start_time=utc(2030, 6, 3, 10, 0), end_time=utc(2030, 6, 3, 10, 30)
        )

    def test_reschedule_to_free_time(self):
        booking = BookingService.reschedule_booking(
            self.booking.id, utc(2030, 6, 3, 14, 0), utc(2030, 6, 3, 14, 30)
        )
        self.assertEqual(booking.start_time, utc(2030, 6, 3, 14, 0))

    def test_reschedule_may_overlap_its_own_old_time(self):
        booking = BookingService.reschedule_booking(
            self.booking.id, utc(2030, 6, 3, 10, 15), utc(2030, 6, 3, 10, 45)
        )
        self.assertEqual(booking.end_time, utc(2030, 6, 3, 10, 45))

    def test_reschedule_into_other_booking_conflicts(self):
        BookingFactory(
            host=self.host, start_time=utc(2030, 6, 3, 11, 0), end_time=utc(2030, 6, 3, 11, 30)
        )
        with self.assertRaises(BookingConflictException):
            BookingService.reschedule_booking(
                self.booking.id, utc(2030, 6, 3, 11, 15), utc(2030, 6, 3, 11, 45)
            )
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.start_time, utc(2030, 6, 3, 10, 0))

    def test_reschedule_keeps_its_own_buffers(self):
        self.booking.buffer_after = 15
        self.booking.save()
        BookingFactory(
            host=self.host, start_time=utc(2030, 6, 3, 11, 0), end_time=utc(2030, 6, 3, 11, 30)
        )

        with self.assertRaises(BookingConflictException):
            BookingService.reschedule_booking(
                self.booking.id, utc(2030, 6, 3, 10, 20), utc(2030, 6, 3, 10, 50)
            )
        booking = BookingService.reschedule_booking(
            self.booking.id, utc(2030, 6, 3, 10, 15), utc(2030, 6, 3, 10, 45)
        )
        self.assertEqual(booking.end_time, utc(2030, 6, 3, 10, 45))

    def test_cancelled_booking_cannot_be_rescheduled(self):
        self.booking.mark_cancelled()
        with self.assertRaises(InvalidDataException):
            BookingService.reschedule_booking(
                self.booking.id, utc(2030, 6, 3, 14, 0), utc(2030, 6, 3, 14, 30)
            )


class CancelBookingTest(TestCase):
    def setUp(self):
        self.booking = BookingFactory()

    def test_cancel_sets_reason(self):
        booking = BookingService.cancel_booking(self.booking.id, reason="Sick")
        self.assertEqual(booking.status, BookingStatus.CANCELLED)
        self.assertEqual(booking.cancellation_reason, "Sick")

    def test_cancel_is_idempotent(self):
        BookingService.cancel_booking(self.booking.id)
        booking = BookingService.cancel_booking(self.booking.id)
        self.assertEqual(booking.status, BookingStatus.CANCELLED)

    def test_completed_booking_cannot_be_cancelled(self):
        self.booking.mark_completed()
        with self.assertRaises(InvalidDataException):
            BookingService.cancel_booking(self.booking.id)

    def test_unknown_booking(self):
        with self.assertRaises(ResourceNotFoundException):
            BookingService.cancel_booking("00000000-0000-0000-0000-000000000000")
