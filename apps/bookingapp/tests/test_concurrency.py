# apps/bookingapp/tests/test_concurrency.py
import threading
from datetime import datetime, timedelta

import pytz
from django.db import connection
from django.test import TransactionTestCase

from apps.bookingapp.models import Booking
from apps.bookingapp.services.booking_service import BookingService
from apps.hostapp.tests.factories import HostFactory
from core.exceptions import BookingConflictException

GUEST = {"name": "Racing Guest", "email": "race@example.com"}


class ConcurrentAdmissionTest(TransactionTestCase):
    """Admissions from parallel threads, each on its own database connection"""

    def setUp(self):
        self.host = HostFactory()
        self.start = datetime(2030, 6, 3, 10, 0, tzinfo=pytz.utc)

    def run_admissions(self, intervals):
        barrier = threading.Barrier(len(intervals))
        outcomes = []
        outcomes_lock = threading.Lock()

        def admit(start, end):
            try:
                barrier.wait()
                BookingService.admit_booking(self.host.id, start, end, guest_info=GUEST)
                outcome = "admitted"
            except BookingConflictException:
                outcome = "conflict"
            except Exception as e:
                outcome = f"error: {e!r}"
            finally:
                connection.close()
            with outcomes_lock:
                outcomes.append(outcome)

        threads = [threading.Thread(target=admit, args=interval) for interval in intervals]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        return outcomes

    def test_only_one_of_many_overlapping_requests_wins(self):
        intervals = [
            (self.start + timedelta(minutes=5 * i), self.start + timedelta(minutes=30 + 5 * i))
            for i in range(5)
        ]

        outcomes = self.run_admissions(intervals)

        self.assertEqual(outcomes.count("admitted"), 1, outcomes)
        self.assertEqual(outcomes.count("conflict"), 4, outcomes)
        self.assertEqual(Booking.objects.filter(host=self.host).count(), 1)

    def test_disjoint_requests_all_win(self):
        intervals = [
            (self.start + timedelta(hours=i), self.start + timedelta(hours=i, minutes=30))
            for i in range(5)
        ]

        outcomes = self.run_admissions(intervals)

        self.assertEqual(outcomes, ["admitted"] * 5)
        self.assertEqual(Booking.objects.filter(host=self.host).count(), 5)
