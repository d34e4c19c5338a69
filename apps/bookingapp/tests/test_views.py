# apps/bookingapp/tests/test_views.py
from datetime import datetime

import pytz
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookingapp.models import Booking, BookingStatus
from apps.bookingapp.tests.factories import BookingFactory
from apps.hostapp.tests.factories import HostFactory


class BookingViewSetTestCase(APITestCase):
    def setUp(self):
        self.host = HostFactory()
        self.payload = {
            "host_id": str(self.host.id),
            "start_time": "2030-06-03T10:00:00Z",
            "end_time": "2030-06-03T10:30:00Z",
            "guest": {"name": "Ada Guest", "email": "ada@example.com", "timezone": "Europe/Berlin"},
        }

    def test_create_booking(self):
        response = self.client.post(reverse("booking-list"), self.payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(str(response.data["host"]), str(self.host.id))
        self.assertEqual(response.data["status"], BookingStatus.CONFIRMED)
        self.assertEqual(response.data["guest_timezone"], "Europe/Berlin")
        self.assertEqual(response.data["duration_minutes"], 30)

    def test_overlapping_booking_returns_conflict(self):
        self.client.post(reverse("booking-list"), self.payload, format="json")
        self.payload["start_time"] = "2030-06-03T10:15:00Z"
        self.payload["end_time"] = "2030-06-03T10:45:00Z"

        response = self.client.post(reverse("booking-list"), self.payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "booking_conflict")
        self.assertEqual(Booking.objects.count(), 1)

    def test_idempotency_key_header(self):
        url = reverse("booking-list")
        first = self.client.post(url, self.payload, format="json", HTTP_IDEMPOTENCY_KEY="abc-123")
        second = self.client.post(url, self.payload, format="json", HTTP_IDEMPOTENCY_KEY="abc-123")

        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_201_CREATED)
        self.assertEqual(first.data["id"], second.data["id"])

        lookup = self.client.get(reverse("booking-by-idempotency-key"), {"key": "abc-123"})
        self.assertEqual(lookup.status_code, status.HTTP_200_OK)
        self.assertEqual(lookup.data["id"], first.data["id"])

    def test_unknown_idempotency_key(self):
        response = self.client.get(reverse("booking-by-idempotency-key"), {"key": "missing"})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["code"], "not_found")

    def test_invalid_payload(self):
        del self.payload["guest"]
        response = self.client.post(reverse("booking-list"), self.payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "validation_error")
        self.assertIn("guest", response.data["errors"])

    def test_unknown_guest_timezone(self):
        self.payload["guest"]["timezone"] = "Mars/Base"
        response = self.client.post(reverse("booking-list"), self.payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "invalid_timezone")

    def test_unknown_host(self):
        self.payload["host_id"] = "00000000-0000-0000-0000-000000000000"
        response = self.client.post(reverse("booking-list"), self.payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_cancel_booking(self):
        booking = BookingFactory(host=self.host)

        response = self.client.post(
            reverse("booking-cancel", args=[booking.id]), {"reason": "Sick"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], BookingStatus.CANCELLED)
        self.assertEqual(response.data["cancellation_reason"], "Sick")

    def test_reschedule_booking(self):
        booking = BookingFactory(
            host=self.host,
            start_time=datetime(2030, 6, 3, 10, 0, tzinfo=pytz.utc),
            end_time=datetime(2030, 6, 3, 10, 30, tzinfo=pytz.utc),
        )
        BookingFactory(
            host=self.host,
            start_time=datetime(2030, 6, 3, 12, 0, tzinfo=pytz.utc),
            end_time=datetime(2030, 6, 3, 12, 30, tzinfo=pytz.utc),
        )
        url = reverse("booking-reschedule", args=[booking.id])

        moved = self.client.post(
            url,
            {"start_time": "2030-06-03T11:00:00Z", "end_time": "2030-06-03T11:30:00Z"},
            format="json",
        )
        blocked = self.client.post(
            url,
            {"start_time": "2030-06-03T12:15:00Z", "end_time": "2030-06-03T12:45:00Z"},
            format="json",
        )

        self.assertEqual(moved.status_code, status.HTTP_200_OK)
        self.assertEqual(blocked.status_code, status.HTTP_409_CONFLICT)

    def test_list_filters_by_host_and_status(self):
        BookingFactory(host=self.host)
        BookingFactory(host=self.host, status=BookingStatus.CANCELLED)
        BookingFactory()

        response = self.client.get(
            reverse("booking-list"), {"host": str(self.host.id), "active": "true"}
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 1)
