# apps/availabilityapp/tests/test_views.py
from datetime import time, timedelta

from django.core.cache import cache
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.availabilityapp.models import DateOverride, WeeklyRule
from apps.availabilityapp.serializers import WeeklyRuleSerializer
from apps.availabilityapp.tests.factories import DateOverrideFactory, WeeklyRuleFactory
from apps.hostapp.tests.factories import HostFactory


class HostAvailabilityViewSetTestCase(APITestCase):
    def setUp(self):
        cache.clear()
        self.host = HostFactory()
        self.day = timezone.now().date() + timedelta(days=7)
        WeeklyRuleFactory(
            host=self.host, day_of_week=self.day.weekday(), start_time=time(9), end_time=time(12)
        )

    def test_slots(self):
        response = self.client.get(
            reverse("host-availability-slots", args=[self.host.id]),
            {"date": self.day.isoformat(), "duration_minutes": 30},
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 11)
        self.assertEqual(response.data[0]["start_time"], f"{self.day.isoformat()}T09:00:00+00:00")

    def test_slots_need_duration_or_event_type(self):
        response = self.client.get(
            reverse("host-availability-slots", args=[self.host.id]), {"date": self.day.isoformat()}
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_slots_for_unknown_host(self):
        response = self.client.get(
            reverse("host-availability-slots", args=["00000000-0000-0000-0000-000000000000"]),
            {"date": self.day.isoformat(), "duration_minutes": 30},
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_slots_with_unknown_timezone(self):
        response = self.client.get(
            reverse("host-availability-slots", args=[self.host.id]),
            {"date": self.day.isoformat(), "duration_minutes": 30, "timezone": "Mars/Base"},
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "invalid_timezone")

    def test_check_slot(self):
        response = self.client.get(
            reverse("host-availability-check", args=[self.host.id]),
            {"start_time": f"{self.day.isoformat()}T12:00:00Z", "duration_minutes": 30},
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["available"])
        self.assertEqual(response.data["reason"], "outside_availability")

    def test_availability_range(self):
        end = self.day + timedelta(days=6)
        response = self.client.get(
            reverse("host-availability-availability-range", args=[self.host.id]),
            {"start_date": self.day.isoformat(), "end_date": end.isoformat()},
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 7)
        self.assertEqual(len(response.data[self.day.isoformat()]), 1)

    def test_replace_weekly_schedule(self):
        url = reverse("host-availability-weekly-schedule", args=[self.host.id])
        response = self.client.put(
            url,
            {
                "rules": [
                    {"day_of_week": 0, "start_time": "08:00", "end_time": "10:00"},
                    {"day_of_week": 2, "start_time": "13:00", "end_time": "17:00"},
                ]
            },
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)
        self.assertEqual(WeeklyRule.objects.filter(host=self.host).count(), 2)
        self.assertEqual(len(self.client.get(url).data), 2)

    def test_weekly_schedule_days_start_on_monday(self):
        response = self.client.put(
            reverse("host-availability-weekly-schedule", args=[self.host.id]),
            {"rules": [
                {"day_of_week": 0, "start_time": "08:00", "end_time": "10:00"},
                {"day_of_week": 6, "start_time": "08:00", "end_time": "10:00"},
            ]},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([rule["day_name"] for rule in response.data], ["Monday", "Sunday"])
        help_text = str(WeeklyRuleSerializer().fields["day_of_week"].help_text)
        self.assertIn("0 = Monday", help_text)
        self.assertIn("6 = Sunday", help_text)

    def test_weekly_schedule_rejects_inverted_rule(self):
        response = self.client.put(
            reverse("host-availability-weekly-schedule", args=[self.host.id]),
            {"rules": [{"day_of_week": 0, "start_time": "10:00", "end_time": "09:00"}]},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(WeeklyRule.objects.filter(host=self.host).count(), 1)

    def test_override_blocks_slots(self):
        url = reverse("host-availability-overrides", args=[self.host.id])
        response = self.client.put(
            url, {"date": self.day.isoformat(), "is_available": False, "reason": "Vacation"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        slots = self.client.get(
            reverse("host-availability-slots", args=[self.host.id]),
            {"date": self.day.isoformat(), "duration_minutes": 30},
        )
        self.assertEqual(slots.data, [])
        self.assertEqual(len(self.client.get(url).data), 1)

    def test_delete_override(self):
        DateOverrideFactory(host=self.host, date=self.day)
        url = reverse(
            "host-availability-delete-override",
            kwargs={"pk": self.host.id, "override_date": self.day.isoformat()},
        )

        self.assertEqual(self.client.delete(url).status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(DateOverride.objects.filter(host=self.host).exists())
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_404_NOT_FOUND)
