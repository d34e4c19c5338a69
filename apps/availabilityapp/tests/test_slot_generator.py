# apps/availabilityapp/tests/test_slot_generator.py
from datetime import datetime

import pytz
from django.test import SimpleTestCase

from apps.availabilityapp.services.slot_generator import generate_slots
from core.exceptions import InvalidDataException


def utc(*args):
    return datetime(*args, tzinfo=pytz.utc)


class GenerateSlotsTest(SimpleTestCase):
    def test_grid_over_one_window(self):
        window = (utc(2030, 6, 3, 9, 0), utc(2030, 6, 3, 12, 0))

        slots = generate_slots([window], 30, 15)

        self.assertEqual(len(slots), 11)
        self.assertEqual(slots[0].as_window(), (utc(2030, 6, 3, 9, 0), utc(2030, 6, 3, 9, 30)))
        self.assertEqual(slots[-1].as_window(), (utc(2030, 6, 3, 11, 30), utc(2030, 6, 3, 12, 0)))
        self.assertTrue(all(slot.available for slot in slots))

    def test_window_shorter_than_duration(self):
        window = (utc(2030, 6, 3, 9, 0), utc(2030, 6, 3, 9, 20))
        self.assertEqual(generate_slots([window], 30, 15), [])

    def test_each_window_starts_its_own_grid(self):
        windows = [
            (utc(2030, 6, 3, 9, 0), utc(2030, 6, 3, 10, 0)),
            (utc(2030, 6, 3, 13, 10), utc(2030, 6, 3, 14, 10)),
        ]

        starts = [slot.start_time for slot in generate_slots(windows, 60, 30)]

        self.assertEqual(starts, [utc(2030, 6, 3, 9, 0), utc(2030, 6, 3, 13, 10)])

    def test_slots_never_exceed_window(self):
        window = (utc(2030, 6, 3, 9, 0), utc(2030, 6, 3, 10, 40))
        slots = generate_slots([window], 45, 20)
        self.assertTrue(all(slot.end_time <= window[1] for slot in slots))
        self.assertEqual(len(slots), 3)

    def test_non_positive_inputs_are_rejected(self):
        window = (utc(2030, 6, 3, 9, 0), utc(2030, 6, 3, 12, 0))
        with self.assertRaises(InvalidDataException):
            generate_slots([window], 0, 15)
        with self.assertRaises(InvalidDataException):
            generate_slots([window], 30, 0)
