# apps/eventtypeapp/tests/test_config.py
from django.core.exceptions import ValidationError
from django.test import TestCase, override_settings

from apps.eventtypeapp.config import EventConfiguration, resolve_event_configuration
from apps.eventtypeapp.tests.factories import EventTypeFactory
from core.exceptions import InvalidDataException, ResourceNotFoundException


class EventConfigurationTest(TestCase):
    def test_from_event_type(self):
        event_type = EventTypeFactory(
            duration_minutes=45, buffer_before_minutes=5, buffer_after_minutes=10
        )

        config, loaded = resolve_event_configuration(event_type.id)

        self.assertEqual(loaded, event_type)
        self.assertEqual(config.duration_minutes, 45)
        self.assertEqual((config.buffer_before_minutes, config.buffer_after_minutes), (5, 10))

    def test_requested_duration_overrides_event_type(self):
        event_type = EventTypeFactory(duration_minutes=45)
        config, _ = resolve_event_configuration(event_type.id, duration_minutes=20)
        self.assertEqual(config.duration_minutes, 20)

    @override_settings(SLOT_INTERVAL_MINUTES=10)
    def test_ad_hoc_configuration_uses_default_grid(self):
        config, event_type = resolve_event_configuration(duration_minutes=30)
        self.assertIsNone(event_type)
        self.assertEqual(config.slot_interval_minutes, 10)
        self.assertEqual(config.buffer_after_minutes, 0)

    def test_missing_inputs(self):
        with self.assertRaises(InvalidDataException):
            resolve_event_configuration()

    def test_unknown_event_type(self):
        with self.assertRaises(ResourceNotFoundException):
            resolve_event_configuration("00000000-0000-0000-0000-000000000000")

    def test_invalid_values(self):
        with self.assertRaises(InvalidDataException):
            EventConfiguration(duration_minutes=0)
        with self.assertRaises(InvalidDataException):
            EventConfiguration(duration_minutes=30, buffer_before_minutes=-5)

    def test_event_type_rejects_oversized_buffer(self):
        with self.assertRaises(ValidationError):
            EventTypeFactory(buffer_after_minutes=300)
