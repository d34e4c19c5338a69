# core/tests/test_key_generator.py
from datetime import date

from django.test import SimpleTestCase

from core.cache.key_generator import (
    availability_rules_key,
    availability_version_key,
    generate_cache_key,
)


class KeyGeneratorTest(SimpleTestCase):
    def test_generate_cache_key(self):
        self.assertEqual(generate_cache_key("abc"), "abc")
        self.assertEqual(generate_cache_key("abc", namespace="ns", version="2"), "ns:abc:v2")

    def test_rules_key_changes_with_generation(self):
        day = date(2030, 6, 3)
        self.assertNotEqual(
            availability_rules_key("host-1", day, version="a"),
            availability_rules_key("host-1", day, version="b"),
        )
        self.assertEqual(availability_rules_key("host-1", day), "availability:host-1:2030-06-03")

    def test_version_key_is_per_host(self):
        self.assertNotEqual(availability_version_key("host-1"), availability_version_key("host-2"))
