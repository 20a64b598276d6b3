from __future__ import annotations

import unittest

import pendulum

from rangepicker.util.tz import normalize_tz_name, resolve_tz


class TestTimezoneResolutionContract(unittest.TestCase):
    def test_valid_timezone_identifiers_resolve(self) -> None:
        self.assertIs(resolve_tz("UTC"), pendulum.UTC)
        self.assertIs(resolve_tz("z"), pendulum.UTC)
        self.assertIsNotNone(resolve_tz("local"))
        self.assertIsNotNone(resolve_tz(None))
        self.assertEqual(resolve_tz("Europe/Madrid").name, "Europe/Madrid")

    def test_fixed_offsets(self) -> None:
        self.assertEqual(pendulum.datetime(2024, 1, 1, tz=resolve_tz("+02:00")).offset, 7200)
        self.assertEqual(pendulum.datetime(2024, 1, 1, tz=resolve_tz("-0530")).offset, -(5 * 3600 + 30 * 60))

    def test_invalid_timezone_identifiers_raise(self) -> None:
        with self.assertRaises(ValueError):
            resolve_tz("No/Such_Zone")
        with self.assertRaises(ValueError):
            resolve_tz("+25:00")

    def test_normalize_tz_name(self) -> None:
        self.assertEqual(normalize_tz_name(None), "local")
        self.assertEqual(normalize_tz_name("  "), "local")
        self.assertEqual(normalize_tz_name("system"), "local")
        self.assertEqual(normalize_tz_name("gmt"), "UTC")
        self.assertEqual(normalize_tz_name("America/New_York"), "America/New_York")


if __name__ == "__main__":
    unittest.main(verbosity=2)
