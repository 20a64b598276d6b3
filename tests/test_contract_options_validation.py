from __future__ import annotations

import datetime as dt
import json
import tempfile
import unittest
from pathlib import Path

import pendulum

from rangepicker.api import load_options_from_json
from rangepicker.options import OptionsError, PickerOptions, normalize_options, validate_options
from rangepicker.predicates import NEVER_INVALID, NO_CUSTOM_TAGS
from rangepicker.util.duration import coerce_duration

NOW = pendulum.datetime(2024, 3, 20, 10, 0)


def _first_error(raw) -> str:
    errs = validate_options(raw)
    return errs[0] if errs else ""


class TestOptionsValidationContract(unittest.TestCase):
    def test_defaults(self) -> None:
        o = normalize_options({"tz": "UTC"}, now=NOW)
        self.assertIsInstance(o, PickerOptions)
        self.assertEqual(o.start_date, NOW.start_of("day"))
        self.assertEqual(o.end_date, NOW.end_of("day"))
        self.assertEqual(o.locale.format, "MM/DD/YYYY")
        self.assertEqual(o.locale.separator, " - ")
        self.assertEqual(o.locale.first_day, 0)
        self.assertEqual(o.constraints.min_year, 1924)
        self.assertEqual(o.constraints.max_year, 2124)
        self.assertIs(o.constraints.invalid_date, NEVER_INVALID)
        self.assertIs(o.constraints.custom_date, NO_CUSTOM_TAGS)
        self.assertTrue(o.linked_calendars)
        self.assertFalse(o.single_date)
        self.assertIs(normalize_options(o), o)

    def test_time_picker_default_formats(self) -> None:
        self.assertEqual(normalize_options({"tz": "UTC", "time_picker": True}, now=NOW).locale.format, "MM/DD/YYYY h:mm A")
        o = normalize_options({"tz": "UTC", "time_picker": {"hour_mode": 24, "seconds": True}}, now=NOW)
        self.assertEqual(o.locale.format, "MM/DD/YYYY HH:mm:ss")
        self.assertEqual(o.time.hour_mode, 24)

    def test_errors_are_collected(self) -> None:
        errs = validate_options({"tz": "UTC", "bogus": 1, "locale": {"first_day": 7}})
        self.assertIn("unknown option: bogus", errs)
        self.assertTrue(any(e.startswith("locale.first_day") for e in errs), errs)

    def test_invalid_values(self) -> None:
        self.assertTrue(_first_error({"tz": "No/Such_Zone"}).startswith("tz:"))
        self.assertTrue(_first_error({"time_picker": {"increment": 0}}).startswith("time_picker.increment"))
        self.assertTrue(_first_error({"time_picker": {"hour_mode": 13}}).startswith("time_picker.hour_mode"))
        self.assertTrue(_first_error({"min_date": "2024-03-10", "max_date": "2024-03-01"}).startswith("min_date"))
        self.assertTrue(_first_error({"max_span": "bogus"}).startswith("max_span"))
        self.assertTrue(_first_error({"start_date": "not a date"}).startswith("start_date"))
        self.assertTrue(_first_error({"locale": {"separator": "/"}}).startswith("locale.separator"))
        self.assertTrue(_first_error({"locale": {"day_names": ["a"]}}).startswith("locale.day_names"))
        self.assertTrue(_first_error({"invalid_date": 42}).startswith("invalid_date"))
        self.assertEqual(validate_options([]), ["options must be a dict/object"])

    def test_normalize_raises_options_error(self) -> None:
        with self.assertRaises(OptionsError) as cm:
            normalize_options({"bogus": True})
        self.assertIsInstance(cm.exception, ValueError)
        self.assertIn("bogus", str(cm.exception))

    def test_startup_sanitizing(self) -> None:
        o = normalize_options(
            {
                "tz": "UTC",
                "start_date": "2024-03-01",
                "end_date": "2024-04-30",
                "min_date": "2024-03-05",
                "max_date": "2024-03-25",
            },
            now=NOW,
        )
        self.assertEqual(o.start_date.to_date_string(), "2024-03-05")
        self.assertEqual(o.end_date.to_date_string(), "2024-03-25")

        o = normalize_options({"tz": "UTC", "start_date": "2024-03-09", "end_date": "2024-03-01"}, now=NOW)
        self.assertLessEqual(o.start_date, o.end_date)

        o = normalize_options({"tz": "UTC", "single_date": True, "start_date": "2024-03-01", "end_date": "2024-03-09"}, now=NOW)
        self.assertTrue(o.start_date.is_same_day(o.end_date))

        o = normalize_options(
            {"tz": "UTC", "time_picker": {"increment": 10}, "start_date": "2024-03-01T09:17:00", "end_date": "2024-03-01T11:59:00"},
            now=NOW,
        )
        self.assertEqual((o.start_date.hour, o.start_date.minute), (9, 10))
        self.assertEqual((o.end_date.hour, o.end_date.minute), (11, 50))

    def test_initial_range_respects_max_span(self) -> None:
        o = normalize_options(
            {"tz": "UTC", "start_date": "2024-03-01", "end_date": "2024-03-31", "max_span": {"days": 7}},
            now=NOW,
        )
        self.assertEqual(o.start_date, pendulum.datetime(2024, 3, 1))
        self.assertEqual(o.end_date, pendulum.datetime(2024, 3, 8).end_of("day"))

        o = normalize_options(
            {
                "tz": "UTC",
                "time_picker": {"hour_mode": 24},
                "start_date": "2024-03-01T08:00:00",
                "end_date": "2024-03-02T08:00:00",
                "max_span": "PT6H",
            },
            now=NOW,
        )
        self.assertEqual(o.end_date, pendulum.datetime(2024, 3, 1, 14, 0))

    def test_presets_are_clamped_or_dropped(self) -> None:
        o = normalize_options(
            {
                "tz": "UTC",
                "min_date": "2024-03-10",
                "max_span": "P7D",
                "ranges": [
                    {"label": "Old", "start": "2024-01-01", "end": "2024-01-05"},
                    {"label": "Recent", "start": "2024-03-01", "end": "2024-03-31"},
                ],
            },
            now=NOW,
        )
        self.assertEqual([p.label for p in o.ranges], ["Recent"])
        recent = o.ranges[0]
        self.assertEqual(recent.start.to_date_string(), "2024-03-10")
        self.assertEqual(recent.end.to_date_string(), "2024-03-17")
        self.assertEqual(recent.end, recent.end.end_of("day"))

    def test_preset_label_rules(self) -> None:
        self.assertIn("reserved", _first_error({"ranges": {"Custom Range": ["2024-03-01", "2024-03-02"]}}))
        errs = validate_options(
            {"ranges": [{"label": "A", "start": "2024-03-01", "end": "2024-03-02"}, {"label": "A", "start": "2024-03-01", "end": "2024-03-02"}]}
        )
        self.assertTrue(any("duplicate" in e for e in errs), errs)

    def test_max_span_forms(self) -> None:
        self.assertEqual(coerce_duration("P7D").total_seconds(), 7 * 86400)
        self.assertEqual(coerce_duration("PT12H").total_seconds(), 12 * 3600)
        self.assertEqual(coerce_duration({"days": 2}).total_seconds(), 2 * 86400)
        self.assertEqual(coerce_duration(3).total_seconds(), 3 * 86400)
        self.assertEqual(coerce_duration(dt.timedelta(hours=6)).total_seconds(), 6 * 3600)
        self.assertIsNone(coerce_duration(None))
        for bad in ("P", "7 days", {"fortnights": 1}, -1, True):
            with self.assertRaises(ValueError, msg=repr(bad)):
                coerce_duration(bad)

    def test_load_options_from_json(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "opts.json"
            p.write_text(json.dumps({"tz": "UTC", "start_date": "03/01/2024", "end_date": "03/09/2024"}), encoding="utf-8")
            o = load_options_from_json(p, now=NOW)
            self.assertEqual(o.start_date.to_date_string(), "2024-03-01")
            self.assertEqual(o.end_date.to_date_string(), "2024-03-09")

            p.write_text("[1, 2]", encoding="utf-8")
            with self.assertRaises(OptionsError):
                load_options_from_json(p)


if __name__ == "__main__":
    unittest.main(verbosity=2)
