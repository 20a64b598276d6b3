from __future__ import annotations

import unittest

import pendulum

from rangepicker.model import CompleteRange, Constraints, PickingEnd, Side, TimeConfig
from rangepicker.timeopts import compute_time_options, floor_minute, from_24h, snap_to_increment, to_24h


def _enabled(opts) -> list:
    return [o.value for o in opts if not o.disabled]


def _selected(opts) -> list:
    return [o.value for o in opts if o.selected]


class TestTimeOptionsContract(unittest.TestCase):
    def test_12h_conversion(self) -> None:
        self.assertEqual(to_24h(12, "AM"), 0)
        self.assertEqual(to_24h(12, "PM"), 12)
        self.assertEqual(to_24h(1, "PM"), 13)
        self.assertEqual(to_24h(11, "am"), 11)
        self.assertEqual(from_24h(0), (12, "AM"))
        self.assertEqual(from_24h(12), (12, "PM"))
        self.assertEqual(from_24h(23), (11, "PM"))
        with self.assertRaises(ValueError):
            to_24h(13, "AM")
        with self.assertRaises(ValueError):
            to_24h(1, "XM")

    def test_minutes_round_down_to_increment(self) -> None:
        self.assertEqual(floor_minute(37, 15), 30)
        self.assertEqual(floor_minute(59, 30), 30)
        self.assertEqual(floor_minute(7, 1), 7)
        t = snap_to_increment(pendulum.datetime(2024, 3, 5, 10, 44, 12), 15)
        self.assertEqual((t.hour, t.minute), (10, 30))

    def test_floor_disables_earlier_hours_and_minutes(self) -> None:
        floor = pendulum.datetime(2024, 3, 5, 10, 30)
        subject = floor
        sel = CompleteRange(subject, pendulum.datetime(2024, 3, 6, 12, 0))
        cfg = TimeConfig(enabled=True, increment=15, hour_mode=12)

        t = compute_time_options(subject, sel, Constraints(min_date=floor), Side.PRIMARY, cfg)

        self.assertEqual(_enabled(t.hours), [10, 11])
        self.assertEqual(_selected(t.hours), [10])
        self.assertEqual([o.value for o in t.minutes], [0, 15, 30, 45])
        self.assertEqual(_enabled(t.minutes), [30, 45])
        self.assertEqual(_selected(t.minutes), [30])
        self.assertEqual([o.value for o in t.meridiem], ["AM", "PM"])
        self.assertEqual(_enabled(t.meridiem), ["AM", "PM"])
        self.assertEqual(t.seconds, ())
        self.assertFalse(t.locked)

    def test_meridiem_half_day_rule(self) -> None:
        subject = pendulum.datetime(2024, 3, 5, 14, 0)
        sel = CompleteRange(subject, subject)
        cfg = TimeConfig(enabled=True)

        t = compute_time_options(subject, sel, Constraints(min_date=pendulum.datetime(2024, 3, 5, 13, 0)), Side.PRIMARY, cfg)
        self.assertEqual(_enabled(t.meridiem), ["PM"])
        self.assertEqual(_selected(t.meridiem), ["PM"])

        t = compute_time_options(subject, sel, Constraints(max_date=pendulum.datetime(2024, 3, 4, 23, 0)), Side.PRIMARY, cfg)
        self.assertEqual(_enabled(t.meridiem), ["AM"])

    def test_24h_mode_lists_all_hours(self) -> None:
        subject = pendulum.datetime(2024, 3, 5, 18, 0)
        sel = CompleteRange(subject, subject)
        cfg = TimeConfig(enabled=True, hour_mode=24, seconds=True)
        t = compute_time_options(subject, sel, Constraints(), Side.PRIMARY, cfg)
        self.assertEqual([o.value for o in t.hours], list(range(24)))
        self.assertEqual(_selected(t.hours), [18])
        self.assertEqual(t.meridiem, ())
        self.assertEqual(len(t.seconds), 60)

    def test_secondary_side_floor_and_lock(self) -> None:
        start = pendulum.datetime(2024, 3, 5, 9, 0)
        cfg = TimeConfig(enabled=True, hour_mode=24)

        t = compute_time_options(start, PickingEnd(start), Constraints(), Side.SECONDARY, cfg)
        self.assertTrue(t.locked)
        self.assertEqual(_enabled(t.hours), list(range(9, 24)))

        end = pendulum.datetime(2024, 3, 5, 17, 0)
        t = compute_time_options(end, CompleteRange(start, end), Constraints(), Side.SECONDARY, cfg)
        self.assertFalse(t.locked)
        self.assertEqual(_enabled(t.hours), list(range(9, 24)))

        # A different day on the secondary side is unconstrained by the start time.
        later = pendulum.datetime(2024, 3, 6, 1, 0)
        t = compute_time_options(later, CompleteRange(start, later), Constraints(), Side.SECONDARY, cfg)
        self.assertEqual(_enabled(t.hours), list(range(24)))

    def test_max_span_limits_end_hours(self) -> None:
        start = pendulum.datetime(2024, 3, 5, 9, 0)
        cfg = TimeConfig(enabled=True, hour_mode=24)
        c = Constraints(max_span=pendulum.duration(hours=4))
        t = compute_time_options(start, PickingEnd(start), c, Side.SECONDARY, cfg)
        self.assertEqual(_enabled(t.hours), [9, 10, 11, 12, 13])


if __name__ == "__main__":
    unittest.main(verbosity=2)
