"""Unit tests for app.core.durations.parse_duration: number + unit token lifetimes."""

import unittest
from datetime import timedelta

from app.core.durations import parse_duration


class TestParseDuration(unittest.TestCase):
    """parse_duration accepts number + unit strings and bare seconds."""

    def test_hours(self) -> None:
        self.assertEqual(parse_duration("24h"), timedelta(hours=24))

    def test_days(self) -> None:
        self.assertEqual(parse_duration("7d"), timedelta(days=7))

    def test_minutes_and_seconds(self) -> None:
        self.assertEqual(parse_duration("30m"), timedelta(minutes=30))
        self.assertEqual(parse_duration("90s"), timedelta(seconds=90))

    def test_unit_is_case_insensitive_and_may_be_spaced(self) -> None:
        self.assertEqual(parse_duration(" 2 H "), timedelta(hours=2))

    def test_bare_number_is_seconds(self) -> None:
        self.assertEqual(parse_duration("3600"), timedelta(hours=1))
        self.assertEqual(parse_duration(60), timedelta(minutes=1))

    def test_fractional_amount(self) -> None:
        self.assertEqual(parse_duration("1.5h"), timedelta(minutes=90))

    def test_unknown_unit_rejected(self) -> None:
        with self.assertRaises(ValueError):
            parse_duration("3 fortnights")

    def test_garbage_rejected(self) -> None:
        for value in ("", "h", "-1h", "abc", "1h30m"):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    parse_duration(value)

    def test_zero_rejected(self) -> None:
        with self.assertRaises(ValueError):
            parse_duration("0d")


if __name__ == "__main__":
    unittest.main()
