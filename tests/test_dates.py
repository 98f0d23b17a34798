import unittest
from datetime import date, datetime, time

from playdate_scheduler.domain.dates import (
    DAY_LABELS,
    format_time_12h,
    parse_date,
    parse_optional_time,
    parse_status,
    parse_time,
    parse_weekday,
    weekday_of,
)
from playdate_scheduler.domain.models import AvailabilityStatus, next_status
from playdate_scheduler.validation.validator import ValidationError


class TestParsing(unittest.TestCase):

    def test_parse_date(self):
        self.assertEqual(parse_date("2025-01-20"), date(2025, 1, 20))
        self.assertEqual(parse_date(date(2025, 1, 20)), date(2025, 1, 20))
        self.assertEqual(parse_date(datetime(2025, 1, 20, 18, 30)), date(2025, 1, 20))
        for bad in ("20250120", "2025-1-20", "2025-02-30", "next friday"):
            with self.assertRaises(ValidationError):
                parse_date(bad)

    def test_parse_time(self):
        self.assertEqual(parse_time("18:00"), time(18, 0))
        self.assertEqual(parse_time("18:00:30"), time(18, 0, 30))
        self.assertEqual(parse_time("9:05"), time(9, 5))
        self.assertEqual(parse_time(time(7, 0)), time(7, 0))
        for bad in ("25:00", "18", "18:60", "6pm"):
            with self.assertRaises(ValidationError):
                parse_time(bad)

    def test_parse_optional_time(self):
        self.assertIsNone(parse_optional_time(None))
        self.assertIsNone(parse_optional_time("  "))
        self.assertEqual(parse_optional_time("19:00"), time(19, 0))

    def test_parse_weekday(self):
        self.assertEqual(parse_weekday("0"), 0)
        self.assertEqual(parse_weekday(6), 6)
        for bad in (7, "7", "-1", True, "mon"):
            with self.assertRaises(ValidationError):
                parse_weekday(bad)

    def test_parse_status(self):
        self.assertIs(parse_status("Available"), AvailabilityStatus.AVAILABLE)
        self.assertIs(parse_status(AvailabilityStatus.MAYBE), AvailabilityStatus.MAYBE)
        with self.assertRaises(ValidationError):
            parse_status("pending")

    def test_weekday_is_sunday_based(self):
        self.assertEqual(weekday_of(date(2025, 1, 19)), 0)
        self.assertEqual(weekday_of(date(2025, 1, 17)), 5)
        self.assertEqual(weekday_of(date(2025, 1, 18)), 6)
        self.assertEqual(DAY_LABELS["full"][weekday_of(date(2025, 1, 17))], "Friday")


class TestFormatting(unittest.TestCase):

    def test_format_time_12h(self):
        self.assertEqual(format_time_12h("18:30"), "6:30 PM")
        self.assertEqual(format_time_12h("00:15:00"), "12:15 AM")
        self.assertEqual(format_time_12h("12:00"), "12:00 PM")
        self.assertEqual(format_time_12h(time(9, 5)), "9:05 AM")
        self.assertEqual(format_time_12h(None), "")
        self.assertEqual(format_time_12h(""), "")


class TestNextStatus(unittest.TestCase):

    def test_cycle(self):
        self.assertIs(next_status(None), AvailabilityStatus.AVAILABLE)
        self.assertIs(next_status(AvailabilityStatus.AVAILABLE), AvailabilityStatus.UNAVAILABLE)
        self.assertIs(next_status(AvailabilityStatus.UNAVAILABLE), AvailabilityStatus.MAYBE)
        self.assertIs(next_status(AvailabilityStatus.MAYBE), AvailabilityStatus.AVAILABLE)


if __name__ == "__main__":
    unittest.main()
