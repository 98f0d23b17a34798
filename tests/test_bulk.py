import unittest
from datetime import date, timedelta

from playdate_scheduler.domain.models import AvailabilityRecord, AvailabilityStatus
from playdate_scheduler.preprocessing.bulk import filter_bulk_dates, parse_bulk_filter
from playdate_scheduler.validation.validator import ValidationError

TODAY = date(2025, 1, 15)
JANUARY = [date(2025, 1, 1) + timedelta(days=i) for i in range(31)]


def rec(day, status="available"):
    return AvailabilityRecord(player_id="me", date=date.fromisoformat(day), status=AvailabilityStatus(status))


class TestFilterBulkDates(unittest.TestCase):

    def test_weekday_filter_returns_future_fridays_ignoring_existing(self):
        existing = {"2025-01-17": rec("2025-01-17")}
        result = filter_bulk_dates("5", JANUARY, [5, 6], [], existing, TODAY)
        self.assertEqual(result, ["2025-01-17", "2025-01-24", "2025-01-31"])

    def test_weekday_filter_accepts_int(self):
        result = filter_bulk_dates(6, JANUARY, [5, 6], [], {}, TODAY)
        self.assertEqual(result, ["2025-01-18", "2025-01-25"])

    def test_remaining_skips_any_existing_status(self):
        existing = {
            "2025-01-17": rec("2025-01-17", "available"),
            date(2025, 1, 24): rec("2025-01-24", "unavailable"),
        }
        result = filter_bulk_dates("remaining", JANUARY, [5], [], existing, TODAY)
        self.assertEqual(result, ["2025-01-31"])

    def test_weekday_filter_cannot_resurrect_non_play_day(self):
        result = filter_bulk_dates("6", JANUARY, [5], [], {}, TODAY)
        self.assertEqual(result, [])

    def test_special_dates_are_eligible(self):
        result = filter_bulk_dates("remaining", JANUARY, [5], ["2025-01-20"], {}, TODAY)
        self.assertEqual(result, ["2025-01-17", "2025-01-20", "2025-01-24", "2025-01-31"])
        # 月曜の特別日は曜日フィルタ 1 でも拾える
        self.assertEqual(filter_bulk_dates("1", JANUARY, [5], ["2025-01-20"], {}, TODAY), ["2025-01-20"])

    def test_past_dates_excluded_today_kept(self):
        result = filter_bulk_dates("remaining", JANUARY, [3], ["2025-01-02"], {}, TODAY)
        self.assertEqual(result, ["2025-01-15", "2025-01-22", "2025-01-29"])

    def test_invalid_filter_tokens(self):
        for bad in ("7", "-1", "friday", "", 9):
            with self.assertRaises(ValidationError):
                filter_bulk_dates(bad, JANUARY, [5], [], {}, TODAY)

    def test_parse_bulk_filter(self):
        self.assertIsNone(parse_bulk_filter("remaining"))
        self.assertIsNone(parse_bulk_filter(" Remaining "))
        self.assertEqual(parse_bulk_filter("0"), 0)
        self.assertEqual(parse_bulk_filter(6), 6)


if __name__ == "__main__":
    unittest.main()
