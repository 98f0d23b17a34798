import unittest
from datetime import date, time

from playdate_scheduler.domain.models import AvailabilityRecord, AvailabilityStatus, CandidateDate, Player
from playdate_scheduler.ranking.suggestions import (
    RANKING_KEYS,
    compute_suggestions,
    sort_by_keys,
    sort_chronological,
    sort_suggestions,
)


def rec(pid, day, status, after=None, until=None):
    return AvailabilityRecord(
        player_id=pid,
        date=date.fromisoformat(day),
        status=AvailabilityStatus(status),
        available_after=after,
        available_until=until,
    )


class TestComputeSuggestions(unittest.TestCase):

    def setUp(self):
        self.players = [Player("1", "Alice"), Player("2", "Bob"), Player("3", "Charlie")]
        self.dates = [date(2025, 1, 17), date(2025, 1, 18), date(2025, 1, 24), date(2025, 1, 25)]

    def test_orders_by_available_then_maybe_then_pending_then_date(self):
        availability = [
            # 01-17: 1 available, 2 pending
            rec("1", "2025-01-17", "available"),
            # 01-18: 2 available, 1 maybe
            rec("1", "2025-01-18", "available"),
            rec("2", "2025-01-18", "available"),
            rec("3", "2025-01-18", "maybe"),
            # 01-24: 1 available, 1 unavailable, 1 pending
            rec("1", "2025-01-24", "available"),
            rec("2", "2025-01-24", "unavailable"),
            # 01-25: 2 available, 1 unavailable
            rec("1", "2025-01-25", "available"),
            rec("2", "2025-01-25", "available"),
            rec("3", "2025-01-25", "unavailable"),
        ]
        result = compute_suggestions(self.dates, self.players, availability)
        self.assertEqual(
            [s.date for s in result],
            [date(2025, 1, 18), date(2025, 1, 25), date(2025, 1, 24), date(2025, 1, 17)],
        )

    def test_date_breaks_remaining_ties(self):
        result = compute_suggestions(list(reversed(self.dates)), self.players, [])
        self.assertEqual([s.date for s in result], self.dates)

    def test_counts_sum_to_total_players(self):
        availability = [
            rec("1", "2025-01-17", "available"),
            rec("2", "2025-01-17", "maybe"),
        ]
        for s in compute_suggestions(self.dates, self.players, availability):
            self.assertEqual(s.total_players, 3)
            self.assertEqual(
                s.available_count + s.maybe_count + s.unavailable_count + s.pending_count,
                s.total_players,
            )

    def test_threshold_moves_qualifying_dates_first(self):
        availability = [
            # 01-17: 2 available
            rec("1", "2025-01-17", "available"),
            rec("2", "2025-01-17", "available"),
            # 01-18: 1 available, 2 maybe
            rec("1", "2025-01-18", "available"),
            rec("2", "2025-01-18", "maybe"),
            rec("3", "2025-01-18", "maybe"),
        ]
        result = compute_suggestions(self.dates[:2], self.players, availability, min_players=2)
        self.assertTrue(result[0].meets_threshold)
        self.assertEqual(result[0].date, date(2025, 1, 17))
        self.assertFalse(result[1].meets_threshold)

    def test_zero_threshold_means_every_date_qualifies(self):
        result = compute_suggestions(self.dates, self.players, [], min_players=0)
        self.assertTrue(all(s.meets_threshold for s in result))
        result = compute_suggestions(self.dates, self.players, [], min_players=None)
        self.assertTrue(all(s.meets_threshold for s in result))

    def test_negative_threshold_means_every_date_qualifies(self):
        result = compute_suggestions(self.dates, self.players, [], min_players=-1)
        self.assertEqual(len(result), len(self.dates))
        self.assertTrue(all(s.meets_threshold for s in result))

    def test_time_window_from_available_players_only(self):
        availability = [
            rec("1", "2025-01-17", "available", after=time(17, 0), until=time(23, 0)),
            rec("2", "2025-01-17", "available", after=time(19, 0)),
            rec("3", "2025-01-17", "maybe", after=time(21, 0), until=time(20, 0)),
        ]
        s = compute_suggestions([date(2025, 1, 17)], self.players, availability)[0]
        self.assertEqual(s.earliest_start_time, time(19, 0))
        self.assertEqual(s.latest_end_time, time(23, 0))

    def test_accepts_candidate_dates_and_strings(self):
        result = compute_suggestions(
            [CandidateDate(date(2025, 1, 17), 5), "2025-01-18"], self.players, []
        )
        self.assertEqual([(s.date, s.weekday) for s in result], [(date(2025, 1, 17), 5), (date(2025, 1, 18), 6)])

    def test_empty_inputs(self):
        self.assertEqual(compute_suggestions([], self.players, []), [])
        s = compute_suggestions([date(2025, 1, 17)], [], [])[0]
        self.assertEqual(s.total_players, 0)
        self.assertEqual(s.pending_count, 0)


class TestSorting(unittest.TestCase):

    def setUp(self):
        players = [Player("1", "Alice"), Player("2", "Bob")]
        availability = [
            rec("1", "2025-01-24", "available"),
            rec("2", "2025-01-24", "available"),
            rec("1", "2025-01-17", "maybe"),
        ]
        self.suggestions = compute_suggestions(
            [date(2025, 1, 17), date(2025, 1, 24), date(2025, 1, 31)], players, availability
        )

    def test_sorting_is_idempotent(self):
        once = sort_suggestions(self.suggestions)
        self.assertEqual(sort_suggestions(once), once)
        self.assertEqual(sort_by_keys(once, RANKING_KEYS), once)

    def test_chronological_mode_ignores_availability(self):
        ordered = sort_chronological(self.suggestions)
        self.assertEqual(
            [s.date for s in ordered],
            [date(2025, 1, 17), date(2025, 1, 24), date(2025, 1, 31)],
        )
        self.assertEqual(self.suggestions[0].date, date(2025, 1, 24))

    def test_compute_suggestions_chronological_flag(self):
        players = [Player("1", "Alice")]
        availability = [rec("1", "2025-01-31", "available")]
        result = compute_suggestions(
            [date(2025, 1, 31), date(2025, 1, 17)], players, availability, chronological=True
        )
        self.assertEqual([s.date for s in result], [date(2025, 1, 17), date(2025, 1, 31)])


if __name__ == "__main__":
    unittest.main()
