# playdate_scheduler/ranking/suggestions.py
from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Tuple, Union

from playdate_scheduler.domain.dates import DateLike, parse_date, weekday_of
from playdate_scheduler.domain.models import (
    AvailabilityRecord,
    CandidateDate,
    DateSuggestion,
    Player,
)
from playdate_scheduler.ranking.classifier import (
    categorize_indexed,
    index_availability,
    intersect_time_window,
)

# (キー抽出, 降順かどうか) を優先度順に並べたもの。タイブレークを足すならここに挿入する
SortKey = Tuple[Callable[[DateSuggestion], object], bool]

RANKING_KEYS: List[SortKey] = [
    (lambda s: s.meets_threshold, True),
    (lambda s: s.available_count, True),
    (lambda s: s.maybe_count, True),
    (lambda s: s.pending_count, False),  # 全員回答済みの日を優先
    (lambda s: s.date, False),           # 同点なら早い日
]

CHRONOLOGICAL_KEYS: List[SortKey] = [
    (lambda s: s.date, False),
]

CandidateLike = Union[CandidateDate, DateLike]


def sort_by_keys(suggestions: Iterable[DateSuggestion], keys: List[SortKey]) -> List[DateSuggestion]:
    # 安定ソートを優先度の低いキーから順にかける
    out = list(suggestions)
    for key, descending in reversed(keys):
        out.sort(key=key, reverse=descending)
    return out


def sort_suggestions(suggestions: Iterable[DateSuggestion]) -> List[DateSuggestion]:
    return sort_by_keys(suggestions, RANKING_KEYS)


def sort_chronological(suggestions: Iterable[DateSuggestion]) -> List[DateSuggestion]:
    return sort_by_keys(suggestions, CHRONOLOGICAL_KEYS)


def _as_candidate(c: CandidateLike) -> CandidateDate:
    if isinstance(c, CandidateDate):
        return c
    d = parse_date(c)
    return CandidateDate(date=d, weekday=weekday_of(d))


def build_suggestions(
    candidates: Iterable[CandidateLike],
    players: List[Player],
    availability: Iterable[AvailabilityRecord],
    min_players: Optional[int] = None,
) -> List[DateSuggestion]:
    """候補日ごとの集計（並べ替えはしない）"""
    # 0以下・None は閾値なし
    threshold = min_players or 0

    idx = index_availability(availability)
    out: List[DateSuggestion] = []
    for c in candidates:
        cand = _as_candidate(c)
        cat = categorize_indexed(players, idx, cand.date)
        earliest, latest = intersect_time_window(cat.available)
        out.append(DateSuggestion(
            date=cand.date,
            weekday=cand.weekday,
            available_count=len(cat.available),
            maybe_count=len(cat.maybe),
            unavailable_count=len(cat.unavailable),
            pending_count=len(cat.pending),
            total_players=len(players),
            available_players=cat.available,
            maybe_players=cat.maybe,
            unavailable_players=cat.unavailable,
            pending_players=cat.pending,
            earliest_start_time=earliest,
            latest_end_time=latest,
            meets_threshold=threshold <= 0 or len(cat.available) >= threshold,
        ))
    return out


def compute_suggestions(
    candidates: Iterable[CandidateLike],
    players: List[Player],
    availability: Iterable[AvailabilityRecord],
    min_players: Optional[int] = None,
    chronological: bool = False,
) -> List[DateSuggestion]:
    suggestions = build_suggestions(candidates, players, availability, min_players)
    if chronological:
        return sort_chronological(suggestions)
    return sort_suggestions(suggestions)
