# playdate_scheduler/api.py
"""
ストレージ/API層から呼ばれる入口。
すべて引数だけで結果が決まる純関数（"今日"を省略したときだけ現在日付を使う）。
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Optional

from playdate_scheduler.config import DEFAULT_CONFIG, IcsConfig
from playdate_scheduler.domain.dates import DateLike
from playdate_scheduler.domain.models import DateSuggestion, GameSnapshot
from playdate_scheduler.preprocessing.bulk import filter_bulk_dates
from playdate_scheduler.preprocessing.completion import compute_completion
from playdate_scheduler.preprocessing.window import get_candidate_window, window_for_config
from playdate_scheduler.ranking.suggestions import compute_suggestions
from playdate_scheduler.reporting.ics import render_calendar, sessions_to_events
from playdate_scheduler.validation.validator import validate_game_config

__all__ = [
    "get_candidate_window",
    "compute_suggestions",
    "compute_completion",
    "filter_bulk_dates",
    "render_calendar",
    "suggest_for_snapshot",
    "completion_for_snapshot",
    "calendar_for_snapshot",
]


def suggest_for_snapshot(
    snapshot: GameSnapshot,
    reference_date: Optional[DateLike] = None,
    chronological: bool = False,
) -> List[DateSuggestion]:
    validate_game_config(snapshot.config)
    window = window_for_config(snapshot.config, reference_date or date.today())
    return compute_suggestions(
        window.candidates(),
        snapshot.players,
        snapshot.availability,
        min_players=snapshot.config.min_players,
        chronological=chronological,
    )


def completion_for_snapshot(snapshot: GameSnapshot, reference_date: Optional[DateLike] = None) -> Dict[str, int]:
    cfg = snapshot.config
    return compute_completion(
        [p.id for p in snapshot.players],
        cfg.play_weekdays,
        cfg.special_dates,
        cfg.window_months,
        snapshot.availability,
        reference_date=reference_date,
    )


def calendar_for_snapshot(
    snapshot: GameSnapshot,
    now: Optional[datetime] = None,
    location: Optional[str] = None,
    cfg: IcsConfig = DEFAULT_CONFIG.ics,
) -> str:
    events = sessions_to_events(snapshot.config, sorted(snapshot.sessions, key=lambda s: s.date), location)
    return render_calendar(events, now=now, cfg=cfg)
