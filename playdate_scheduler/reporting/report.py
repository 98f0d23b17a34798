# playdate_scheduler/reporting/report.py
from __future__ import annotations

from typing import Dict, List

import pandas as pd

from playdate_scheduler.domain.dates import DAY_LABELS, format_time
from playdate_scheduler.domain.models import ConfirmedSession, DateSuggestion, Player, PlayerResponse


def _names(items) -> str:
    out = []
    for it in items:
        p = it.player if isinstance(it, PlayerResponse) else it
        out.append(p.name)
    return ", ".join(out)


def _fmt(t) -> str:
    return format_time(t) if t is not None else ""


def build_suggestion_table(suggestions: List[DateSuggestion]) -> pd.DataFrame:
    """並び順は呼び出し側で決めたもの（ランキング順 or 時系列）をそのまま保つ"""
    rows = []
    for rank, s in enumerate(suggestions, start=1):
        rows.append(dict(
            rank=rank,
            date=s.date.isoformat(),
            weekday=DAY_LABELS["short"][s.weekday],
            available=s.available_count,
            maybe=s.maybe_count,
            unavailable=s.unavailable_count,
            pending=s.pending_count,
            total_players=s.total_players,
            meets_threshold=s.meets_threshold,
            earliest_start=_fmt(s.earliest_start_time),
            latest_end=_fmt(s.latest_end_time),
            available_players=_names(s.available_players),
            maybe_players=_names(s.maybe_players),
            pending_players=_names(s.pending_players),
        ))
    return pd.DataFrame(rows)


def build_completion_table(players: List[Player], completion: Dict[str, int]) -> pd.DataFrame:
    rows = []
    for p in players:
        if p.id not in completion:
            continue
        rows.append(dict(player_id=p.id, player_name=p.name, completion_pct=completion[p.id]))
    df = pd.DataFrame(rows)
    if not df.empty:
        df = df.sort_values(["completion_pct", "player_name"], ascending=[False, True]).reset_index(drop=True)
    return df


def build_session_table(sessions: List[ConfirmedSession]) -> pd.DataFrame:
    rows = []
    for s in sorted(sessions, key=lambda x: x.date):
        rows.append(dict(
            date=s.date.isoformat(),
            start_time=_fmt(s.start_time),
            end_time=_fmt(s.end_time),
        ))
    return pd.DataFrame(rows)
