# playdate_scheduler/preprocessing/completion.py
from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, List, Optional, Set

from playdate_scheduler.domain.dates import DateLike, parse_date
from playdate_scheduler.domain.models import AvailabilityRecord
from playdate_scheduler.preprocessing.window import CandidateWindow


def round_half_up_percent(filled: int, total: int) -> int:
    # 整数演算で四捨五入（浮動小数の .5 問題を避ける）
    return (filled * 200 + total) // (2 * total)


def compute_completion(
    player_ids: List[str],
    play_weekdays: Iterable[int],
    special_dates: Iterable[DateLike],
    window_months: int,
    availability: Iterable[AvailabilityRecord],
    reference_date: Optional[DateLike] = None,
) -> Dict[str, int]:
    """
    プレイヤーごとの回答済み率(0-100)。
    ステータスは問わない（unavailableも「回答済み」）。候補日が0件なら空dict。
    """
    if reference_date is None:
        reference_date = date.today()
    window = CandidateWindow(play_weekdays, special_dates, window_months, parse_date(reference_date))
    play_dates: Set[date] = set(window)
    total = len(play_dates)
    if total == 0:
        return {}

    filled_by_player: Dict[str, Set[date]] = {}
    for rec in availability:
        if rec.date in play_dates:
            filled_by_player.setdefault(rec.player_id, set()).add(rec.date)

    return {
        pid: round_half_up_percent(len(filled_by_player.get(pid, ())), total)
        for pid in player_ids
    }
