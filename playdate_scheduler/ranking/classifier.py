# playdate_scheduler/ranking/classifier.py
from __future__ import annotations

from datetime import date, time
from typing import Dict, Iterable, List, Optional, Tuple

from playdate_scheduler.domain.dates import DateLike, parse_date
from playdate_scheduler.domain.models import (
    AvailabilityRecord,
    AvailabilityStatus,
    CategorizedPlayers,
    Player,
    PlayerResponse,
)

AvailabilityIndex = Dict[Tuple[str, date], AvailabilityRecord]


def index_availability(availability: Iterable[AvailabilityRecord]) -> AvailabilityIndex:
    """(player_id, date) -> レコード。重複時は先勝ち"""
    idx: AvailabilityIndex = {}
    for rec in availability:
        idx.setdefault((rec.player_id, rec.date), rec)
    return idx


def lookup_record(idx: AvailabilityIndex, player_id: str, day: date) -> Optional[AvailabilityRecord]:
    return idx.get((player_id, day))


def _response(player: Player, rec: AvailabilityRecord) -> PlayerResponse:
    # 時間制約はステータスに関係なくそのまま運ぶ（使うかどうかは呼び出し側）
    return PlayerResponse(
        player=player,
        comment=rec.comment,
        available_after=rec.available_after,
        available_until=rec.available_until,
    )


def categorize_indexed(players: List[Player], idx: AvailabilityIndex, day: date) -> CategorizedPlayers:
    available: List[PlayerResponse] = []
    maybe: List[PlayerResponse] = []
    unavailable: List[PlayerResponse] = []
    pending: List[Player] = []

    for p in players:
        rec = lookup_record(idx, p.id, day)
        if rec is None:
            pending.append(p)
        elif rec.status is AvailabilityStatus.AVAILABLE:
            available.append(_response(p, rec))
        elif rec.status is AvailabilityStatus.MAYBE:
            maybe.append(_response(p, rec))
        else:
            unavailable.append(_response(p, rec))

    return CategorizedPlayers(available=available, maybe=maybe, unavailable=unavailable, pending=pending)


def categorize_players(
    players: List[Player],
    availability: Iterable[AvailabilityRecord],
    day: DateLike,
) -> CategorizedPlayers:
    """1日分について、プレイヤーを available / maybe / unavailable / pending に分ける"""
    return categorize_indexed(players, index_availability(availability), parse_date(day))


def intersect_time_window(available: Iterable[PlayerResponse]) -> Tuple[Optional[time], Optional[time]]:
    """
    参加可能者全員が揃う時間帯。
    開始 = available_after の最大（一番遅い人に合わせる）
    終了 = available_until の最小（一番早く抜ける人に合わせる）
    """
    afters = []
    untils = []
    for r in available:
        if r.available_after is not None:
            afters.append(r.available_after)
        if r.available_until is not None:
            untils.append(r.available_until)
    earliest_start = max(afters) if afters else None
    latest_end = min(untils) if untils else None
    return earliest_start, latest_end
