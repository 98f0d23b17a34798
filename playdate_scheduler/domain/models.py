# playdate_scheduler/domain/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from typing import FrozenSet, List, Optional


class AvailabilityStatus(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    MAYBE = "maybe"


# 未回答 → available → unavailable → maybe → available（繰り返し）
_STATUS_CYCLE = {
    AvailabilityStatus.AVAILABLE: AvailabilityStatus.UNAVAILABLE,
    AvailabilityStatus.UNAVAILABLE: AvailabilityStatus.MAYBE,
    AvailabilityStatus.MAYBE: AvailabilityStatus.AVAILABLE,
}


def next_status(current: Optional[AvailabilityStatus]) -> AvailabilityStatus:
    """カレンダー上でセルをタップしたときの次の状態"""
    if current is None:
        return AvailabilityStatus.AVAILABLE
    return _STATUS_CYCLE[current]


@dataclass(frozen=True)
class GameConfig:
    play_weekdays: FrozenSet[int]          # 0=日曜 … 6=土曜
    special_dates: FrozenSet[date]         # 曜日に関係なく候補になる単発日
    window_months: int
    title: str
    default_start_time: Optional[time] = None
    default_end_time: Optional[time] = None
    timezone: Optional[str] = None         # IANA名。None=フローティング
    description: Optional[str] = None
    min_players: int = 0                   # 0=閾値なし


@dataclass(frozen=True)
class Player:
    id: str
    name: str


@dataclass(frozen=True)
class AvailabilityRecord:
    """(player, date) につき高々1件。レコード無し=未回答(pending)"""
    player_id: str
    date: date
    status: AvailabilityStatus
    comment: Optional[str] = None
    available_after: Optional[time] = None
    available_until: Optional[time] = None

    def __post_init__(self):
        # 文字列でも受け付けて正規化する（dates → models の循環importを避けて関数内で読む）
        from playdate_scheduler.domain.dates import parse_date, parse_optional_time, parse_status

        object.__setattr__(self, "date", parse_date(self.date))
        object.__setattr__(self, "status", parse_status(self.status))
        object.__setattr__(self, "available_after", parse_optional_time(self.available_after))
        object.__setattr__(self, "available_until", parse_optional_time(self.available_until))


@dataclass(frozen=True)
class ConfirmedSession:
    date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None

    def __post_init__(self):
        from playdate_scheduler.domain.dates import parse_date, parse_optional_time

        object.__setattr__(self, "date", parse_date(self.date))
        object.__setattr__(self, "start_time", parse_optional_time(self.start_time))
        object.__setattr__(self, "end_time", parse_optional_time(self.end_time))


@dataclass(frozen=True)
class CandidateDate:
    date: date
    weekday: int


@dataclass(frozen=True)
class PlayerResponse:
    player: Player
    comment: Optional[str] = None
    available_after: Optional[time] = None
    available_until: Optional[time] = None


@dataclass(frozen=True)
class CategorizedPlayers:
    available: List[PlayerResponse]
    maybe: List[PlayerResponse]
    unavailable: List[PlayerResponse]
    pending: List[Player]


@dataclass(frozen=True)
class DateSuggestion:
    date: date
    weekday: int
    available_count: int
    maybe_count: int
    unavailable_count: int
    pending_count: int
    total_players: int
    available_players: List[PlayerResponse]
    maybe_players: List[PlayerResponse]
    unavailable_players: List[PlayerResponse]
    pending_players: List[Player]
    earliest_start_time: Optional[time]
    latest_end_time: Optional[time]
    meets_threshold: bool


@dataclass(frozen=True)
class CalendarEvent:
    date: date
    title: str
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    description: Optional[str] = None
    location: Optional[str] = None
    timezone: Optional[str] = None


@dataclass
class GameSnapshot:
    """ストレージ層から受け取る1グループ分のスナップショット"""
    config: GameConfig
    players: List[Player]
    availability: List[AvailabilityRecord]
    sessions: List[ConfirmedSession] = field(default_factory=list)
