# playdate_scheduler/validation/validator.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from dateutil import tz

from playdate_scheduler.domain.models import GameConfig, GameSnapshot


@dataclass(frozen=True)
class ValidationError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class ValidationWarning:
    message: str


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)


def validate_window_months(window_months: int) -> None:
    if isinstance(window_months, bool) or not isinstance(window_months, int):
        raise ValidationError(f"window_months must be an integer: {window_months!r}")
    if window_months < 0:
        raise ValidationError(f"window_months must not be negative: {window_months}")


def validate_play_weekdays(play_weekdays: Iterable[int]) -> None:
    for wd in play_weekdays:
        if isinstance(wd, bool) or not isinstance(wd, int) or not 0 <= wd <= 6:
            raise ValidationError(f"Play weekday must be 0-6: {wd!r}")


def is_known_timezone(name: str) -> bool:
    # dateutilはIANAデータベースに無い名前ではNoneを返す
    return bool(name) and tz.gettz(name) is not None


def validate_game_config(config: GameConfig) -> None:
    """ランキング決定性を壊す入力は即エラーにする（黙って補正しない）"""
    validate_window_months(config.window_months)
    validate_play_weekdays(config.play_weekdays)


def validate_game_form(name: str, play_weekdays: Iterable[int]) -> ValidationResult:
    """ゲーム作成フォームの入力チェック（エラー文言はそのまま画面表示用）"""
    errors: List[str] = []
    if not name or not name.strip():
        errors.append("Please enter a game name")
    if not list(play_weekdays or []):
        errors.append("Please select at least one play day")
    return ValidationResult(valid=not errors, errors=errors)


def validate_snapshot(snapshot: GameSnapshot) -> Tuple[List[ValidationWarning], None]:
    validate_game_config(snapshot.config)
    warnings: List[ValidationWarning] = []

    if snapshot.config.timezone and not is_known_timezone(snapshot.config.timezone):
        warnings.append(ValidationWarning(
            f"Unknown timezone {snapshot.config.timezone!r}; calendar clients may treat times as floating"
        ))

    player_ids = {p.id for p in snapshot.players}
    seen: Dict[Tuple[str, str], int] = {}
    for rec in snapshot.availability:
        if rec.player_id not in player_ids:
            warnings.append(ValidationWarning(
                f"Availability for unknown player: player_id={rec.player_id} {rec.date.isoformat()}"
            ))
        key = (rec.player_id, rec.date.isoformat())
        seen[key] = seen.get(key, 0) + 1
    for (pid, day), cnt in seen.items():
        if cnt >= 2:
            # 分類は先勝ちになるため警告止まり
            warnings.append(ValidationWarning(
                f"Duplicate availability records: player_id={pid} {day} ({cnt} records)"
            ))

    for s in snapshot.sessions:
        if (s.start_time is None) != (s.end_time is None):
            warnings.append(ValidationWarning(
                f"Session {s.date.isoformat()} has only one of start/end time"
            ))

    return warnings, None
