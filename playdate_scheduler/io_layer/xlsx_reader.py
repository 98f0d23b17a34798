# playdate_scheduler/io_layer/xlsx_reader.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Dict, FrozenSet, List, Optional

import pandas as pd
from openpyxl import load_workbook

from playdate_scheduler.config import AppConfig
from playdate_scheduler.domain.dates import parse_date, parse_status, parse_time, parse_weekday
from playdate_scheduler.domain.models import (
    AvailabilityRecord,
    ConfirmedSession,
    GameConfig,
    GameSnapshot,
    Player,
)
from playdate_scheduler.io_layer.paths import InputPaths
from playdate_scheduler.validation.validator import ValidationError


def _is_blank(v: Any) -> bool:
    if v is None:
        return True
    if isinstance(v, str):
        return not v.strip()
    try:
        return bool(pd.isna(v))
    except (TypeError, ValueError):
        return False


def _cell_str(v: Any) -> Optional[str]:
    if _is_blank(v):
        return None
    return str(v).strip()


def _cell_date(v: Any) -> date:
    # Excelの日付セルは datetime / Timestamp で来る
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    return parse_date(str(v).strip())


def _cell_time(v: Any) -> Optional[time]:
    if _is_blank(v):
        return None
    if isinstance(v, datetime):
        return v.time()
    if isinstance(v, time):
        return v
    return parse_time(str(v).strip())


def _cell_int(v: Any, key: str) -> int:
    if isinstance(v, (int, float)) and not isinstance(v, bool) and float(v).is_integer():
        return int(v)
    s = str(v).strip()
    if not s.lstrip("-").isdigit():
        raise ValidationError(f"{key} must be an integer: {v!r}")
    return int(s)


def _split_list(v: Any) -> List[Any]:
    if _is_blank(v):
        return []
    if isinstance(v, (int, float, datetime, date)) and not isinstance(v, bool):
        return [v]
    return [x.strip() for x in str(v).replace(";", ",").split(",") if x.strip()]


def _parse_weekdays(v: Any) -> FrozenSet[int]:
    out = set()
    for tok in _split_list(v):
        if isinstance(tok, float) and tok.is_integer():
            tok = int(tok)
        out.add(parse_weekday(tok))
    return frozenset(out)


def _require_cols(df: pd.DataFrame, cols: List[str], where: str) -> None:
    for c in cols:
        if c not in df.columns:
            raise ValueError(f"{where} に列 {c} がありません。")


@dataclass(frozen=True)
class XlsxReader:
    cfg: AppConfig

    def read_game_config(self, path: str, sheet_name: str) -> GameConfig:
        """
        gameシートは key / value の2列（1行目はヘッダ）。
        play_weekdays / special_dates はカンマ区切り。
        """
        wb = load_workbook(path, data_only=True)
        if sheet_name not in wb.sheetnames:
            raise ValueError(f"{path} に '{sheet_name}' シートが見つかりません。")

        ws = wb[sheet_name]
        kv: Dict[str, Any] = {}
        for r in ws.iter_rows(min_row=2, values_only=True):
            if not r or r[0] is None:
                continue
            kv[str(r[0]).strip()] = r[1] if len(r) > 1 else None

        title = _cell_str(kv.get("title"))
        if not title:
            raise ValueError(f"{path}:{sheet_name} に title がありません。")
        if _is_blank(kv.get("window_months")):
            raise ValueError(f"{path}:{sheet_name} に window_months がありません。")

        special = frozenset(_cell_date(d) for d in _split_list(kv.get("special_dates")))
        min_players = kv.get("min_players")

        return GameConfig(
            play_weekdays=_parse_weekdays(kv.get("play_weekdays")),
            special_dates=special,
            window_months=_cell_int(kv["window_months"], "window_months"),
            title=title,
            default_start_time=_cell_time(kv.get("default_start_time")),
            default_end_time=_cell_time(kv.get("default_end_time")),
            timezone=_cell_str(kv.get("timezone")) or self.cfg.default_timezone,
            description=_cell_str(kv.get("description")),
            min_players=0 if _is_blank(min_players) else _cell_int(min_players, "min_players"),
        )

    def read_players(self, path: str, sheet_name: str) -> List[Player]:
        df = pd.read_excel(path, sheet_name=sheet_name, dtype={"id": str})
        _require_cols(df, ["id", "name"], f"{path}:{sheet_name}")

        players: List[Player] = []
        for _, row in df.iterrows():
            pid = _cell_str(row["id"])
            if pid is None:
                continue
            players.append(Player(id=pid, name=_cell_str(row["name"]) or pid))
        return players

    def read_availability(self, path: str, sheet_name: str) -> List[AvailabilityRecord]:
        df = pd.read_excel(path, sheet_name=sheet_name, dtype={"player_id": str})
        _require_cols(df, ["player_id", "date", "status"], f"{path}:{sheet_name}")

        out: List[AvailabilityRecord] = []
        for _, row in df.iterrows():
            pid = _cell_str(row["player_id"])
            if pid is None:
                continue
            out.append(AvailabilityRecord(
                player_id=pid,
                date=_cell_date(row["date"]),
                status=parse_status(row["status"]),
                comment=_cell_str(row.get("comment")),
                available_after=_cell_time(row.get("available_after")),
                available_until=_cell_time(row.get("available_until")),
            ))
        return out

    def read_sessions(self, path: str, sheet_name: str) -> List[ConfirmedSession]:
        wb = load_workbook(path, read_only=True)
        has_sheet = sheet_name in wb.sheetnames
        wb.close()
        if not has_sheet:
            return []

        df = pd.read_excel(path, sheet_name=sheet_name)
        _require_cols(df, ["date"], f"{path}:{sheet_name}")

        out: List[ConfirmedSession] = []
        for _, row in df.iterrows():
            if _is_blank(row["date"]):
                continue
            out.append(ConfirmedSession(
                date=_cell_date(row["date"]),
                start_time=_cell_time(row.get("start_time")),
                end_time=_cell_time(row.get("end_time")),
            ))
        return out

    def build_snapshot(self, paths: InputPaths) -> GameSnapshot:
        f = paths.snapshot_file
        return GameSnapshot(
            config=self.read_game_config(f, paths.game_sheet_name),
            players=self.read_players(f, paths.players_sheet_name),
            availability=self.read_availability(f, paths.availability_sheet_name),
            sessions=self.read_sessions(f, paths.sessions_sheet_name),
        )
