# playdate_scheduler/config.py
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class IcsConfig:
    """カレンダー(ICS)出力の固定値"""
    prodid: str = "-//Can We Play//Game Night Scheduler//EN"
    uid_domain: str = "canweplay.games"
    include_vtimezone: bool = False  # TZID使用時にVTIMEZONEを添える
    fold_lines: bool = False         # RFC5545の75文字折り返し


@dataclass(frozen=True)
class ExportConfig:
    # 出力xlsxのシート名（運用で変えるならここだけ）
    suggestion_sheet: str = "suggestions"
    completion_sheet: str = "completion"
    sessions_sheet: str = "sessions"
    default_out: str = "assets/output/suggestions.xlsx"
    default_ics_out: str = "assets/output/sessions.ics"


@dataclass(frozen=True)
class AppConfig:
    # スナップショットのgameシートにtimezoneが無い場合の既定（None=フローティング）
    default_timezone: Optional[str] = None

    ics: IcsConfig = field(default_factory=IcsConfig)
    export: ExportConfig = field(default_factory=ExportConfig)


DEFAULT_CONFIG = AppConfig()
