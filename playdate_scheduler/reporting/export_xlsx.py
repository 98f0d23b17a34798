# playdate_scheduler/reporting/export_xlsx.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

import pandas as pd

from playdate_scheduler.config import DEFAULT_CONFIG, ExportConfig


def export_report_xlsx(
    out_path: str,
    suggestion_df: pd.DataFrame,
    completion_df: pd.DataFrame,
    session_df: Optional[pd.DataFrame] = None,
    cfg: ExportConfig = DEFAULT_CONFIG.export,
) -> str:
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(out_path, engine="openpyxl") as w:
        suggestion_df.to_excel(w, sheet_name=cfg.suggestion_sheet, index=False)
        completion_df.to_excel(w, sheet_name=cfg.completion_sheet, index=False)
        if session_df is not None:
            session_df.to_excel(w, sheet_name=cfg.sessions_sheet, index=False)
    return out_path
