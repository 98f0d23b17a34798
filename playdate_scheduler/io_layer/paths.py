# playdate_scheduler/io_layer/paths.py
from dataclasses import dataclass


@dataclass(frozen=True)
class InputPaths:
    """
    snapshot_file: 1グループ分のスナップショット xlsx
      game         : key / value の2列（title, play_weekdays, window_months …）
      players      : id, name
      availability : player_id, date, status, comment, available_after, available_until
      sessions     : date, start_time, end_time（任意シート）
    """
    snapshot_file: str

    # シート名（運用で変えるならここだけ）
    game_sheet_name: str = "game"
    players_sheet_name: str = "players"
    availability_sheet_name: str = "availability"
    sessions_sheet_name: str = "sessions"
