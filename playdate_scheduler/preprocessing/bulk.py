# playdate_scheduler/preprocessing/bulk.py
from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Union

from playdate_scheduler.domain.dates import DateLike, format_date, parse_date, parse_weekday, weekday_of

REMAINING = "remaining"


def parse_bulk_filter(value: Union[int, str]) -> Optional[int]:
    """"remaining" → None、それ以外は曜日番号(0-6)。範囲外は ValidationError"""
    if isinstance(value, str) and value.strip().lower() == REMAINING:
        return None
    return parse_weekday(value)


def filter_bulk_dates(
    filter: Union[int, str],
    dates: Iterable[DateLike],
    play_weekdays: Iterable[int],
    special_dates: Iterable[DateLike],
    existing: Mapping,
    today: DateLike,
) -> List[str]:
    """
    一括設定の対象日を選ぶ。
    対象になれるのは (プレイ曜日 or 特別日) かつ today 以降の日だけ。
    - "remaining": レコード未登録の日のみ（ステータスは問わず登録済みは除外）
    - 曜日番号: その曜日の日のみ（プレイ曜日でない曜日を指定しても空になる）
    """
    weekday_filter = parse_bulk_filter(filter)
    play_days = frozenset(play_weekdays)
    specials = frozenset(parse_date(d) for d in special_dates)
    already_set = {parse_date(k) for k, v in existing.items() if v is not None}
    today_d = parse_date(today)

    out: List[str] = []
    for raw in dates:
        d = parse_date(raw)
        wd = weekday_of(d)
        if wd not in play_days and d not in specials:
            continue
        if d < today_d:
            continue
        if weekday_filter is None:
            if d in already_set:
                continue
        elif wd != weekday_filter:
            continue
        out.append(format_date(d))
    return out
