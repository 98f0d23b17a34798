# playdate_scheduler/preprocessing/window.py
from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Iterator, List, Optional

from dateutil.relativedelta import relativedelta

from playdate_scheduler.domain.dates import DateLike, parse_date, weekday_of
from playdate_scheduler.domain.models import CandidateDate, GameConfig
from playdate_scheduler.validation.validator import validate_play_weekdays, validate_window_months


def window_end(reference_date: date, window_months: int) -> date:
    """基準月から window_months か月後の月末日"""
    # day=31 は relativedelta で月末にクランプされる
    return reference_date + relativedelta(months=window_months, day=31)


class CandidateWindow:
    """
    候補日の列。
    - 曜日が play_weekdays に含まれる、または special_dates に含まれる日
    - reference_date 以降（当日含む）〜 window_months か月後の月末
    iterするたびに先頭から再計算する（状態を持たない）。
    """

    def __init__(
        self,
        play_weekdays: Iterable[int],
        special_dates: Iterable[DateLike],
        window_months: int,
        reference_date: date,
    ):
        validate_window_months(window_months)
        self.play_weekdays = frozenset(play_weekdays)
        validate_play_weekdays(self.play_weekdays)
        self.special_dates = frozenset(parse_date(d) for d in special_dates)
        self.window_months = window_months
        self.start = parse_date(reference_date)
        self.end = window_end(self.start, window_months)

    def qualifies(self, d: date) -> bool:
        return weekday_of(d) in self.play_weekdays or d in self.special_dates

    def __iter__(self) -> Iterator[date]:
        d = self.start
        while d <= self.end:
            if self.qualifies(d):
                yield d
            d += timedelta(days=1)

    def __contains__(self, d: object) -> bool:
        return isinstance(d, date) and self.start <= d <= self.end and self.qualifies(d)

    def candidates(self) -> Iterator[CandidateDate]:
        for d in self:
            yield CandidateDate(date=d, weekday=weekday_of(d))


def get_candidate_window(
    play_weekdays: Iterable[int],
    special_dates: Iterable[DateLike],
    window_months: int,
    reference_date: Optional[DateLike] = None,
) -> List[date]:
    if reference_date is None:
        reference_date = date.today()
    return list(CandidateWindow(play_weekdays, special_dates, window_months, parse_date(reference_date)))


def window_for_config(config: GameConfig, reference_date: DateLike) -> CandidateWindow:
    return CandidateWindow(
        config.play_weekdays, config.special_dates, config.window_months, parse_date(reference_date)
    )
