# playdate_scheduler/reporting/ics.py
"""
確定セッションを iCalendar (ICS) テキストにする。

- 改行は CRLF
- 時刻付きイベント: timezone があれば DTSTART;TZID=...、無ければフローティング
- 時刻なし: 終日イベント（DTSTART/DTEND とも同じ日付）
- タイムゾーン変換はしない（壁時計時刻にラベルを付けるだけ）
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from dateutil import tz

from playdate_scheduler.config import DEFAULT_CONFIG, IcsConfig
from playdate_scheduler.domain.dates import parse_date, parse_optional_time
from playdate_scheduler.domain.models import CalendarEvent, ConfirmedSession, GameConfig

ICS_MIME_TYPE = "text/calendar; charset=utf-8"

# VTIMEZONE用のDST規則（オフセット, 略称, 月, BYDAY）
_TZ_RULES: Dict[str, Dict[str, tuple]] = {
    "America/Los_Angeles": {"std": ("-0800", "PST", 11, "1SU"), "dst": ("-0700", "PDT", 3, "2SU")},
    "America/Denver": {"std": ("-0700", "MST", 11, "1SU"), "dst": ("-0600", "MDT", 3, "2SU")},
    "America/Chicago": {"std": ("-0600", "CST", 11, "1SU"), "dst": ("-0500", "CDT", 3, "2SU")},
    "America/New_York": {"std": ("-0500", "EST", 11, "1SU"), "dst": ("-0400", "EDT", 3, "2SU")},
    "America/Phoenix": {"std": ("-0700", "MST", 1, "1SU"), "dst": ("-0700", "MST", 1, "1SU")},
    "Pacific/Honolulu": {"std": ("-1000", "HST", 1, "1SU"), "dst": ("-1000", "HST", 1, "1SU")},
    "America/Anchorage": {"std": ("-0900", "AKST", 11, "1SU"), "dst": ("-0800", "AKDT", 3, "2SU")},
    "Europe/London": {"std": ("+0000", "GMT", 10, "-1SU"), "dst": ("+0100", "BST", 3, "-1SU")},
    "Europe/Paris": {"std": ("+0100", "CET", 10, "-1SU"), "dst": ("+0200", "CEST", 3, "-1SU")},
    "UTC": {"std": ("+0000", "UTC", 1, "1SU"), "dst": ("+0000", "UTC", 1, "1SU")},
}


def escape_ics(text: str) -> str:
    # RFC5545 TEXT値の最小エスケープ。バックスラッシュを最初に処理する
    text = text.replace("\\", "\\\\")
    text = text.replace(";", r"\;")
    text = text.replace(",", r"\,")
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = text.replace("\n", "\\n")
    return text


def fold_ics_line(line: str, limit: int = 75) -> List[str]:
    """UTF-8で75オクテットを超える行を折り返す（マルチバイト文字の途中では切らない）"""
    if len(line.encode("utf-8")) <= limit:
        return [line]
    out: List[str] = []
    cur = ""
    size = 0
    for ch in line:
        n = len(ch.encode("utf-8"))
        # 継続行は先頭の空白1オクテット分を差し引く
        room = limit if not out else limit - 1
        if size + n > room:
            out.append(cur if not out else " " + cur)
            cur, size = "", 0
        cur += ch
        size += n
    if cur:
        out.append(cur if not out else " " + cur)
    return out


def format_stamp(now: datetime) -> str:
    # naive は UTC とみなす
    if now.tzinfo is None:
        now = now.replace(tzinfo=tz.UTC)
    return now.astimezone(tz.UTC).strftime("%Y%m%dT%H%M%SZ")


def vtimezone_lines(tzid: str) -> List[str]:
    rules = _TZ_RULES.get(tzid)
    if not rules:
        # 未知のゾーンは定義を出さない（クライアント側の解釈に任せる）
        return []
    std_off, std_abbr, std_month, std_day = rules["std"]
    dst_off, dst_abbr, dst_month, dst_day = rules["dst"]
    observes_dst = dst_off != std_off

    lines = ["BEGIN:VTIMEZONE", f"TZID:{tzid}", f"X-LIC-LOCATION:{tzid}"]
    if observes_dst:
        lines += [
            "BEGIN:DAYLIGHT",
            f"TZOFFSETFROM:{std_off}",
            f"TZOFFSETTO:{dst_off}",
            f"TZNAME:{dst_abbr}",
            "DTSTART:19700101T020000",
            f"RRULE:FREQ=YEARLY;BYMONTH={dst_month};BYDAY={dst_day}",
            "END:DAYLIGHT",
        ]
    lines += [
        "BEGIN:STANDARD",
        f"TZOFFSETFROM:{dst_off if observes_dst else std_off}",
        f"TZOFFSETTO:{std_off}",
        f"TZNAME:{std_abbr}",
        "DTSTART:19700101T020000",
        f"RRULE:FREQ=YEARLY;BYMONTH={std_month};BYDAY={std_day}",
        "END:STANDARD",
        "END:VTIMEZONE",
    ]
    return lines


def _pick(m: Mapping[str, Any], *keys: str) -> Any:
    for k in keys:
        if k in m and m[k] is not None:
            return m[k]
    return None


def coerce_event(obj: Union[CalendarEvent, Mapping[str, Any]]) -> CalendarEvent:
    """dict（startTime / start_time どちらの表記も可）を CalendarEvent にする"""
    if isinstance(obj, CalendarEvent):
        return obj
    return CalendarEvent(
        date=parse_date(_pick(obj, "date")),
        title=_pick(obj, "title") or "",
        start_time=parse_optional_time(_pick(obj, "start_time", "startTime")),
        end_time=parse_optional_time(_pick(obj, "end_time", "endTime")),
        description=_pick(obj, "description"),
        location=_pick(obj, "location"),
        timezone=_pick(obj, "timezone"),
    )


def _is_timed(ev: CalendarEvent) -> bool:
    return ev.start_time is not None and ev.end_time is not None


def event_lines(ev: CalendarEvent, index: int, stamp: str, cfg: IcsConfig) -> List[str]:
    day = ev.date.strftime("%Y%m%d")
    lines = [
        "BEGIN:VEVENT",
        f"UID:{day}-{index}@{cfg.uid_domain}",
        f"DTSTAMP:{stamp}",
    ]

    if _is_timed(ev):
        start = ev.start_time.strftime("%H%M%S")
        end = ev.end_time.strftime("%H%M%S")
        if ev.timezone:
            lines.append(f"DTSTART;TZID={ev.timezone}:{day}T{start}")
            lines.append(f"DTEND;TZID={ev.timezone}:{day}T{end}")
        else:
            lines.append(f"DTSTART:{day}T{start}")
            lines.append(f"DTEND:{day}T{end}")
    else:
        lines.append(f"DTSTART;VALUE=DATE:{day}")
        lines.append(f"DTEND;VALUE=DATE:{day}")

    if ev.title:
        lines.append(f"SUMMARY:{escape_ics(ev.title)}")
    if ev.description:
        lines.append(f"DESCRIPTION:{escape_ics(ev.description)}")
    if ev.location:
        lines.append(f"LOCATION:{escape_ics(ev.location)}")
    lines.append("END:VEVENT")
    return lines


def render_calendar(
    events: Iterable[Union[CalendarEvent, Mapping[str, Any]]],
    now: Optional[datetime] = None,
    cfg: IcsConfig = DEFAULT_CONFIG.ics,
) -> str:
    evs = [coerce_event(e) for e in events]
    stamp = format_stamp(now if now is not None else datetime.now(tz.UTC))

    lines: List[str] = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{cfg.prodid}",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
    ]

    if cfg.include_vtimezone:
        used: List[str] = []
        for ev in evs:
            if ev.timezone and _is_timed(ev) and ev.timezone not in used:
                used.append(ev.timezone)
        for tzid in used:
            lines.extend(vtimezone_lines(tzid))

    for i, ev in enumerate(evs):
        lines.extend(event_lines(ev, i, stamp, cfg))

    lines.append("END:VCALENDAR")

    if cfg.fold_lines:
        folded: List[str] = []
        for ln in lines:
            folded.extend(fold_ics_line(ln))
        lines = folded
    return "\r\n".join(lines)


def sessions_to_events(
    config: GameConfig,
    sessions: Iterable[ConfirmedSession],
    location: Optional[str] = None,
) -> List[CalendarEvent]:
    """確定セッション → イベント。時刻が無いセッションはゲームの既定時刻で補う"""
    out: List[CalendarEvent] = []
    for s in sessions:
        out.append(CalendarEvent(
            date=s.date,
            title=config.title,
            start_time=s.start_time if s.start_time is not None else config.default_start_time,
            end_time=s.end_time if s.end_time is not None else config.default_end_time,
            description=config.description,
            location=location,
            timezone=config.timezone,
        ))
    return out
