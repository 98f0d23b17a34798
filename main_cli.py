# main_cli.py
from __future__ import annotations

import argparse
import calendar
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import List, Optional

from dateutil import tz

from playdate_scheduler.api import (
    calendar_for_snapshot,
    completion_for_snapshot,
    filter_bulk_dates,
    get_candidate_window,
    suggest_for_snapshot,
)
from playdate_scheduler.config import DEFAULT_CONFIG
from playdate_scheduler.domain.dates import DAY_LABELS, format_time, parse_date, weekday_of
from playdate_scheduler.io_layer.paths import InputPaths
from playdate_scheduler.io_layer.xlsx_reader import XlsxReader
from playdate_scheduler.reporting.export_xlsx import export_report_xlsx
from playdate_scheduler.reporting.report import (
    build_completion_table,
    build_session_table,
    build_suggestion_table,
)
from playdate_scheduler.validation.validator import ValidationError, validate_snapshot


def parse_args(argv: Optional[List[str]] = None):
    p = argparse.ArgumentParser(description="Availability aggregation and scheduling suggestions")
    p.add_argument("--snapshot", required=True, help="ゲームのスナップショット xlsx")
    p.add_argument("--today", default=None, help="基準日 YYYY-MM-DD（省略時は今日）")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("window", help="候補日を一覧表示")

    sp = sub.add_parser("suggest", help="候補日をランキング表示")
    sp.add_argument("--chronological", action="store_true", help="日付順で表示")
    sp.add_argument("--top", type=int, default=0, help="上位N件のみ（0=全件）")
    sp.add_argument("--out", nargs="?", const=DEFAULT_CONFIG.export.default_out, default=None,
                    help="レポートxlsxの出力先（値省略時は既定パス）")

    sub.add_parser("completion", help="プレイヤーごとの回答率")

    bp = sub.add_parser("bulk", help="一括設定の対象日")
    bp.add_argument("--player", required=True, help="プレイヤーID")
    bp.add_argument("--filter", required=True, help='"remaining" または曜日番号 0-6')
    bp.add_argument("--month", required=True, help="対象月 YYYY-MM")

    ip = sub.add_parser("ics", help="確定セッションをICSに書き出す")
    ip.add_argument("--out", default=DEFAULT_CONFIG.export.default_ics_out, help="出力ics")
    ip.add_argument("--location", default=None)
    ip.add_argument("--vtimezone", action="store_true", help="VTIMEZONE定義を含める")
    return p.parse_args(argv)


def _month_dates(month: str) -> List[date]:
    first = parse_date(f"{month}-01")
    last_day = calendar.monthrange(first.year, first.month)[1]
    return [first + timedelta(days=i) for i in range(last_day)]


def _today(args) -> date:
    if args.today:
        return parse_date(args.today)
    return datetime.now(tz=tz.tzlocal()).date()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    cfg = DEFAULT_CONFIG
    reader = XlsxReader(cfg=cfg)
    paths = InputPaths(snapshot_file=args.snapshot)

    try:
        today = _today(args)
        snapshot = reader.build_snapshot(paths)
        warnings, _ = validate_snapshot(snapshot)
        for w in warnings:
            print(f"[WARN] {w.message}")
    except ValidationError as e:
        print(f"[ERROR] {e.message}")
        return 1

    game = snapshot.config

    try:
        if args.command == "window":
            dates = get_candidate_window(game.play_weekdays, game.special_dates, game.window_months, today)
            for d in dates:
                print(f"{d.isoformat()} {DAY_LABELS['short'][weekday_of(d)]}")
            print(f"[RESULT] {len(dates)} candidate dates")

        elif args.command == "suggest":
            suggestions = suggest_for_snapshot(snapshot, today, chronological=args.chronological)
            shown = suggestions[:args.top] if args.top > 0 else suggestions
            for s in shown:
                window = ""
                if s.earliest_start_time or s.latest_end_time:
                    st = format_time(s.earliest_start_time) if s.earliest_start_time else "--"
                    et = format_time(s.latest_end_time) if s.latest_end_time else "--"
                    window = f" {st}-{et}"
                flag = "" if s.meets_threshold else " (below minimum)"
                print(
                    f"{s.date.isoformat()} {DAY_LABELS['short'][s.weekday]} "
                    f"available={s.available_count}/{s.total_players} maybe={s.maybe_count} "
                    f"pending={s.pending_count}{window}{flag}"
                )
            if args.out:
                completion = completion_for_snapshot(snapshot, today)
                out_path = export_report_xlsx(
                    args.out,
                    build_suggestion_table(suggestions),
                    build_completion_table(snapshot.players, completion),
                    build_session_table(snapshot.sessions),
                    cfg=cfg.export,
                )
                print(f"[RESULT] OK: {out_path}")

        elif args.command == "completion":
            completion = completion_for_snapshot(snapshot, today)
            if not completion:
                print("[RESULT] no candidate dates in window")
            for p in snapshot.players:
                if p.id in completion:
                    print(f"{p.name}: {completion[p.id]}%")

        elif args.command == "bulk":
            existing = {r.date: r for r in snapshot.availability if r.player_id == args.player}
            dates = filter_bulk_dates(
                args.filter, _month_dates(args.month), game.play_weekdays, game.special_dates, existing, today
            )
            for d in dates:
                print(d)
            print(f"[RESULT] {len(dates)} dates")

        elif args.command == "ics":
            ics_cfg = cfg.ics.__class__(
                prodid=cfg.ics.prodid,
                uid_domain=cfg.ics.uid_domain,
                include_vtimezone=args.vtimezone,
                fold_lines=cfg.ics.fold_lines,
            )
            text = calendar_for_snapshot(snapshot, location=args.location, cfg=ics_cfg)
            Path(args.out).parent.mkdir(parents=True, exist_ok=True)
            # CRLFをそのまま書くため改行変換しない
            with open(args.out, "w", encoding="utf-8", newline="") as f:
                f.write(text)
            print(f"[RESULT] OK: {args.out} ({len(snapshot.sessions)} sessions)")
    except ValidationError as e:
        print(f"[ERROR] {e.message}")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
