"""
Command-line interface: read a GOLD schedule page, then push it to Google
Calendar or export it to a file.
"""
from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from . import __version__
from .config import load_settings, weeks_for_term
from .errors import ScheduleError
from .export import export
from .gold_fetch import fetch_schedule_html
from .gold_html import extract_sessions
from .google_calendar import GoogleCalendar, get_calendar_service
from .pipeline import import_schedule


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Turn a UCSB GOLD 'My Schedule' page into recurring calendar events.\n"
            "- Saved HTML (--html) or live browser session (--fetch).\n"
            "- Export to ICS / CSV / JSON, or create events in Google Calendar (--google)."
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v for info, -vv for debug logging.")

    source = parser.add_mutually_exclusive_group()
    source.add_argument("--html", metavar="HTML_PATH", help="Saved GOLD My Schedule page.")
    source.add_argument(
        "--fetch",
        action="store_true",
        help="Open Chrome, sign in to GOLD yourself, then read the schedule page.",
    )

    parser.add_argument(
        "--quarter-start",
        metavar="YYYY-MM-DD",
        help="First day of instruction, e.g. 2025-01-06.",
    )
    span = parser.add_mutually_exclusive_group()
    span.add_argument("--weeks", type=int, help="Weeks the classes repeat for. Default: 10.")
    span.add_argument("--term", help="fall, winter, spring (10 weeks) or summer (6 weeks).")

    parser.add_argument(
        "--list-classes",
        action="store_true",
        help="Print the sessions found in the page, then exit.",
    )
    parser.add_argument(
        "-o",
        "--output",
        default="gold_schedule",
        help="Output path (without extension). Default: gold_schedule",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["ics", "csv", "json"],
        default="ics",
        help="Export format. Default: ics",
    )

    google = parser.add_argument_group("Google Calendar")
    google.add_argument("--google", action="store_true", help="Create the events in Google Calendar instead of exporting.")
    google.add_argument("--credentials", metavar="PATH", help="OAuth client secrets file.")
    google.add_argument("--token", metavar="PATH", help="Cached OAuth token file.")
    google.add_argument("--calendar-id", help="Target calendar. Default: primary")
    google.add_argument(
        "--list-events",
        nargs=2,
        metavar=("TIME_MIN", "TIME_MAX"),
        help="(debug) List events between two RFC3339 timestamps, then exit.",
    )
    google.add_argument("--get-event", metavar="EVENT_ID", help="(debug) Show one event, then exit.")
    return parser


def _calendar(args, settings) -> GoogleCalendar:
    service = get_calendar_service(
        args.credentials or settings.credentials_file,
        args.token or settings.token_file,
    )
    return GoogleCalendar(service, args.calendar_id or settings.calendar_id)


def _debug_events(args, settings) -> int:
    calendar = _calendar(args, settings)
    if args.get_event:
        event = calendar.get_event(args.get_event)
        print(f"{event.get('summary', '')}  {event.get('start', {}).get('dateTime', '')}")
        for rule in event.get("recurrence", []):
            print(f"  {rule}")
        return 0

    time_min, time_max = args.list_events
    for event in calendar.list_events(time_min, time_max):
        start = event.get("start", {}).get("dateTime") or event.get("start", {}).get("date", "")
        print(f"{start:<26} | {event.get('id', ''):<28} | {event.get('summary', '')}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        settings = load_settings()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.list_events or args.get_event:
        try:
            return _debug_events(args, settings)
        except ScheduleError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    if not (args.html or args.fetch):
        print(
            "No input specified. Use --html for a saved GOLD page or --fetch "
            "to read it from a browser session.",
            file=sys.stderr,
        )
        return 1
    if not args.quarter_start:
        print("Error: --quarter-start is required (YYYY-MM-DD).", file=sys.stderr)
        return 1

    try:
        quarter_start = date.fromisoformat(args.quarter_start)
        weeks = args.weeks if args.weeks is not None else weeks_for_term(args.term)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if weeks < 1:
        print("Error: --weeks must be at least 1.", file=sys.stderr)
        return 1

    if args.html:
        path = Path(args.html)
        if not path.exists():
            print(f"Error: HTML file not found: {path}", file=sys.stderr)
            return 1
        html = path.read_text(encoding="utf-8", errors="ignore")
    else:
        try:
            html = fetch_schedule_html()
        except Exception as e:
            print(f"Error fetching schedule: {e}", file=sys.stderr)
            return 1

    if args.google and not args.list_classes:
        try:
            result = import_schedule(
                html,
                quarter_start,
                _calendar(args, settings),
                weeks=weeks,
                time_zone=settings.time_zone,
                reminder_minutes=settings.reminder_minutes,
            )
        except ScheduleError as e:
            print(f"Failed to process schedule: {e}", file=sys.stderr)
            return 1
        if result.diagnostics:
            print(f"Note: {len(result.diagnostics)} item(s) could not be read exactly; run with -v for details.")
        print(result.message)
        print("Courses: " + ", ".join(dict.fromkeys(result.course_codes)))
        return 0

    try:
        extraction = extract_sessions(html, quarter_start)
    except ScheduleError as e:
        print(f"Error parsing GOLD schedule HTML: {e}", file=sys.stderr)
        return 1

    if extraction.diagnostics:
        print(f"Note: {len(extraction.diagnostics)} item(s) could not be read exactly; run with -v for details.")

    if args.list_classes:
        print("Course       | Days           | Time        | Location          | Instructor")
        print("-" * 80)
        for s in extraction.sessions:
            days = ",".join(s.days)
            when = f"{s.start_time:%H:%M}-{s.end_time:%H:%M}"
            print(f"{s.course_code:<12} | {days:<14} | {when:<11} | {s.location[:17]:<17} | {s.instructor}")
        return 0

    ext = {"ics": ".ics", "csv": ".csv", "json": ".json"}[args.format]
    out_path = Path(args.output).with_suffix(ext) if Path(args.output).suffix else Path(args.output + ext)
    export(
        extraction.sessions,
        out_path,
        args.format,
        weeks=weeks,
        time_zone=settings.time_zone,
        reminder_minutes=settings.reminder_minutes,
    )
    print(f"Exported {len(extraction.sessions)} session(s) to {out_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
