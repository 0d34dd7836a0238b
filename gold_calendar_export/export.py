"""
Export extracted sessions to ICS, CSV, and JSON.
"""
from __future__ import annotations

import csv
import hashlib
import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Sequence

import icalendar

from .config import DEFAULT_WEEKS, REMINDER_MINUTES, TIME_ZONE
from .model import CourseSession
from .recurrence import plan_event, rrule_until


def export_ics(
    sessions: Sequence[CourseSession],
    out_path: str | Path,
    weeks: int = DEFAULT_WEEKS,
    time_zone: str = TIME_ZONE,
    reminder_minutes: int = REMINDER_MINUTES,
) -> None:
    """Export sessions to iCalendar (.ics) for Apple/Google calendar."""
    cal = icalendar.Calendar()
    cal.add("prodid", "-//GOLD Calendar Export//EN")
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("x-wr-calname", "UCSB Schedule")
    cal.add("x-wr-timezone", time_zone)

    for s in sessions:
        plan = plan_event(s, weeks, time_zone, reminder_minutes)

        event = icalendar.Event()

        # Deterministic UID so re-importing replaces rather than duplicates
        uid_string = f"{plan.summary}-{','.join(s.days)}-{plan.start.isoformat()}"
        uid_hash = hashlib.md5(uid_string.encode("utf-8")).hexdigest()
        event.add("uid", f"{uid_hash}@gold-calendar-export")

        event.add("summary", plan.summary)
        event.add("description", plan.description)
        event.add("location", plan.location)
        event.add("dtstart", plan.start)
        event.add("dtend", plan.end)
        event.add("dtstamp", datetime.now(timezone.utc))
        event.add("class", "PUBLIC")
        event.add(
            "rrule",
            {
                "freq": "weekly",
                "until": rrule_until(plan.until, time_zone),
                "byday": list(s.days),
            },
        )

        alarm = icalendar.Alarm()
        alarm.add("action", "DISPLAY")
        alarm.add("description", plan.summary)
        alarm.add("trigger", timedelta(minutes=-plan.reminder_minutes))
        event.add_component(alarm)

        cal.add_component(event)

    Path(out_path).write_text(cal.to_ical().decode("utf-8"), encoding="utf-8")


def export_csv(sessions: Sequence[CourseSession], out_path: str | Path) -> None:
    """Export sessions to CSV."""
    if not sessions:
        Path(out_path).write_text("", encoding="utf-8")
        return
    rows = [s.to_dict() for s in sessions]
    with open(out_path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
        w.writeheader()
        w.writerows(rows)


def export_json(sessions: Sequence[CourseSession], out_path: str | Path) -> None:
    """Export sessions to JSON."""
    Path(out_path).write_text(
        json.dumps([s.to_dict() for s in sessions], indent=2, ensure_ascii=False),
        encoding="utf-8",
    )


def export(
    sessions: Sequence[CourseSession],
    out_path: str | Path,
    fmt: str,
    weeks: int = DEFAULT_WEEKS,
    time_zone: str = TIME_ZONE,
    reminder_minutes: int = REMINDER_MINUTES,
) -> None:
    """Export to the given format: ics, csv, or json."""
    fmt = fmt.lower()
    if fmt == "ics":
        export_ics(
            sessions, out_path, weeks=weeks, time_zone=time_zone,
            reminder_minutes=reminder_minutes,
        )
    elif fmt == "csv":
        export_csv(sessions, out_path)
    elif fmt == "json":
        export_json(sessions, out_path)
    else:
        raise ValueError(f"Unsupported format: {fmt}. Use ics, csv, or json.")
