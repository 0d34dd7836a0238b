"""
Parse GOLD meeting-time text like '2:00 PM-2:50 PM' or '9AM-10AM' into a
pair of 24-hour times of day.
"""
from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from typing import NamedTuple

from .diagnostics import Diagnostics, TIME_CORRECTED
from .errors import ParseError

# Tried in order, first match wins: explicit minutes on both sides, then
# minutes optional on either side.
_TIME_PATTERNS = (
    re.compile(
        r"(\d{1,2}):(\d{2})\s*([AP]M)\s*[-–]\s*(\d{1,2}):(\d{2})\s*([AP]M)",
        re.IGNORECASE,
    ),
    re.compile(
        r"(\d{1,2})(?::(\d{2}))?\s*([AP]M)\s*[-–]\s*(\d{1,2})(?::(\d{2}))?\s*([AP]M)",
        re.IGNORECASE,
    ),
)

# Loose check used by the extractor to spot rows that carry a meeting time
TIME_RANGE_RE = _TIME_PATTERNS[1]

FALLBACK_DURATION = timedelta(minutes=60)


class TimeRange(NamedTuple):
    start: time
    end: time
    corrected: bool = False


def to_24h(hour: int, minute: int, meridiem: str) -> time:
    """12 AM → 0, 12 PM → 12, any other PM hour gets +12."""
    if not 1 <= hour <= 12 or not 0 <= minute <= 59:
        raise ParseError(f"Invalid clock time: {hour}:{minute:02d} {meridiem}")
    ap = meridiem.upper()
    if ap == "AM" and hour == 12:
        hour = 0
    elif ap == "PM" and hour != 12:
        hour += 12
    return time(hour, minute)


def _add_minutes(start: time, delta: timedelta) -> time:
    # Stays on the same day; a late start is capped at 23:59
    shifted = datetime.combine(date.min, start) + delta
    if shifted.date() != date.min:
        return time(23, 59)
    return shifted.time()


def parse_time_range(text: str, diagnostics: Diagnostics | None = None) -> TimeRange:
    """
    Parse a 12-hour 'start-end' range.

    :raises ParseError: if neither pattern matches.
    If the end comes out before the start (usually an AM/PM misread) the end
    is forced to start + 60 minutes and ``corrected`` is set.
    """
    m = None
    for pattern in _TIME_PATTERNS:
        m = pattern.search(text or "")
        if m:
            break
    if not m:
        raise ParseError(f"Could not parse time range: {text!r}")

    h1, m1, ap1, h2, m2, ap2 = m.groups()
    start = to_24h(int(h1), int(m1 or 0), ap1)
    end = to_24h(int(h2), int(m2 or 0), ap2)

    if end < start:
        fixed = _add_minutes(start, FALLBACK_DURATION)
        if diagnostics is not None:
            diagnostics.record(
                TIME_CORRECTED,
                f"end before start in {text.strip()!r}, using "
                f"{start:%H:%M}-{fixed:%H:%M}",
            )
        return TimeRange(start, fixed, corrected=True)

    return TimeRange(start, end)
