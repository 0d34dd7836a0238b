"""
Place CourseSessions on the calendar: first meeting date, concrete start/end
instants, and the weekly RRULE that repeats them until the quarter ends.

Everything here is a pure function of the session and the settings, except
``add_sessions_to_calendar`` which hands the results to a calendar client.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, List, Protocol, Sequence, Tuple

import pytz
from icalendar import vRecur

from .config import DEFAULT_WEEKS, REMINDER_MINUTES, TIME_ZONE
from .days import WEEKDAY_INDEX
from .model import CourseSession

logger = logging.getLogger(__name__)


class CalendarClient(Protocol):
    def create_recurring_event(
        self,
        summary: str,
        description: str,
        location: str,
        start: datetime,
        end: datetime,
        time_zone: str,
        rrule: str,
        reminder_minutes: int,
    ) -> str:
        ...


# ──────────────────────────────────────────────────────────────────
#  Dates
# ──────────────────────────────────────────────────────────────────

def days_until(quarter_start: date, weekday: str) -> int:
    """Days from quarter_start to the next *weekday* (0 if it is that day)."""
    return (WEEKDAY_INDEX[weekday] - quarter_start.weekday() + 7) % 7


def first_occurrence(quarter_start: date, weekday: str) -> date:
    return quarter_start + timedelta(days=days_until(quarter_start, weekday))


def anchor_weekday(days: Sequence[str], quarter_start: date) -> str:
    """
    The day whose first meeting comes earliest on/after quarter_start.
    Ties cannot happen: each weekday maps to a distinct offset.
    """
    return min(days, key=lambda d: days_until(quarter_start, d))


def recurrence_end(quarter_start: date, weeks: int = DEFAULT_WEEKS) -> date:
    """Last day of the recurrence: quarter_start + weeks * 7 calendar days."""
    if weeks < 1:
        raise ValueError(f"weeks must be at least 1, got {weeks}")
    return quarter_start + timedelta(days=7 * weeks)


def localize(day: date, clock: time, time_zone: str = TIME_ZONE) -> datetime:
    """Combine a date and a time of day into an aware datetime in time_zone."""
    return pytz.timezone(time_zone).localize(datetime.combine(day, clock))


def session_instants(
    session: CourseSession, time_zone: str = TIME_ZONE
) -> Tuple[datetime, datetime]:
    """Start and end of the session's first meeting."""
    first = first_occurrence(
        session.quarter_start, anchor_weekday(session.days, session.quarter_start)
    )
    return localize(first, session.start_time, time_zone), localize(first, session.end_time, time_zone)


# ──────────────────────────────────────────────────────────────────
#  RRULE
# ──────────────────────────────────────────────────────────────────

def rrule_until(end_date: date, time_zone: str = TIME_ZONE) -> datetime:
    """UNTIL instant in UTC covering the whole of end_date in the local zone."""
    local_end = localize(end_date, time(23, 59, 59), time_zone)
    return local_end.astimezone(timezone.utc)


def build_rrule(days: Iterable[str], until_date: date, time_zone: str = TIME_ZONE) -> str:
    """
    RFC5545 weekly rule, e.g. ``FREQ=WEEKLY;UNTIL=20250318T065959Z;BYDAY=MO,WE,FR``.
    """
    rule = vRecur(
        freq="WEEKLY",
        until=rrule_until(until_date, time_zone),
        byday=list(days),
    )
    return rule.to_ical().decode("ascii")


# ──────────────────────────────────────────────────────────────────
#  Event plans
# ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class EventPlan:
    """Everything the calendar needs to create one recurring event."""

    summary: str
    description: str
    location: str
    start: datetime
    end: datetime
    time_zone: str
    rrule: str
    reminder_minutes: int
    until: date


def describe(session: CourseSession) -> str:
    return f"{session.course_title}\nInstructor: {session.instructor}"


def plan_event(
    session: CourseSession,
    weeks: int = DEFAULT_WEEKS,
    time_zone: str = TIME_ZONE,
    reminder_minutes: int = REMINDER_MINUTES,
) -> EventPlan:
    start, end = session_instants(session, time_zone)
    until = recurrence_end(session.quarter_start, weeks)
    return EventPlan(
        summary=" ".join(session.course_code.split()),
        description=describe(session),
        location=session.location,
        start=start,
        end=end,
        time_zone=time_zone,
        rrule=build_rrule(session.days, until, time_zone),
        reminder_minutes=reminder_minutes,
        until=until,
    )


def add_sessions_to_calendar(
    sessions: Iterable[CourseSession],
    calendar: CalendarClient,
    weeks: int = DEFAULT_WEEKS,
    time_zone: str = TIME_ZONE,
    reminder_minutes: int = REMINDER_MINUTES,
) -> List[str]:
    """
    Create one recurring event per session, in order, and return the ids.

    Calendar errors propagate; events created before the failure are kept.
    """
    created: List[str] = []
    for session in sessions:
        plan = plan_event(session, weeks, time_zone, reminder_minutes)
        logger.info(
            "Creating %s: first %s, %s", plan.summary, plan.start.isoformat(), plan.rrule
        )
        event_id = calendar.create_recurring_event(
            summary=plan.summary,
            description=plan.description,
            location=plan.location,
            start=plan.start,
            end=plan.end,
            time_zone=plan.time_zone,
            rrule=plan.rrule,
            reminder_minutes=plan.reminder_minutes,
        )
        created.append(event_id)
    return created
