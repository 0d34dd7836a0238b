"""
One upload, end to end: extract sessions from the HTML, then create a
recurring event for each of them.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import List

from .config import DEFAULT_WEEKS, REMINDER_MINUTES, TIME_ZONE
from .diagnostics import Diagnostics
from .gold_html import extract_sessions
from .recurrence import CalendarClient, add_sessions_to_calendar

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    event_ids: List[str]
    course_codes: List[str]
    diagnostics: Diagnostics

    @property
    def message(self) -> str:
        return f"Added {len(self.event_ids)} courses to your Google Calendar."


def import_schedule(
    html_content: str,
    quarter_start: date | str,
    calendar: CalendarClient,
    weeks: int = DEFAULT_WEEKS,
    time_zone: str = TIME_ZONE,
    reminder_minutes: int = REMINDER_MINUTES,
) -> ImportResult:
    """
    :raises EmptyDocumentError, NoSessionsError: if nothing can be extracted.
    :raises CalendarSyncError: on the first calendar failure; events created
        before it are left in place.
    """
    extraction = extract_sessions(html_content, quarter_start)
    event_ids = add_sessions_to_calendar(
        extraction.sessions, calendar, weeks, time_zone, reminder_minutes
    )
    logger.info("Created %d event(s) for %d session(s)", len(event_ids), len(extraction.sessions))
    return ImportResult(
        event_ids=event_ids,
        course_codes=extraction.course_codes,
        diagnostics=extraction.diagnostics,
    )
