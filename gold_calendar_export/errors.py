"""
Exceptions raised by the extraction and synthesis pipeline.

Field- and row-level problems never surface as exceptions; they are recorded
as diagnostics. Everything here is fatal to a single import request.
"""
from __future__ import annotations


class ScheduleError(Exception):
    """Base class; the message is meant to be shown to the end user."""


class ParseError(ScheduleError, ValueError):
    """A time range could not be read."""


class EmptyDocumentError(ScheduleError, ValueError):
    """The uploaded HTML was empty or whitespace only."""


class NoSessionsError(ScheduleError, ValueError):
    """No course session could be recovered from the document."""


class CalendarSyncError(ScheduleError, RuntimeError):
    """The calendar service rejected or failed a request."""
