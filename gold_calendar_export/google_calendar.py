"""
Google Calendar client used to create the recurring course events.

Authorisation uses the installed-app OAuth flow with a cached token file; the
first run opens a browser to grant calendar access.
"""
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from .config import CALENDAR_ID, CREDENTIALS_FILE, TOKEN_FILE
from .errors import CalendarSyncError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/calendar"]

# API, auth and transport failures all surface as CalendarSyncError
_SERVICE_ERRORS = (HttpError, GoogleAuthError, OSError)


def get_calendar_service(
    credentials_path: str = CREDENTIALS_FILE, token_path: str = TOKEN_FILE
):
    creds = None
    if Path(token_path).exists():
        creds = Credentials.from_authorized_user_file(token_path, SCOPES)

    if creds and creds.expired and creds.refresh_token:
        try:
            creds.refresh(Request())
        except _SERVICE_ERRORS as e:
            raise CalendarSyncError(f"Could not refresh the Google token: {e}") from e
    if not creds or not creds.valid:
        if not Path(credentials_path).exists():
            raise CalendarSyncError(
                f"OAuth client file not found: {credentials_path}. "
                "Download it from the Google Cloud console (Desktop app)."
            )
        try:
            flow = InstalledAppFlow.from_client_secrets_file(credentials_path, SCOPES)
            creds = flow.run_local_server(port=0)
        except (ValueError, *_SERVICE_ERRORS) as e:
            raise CalendarSyncError(f"Google sign-in failed: {e}") from e
        Path(token_path).write_text(creds.to_json(), encoding="utf-8")

    return build("calendar", "v3", credentials=creds)


def build_event_body(
    summary: str,
    description: str,
    location: str,
    start: datetime,
    end: datetime,
    time_zone: str,
    rrule: str,
    reminder_minutes: int,
) -> Dict[str, Any]:
    """Events.insert request body for one weekly recurring class."""
    return {
        "summary": summary,
        "location": location,
        "description": description,
        "start": {"dateTime": start.isoformat(), "timeZone": time_zone},
        "end": {"dateTime": end.isoformat(), "timeZone": time_zone},
        "recurrence": [f"RRULE:{rrule}"],
        "reminders": {
            "useDefault": False,
            "overrides": [{"method": "popup", "minutes": reminder_minutes}],
        },
        "visibility": "public",
    }


class GoogleCalendar:
    """CalendarClient backed by the Calendar v3 API."""

    def __init__(self, service, calendar_id: str = CALENDAR_ID):
        self._service = service
        self.calendar_id = calendar_id

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
        body = build_event_body(
            summary, description, location, start, end, time_zone, rrule, reminder_minutes
        )
        try:
            created = self._service.events().insert(
                calendarId=self.calendar_id, body=body
            ).execute()
        except _SERVICE_ERRORS as e:
            raise CalendarSyncError(f"Could not create event for {summary}: {e}") from e

        event_id = created.get("id")
        if not event_id:
            raise CalendarSyncError(f"Calendar returned no event id for {summary}")
        logger.info("Created %s (%s) %s", summary, event_id, created.get("htmlLink", ""))
        return event_id

    # Debug helpers

    def list_events(self, time_min: str, time_max: str, max_results: int = 50) -> List[Dict[str, Any]]:
        try:
            resp = self._service.events().list(
                calendarId=self.calendar_id,
                timeMin=time_min,
                timeMax=time_max,
                maxResults=max_results,
                singleEvents=True,
                orderBy="startTime",
            ).execute()
        except _SERVICE_ERRORS as e:
            raise CalendarSyncError(f"Could not list events: {e}") from e
        return resp.get("items", [])

    def get_event(self, event_id: str) -> Dict[str, Any]:
        try:
            return self._service.events().get(
                calendarId=self.calendar_id, eventId=event_id
            ).execute()
        except _SERVICE_ERRORS as e:
            raise CalendarSyncError(f"Could not fetch event {event_id}: {e}") from e
