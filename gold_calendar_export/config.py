"""
Settings for the exporter.

Defaults are module constants; ``load_settings()`` lets the environment
override the ones that differ per deployment.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

# UCSB is the only institution served, so one fixed zone
TIME_ZONE = "America/Los_Angeles"
CALENDAR_ID = "primary"
REMINDER_MINUTES = 30

DEFAULT_WEEKS = 10
QUARTER_WEEKS = {
    "fall": 10,
    "winter": 10,
    "spring": 10,
    "summer": 6,
}

CREDENTIALS_FILE = "credentials.json"
TOKEN_FILE = "token.json"


@dataclass(frozen=True)
class Settings:
    time_zone: str = TIME_ZONE
    calendar_id: str = CALENDAR_ID
    reminder_minutes: int = REMINDER_MINUTES
    credentials_file: str = CREDENTIALS_FILE
    token_file: str = TOKEN_FILE


def load_settings(environ: dict | None = None) -> Settings:
    """Build Settings from ``GOLD_*`` / ``GOOGLE_*`` environment variables."""
    env = os.environ if environ is None else environ

    reminder = env.get("GOLD_REMINDER_MINUTES", "")
    try:
        reminder_minutes = int(reminder) if reminder.strip() else REMINDER_MINUTES
    except ValueError:
        raise ValueError(
            f"GOLD_REMINDER_MINUTES must be an integer, got {reminder!r}"
        ) from None

    return Settings(
        time_zone=env.get("GOLD_TIME_ZONE") or TIME_ZONE,
        calendar_id=env.get("GOLD_CALENDAR_ID") or CALENDAR_ID,
        reminder_minutes=reminder_minutes,
        credentials_file=env.get("GOOGLE_CREDENTIALS_FILE") or CREDENTIALS_FILE,
        token_file=env.get("GOOGLE_TOKEN_FILE") or TOKEN_FILE,
    )


def weeks_for_term(term: str | None) -> int:
    """Number of instructional weeks for a term name (summer sessions are 6)."""
    if not term:
        return DEFAULT_WEEKS
    key = term.strip().lower()
    if key not in QUARTER_WEEKS:
        raise ValueError(
            f"Unknown term: {term}. Use one of: {', '.join(QUARTER_WEEKS)}."
        )
    return QUARTER_WEEKS[key]
