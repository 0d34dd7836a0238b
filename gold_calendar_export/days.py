"""
Weekday handling: map the many ways GOLD (and people) spell a day onto the
RFC5545 two-letter codes used in BYDAY.
"""
from __future__ import annotations

import re
from typing import Tuple

from .diagnostics import Diagnostics, EMPTY_DAYS

WEEKDAY_CODES = ("MO", "TU", "WE", "TH", "FR", "SA", "SU")

# Same numbering as date.weekday()
WEEKDAY_INDEX = {code: i for i, code in enumerate(WEEKDAY_CODES)}

DEFAULT_WEEKDAY = "MO"

_DAY_MAP = {
    "M": "MO", "MO": "MO", "MON": "MO", "MONDAY": "MO",
    "T": "TU", "TU": "TU", "TUE": "TU", "TUES": "TU", "TUESDAY": "TU",
    "W": "WE", "WE": "WE", "WED": "WE", "WEDS": "WE", "WEDNESDAY": "WE",
    "R": "TH", "TH": "TH", "THU": "TH", "THUR": "TH", "THURS": "TH", "THURSDAY": "TH",
    "F": "FR", "FR": "FR", "FRI": "FR", "FRIDAY": "FR",
    "S": "SA", "SA": "SA", "SAT": "SA", "SATURDAY": "SA",
    "U": "SU", "SU": "SU", "SUN": "SU", "SUNDAY": "SU",
}

# Longest first so "THURS" wins over "THU" when matching prefixes
_PREFIX_KEYS = sorted((k for k in _DAY_MAP if len(k) >= 3), key=len, reverse=True)

# Letters of a run-together pattern like "MWF", "TR" or "TTH". Two-letter
# codes come first so the T of TH is never read as Tuesday.
_COMPACT_PART = re.compile(r"TH|TU|SA|SU|[MTWRFSU]")
_COMPACT_RE = re.compile(r"(?:TH|TU|SA|SU|[MTWRFSU])+")
_TITLE_PAIRS_RE = re.compile(r"(?:[A-Z][a-z])+")

_SEPARATORS = re.compile(r"[^A-Za-z]+")


def _lookup(token: str) -> str | None:
    t = token.strip().upper()
    if t in _DAY_MAP:
        return _DAY_MAP[t]
    for key in _PREFIX_KEYS:
        if t.startswith(key):
            return _DAY_MAP[key]
    return None


def _mentions_thursday(text: str) -> bool:
    for token in _SEPARATORS.split(text.upper()):
        if not token:
            continue
        if _lookup(token) == "TH":
            return True
        if _COMPACT_RE.fullmatch(token) and any(
            _DAY_MAP[part] == "TH" for part in _COMPACT_PART.findall(token)
        ):
            return True
    return False


def normalize_weekday(token: str, context: str = "") -> str:
    """
    Map one day token to a canonical code. Never fails.

    A bare ``T`` is Tuesday unless *context* (the text the token came from)
    also mentions Thursday, in which case the ``T`` is taken as Thursday.
    Anything unrecognised is Monday.
    """
    t = token.strip().upper()
    if t == "T" and context and _mentions_thursday(context):
        return "TH"
    return _lookup(t) or DEFAULT_WEEKDAY


def _codes_in_token(token: str) -> list[str]:
    # "MoWeFr" / "TuTh" as printed by some registrar pages
    if _TITLE_PAIRS_RE.fullmatch(token):
        pairs = [token[i:i + 2] for i in range(0, len(token), 2)]
        codes = [_lookup(p) for p in pairs]
        if all(codes):
            return codes  # type: ignore[return-value]

    upper = token.upper()
    if len(upper) >= 3:
        code = _lookup(upper)
        if code:
            return [code]
    elif upper in _DAY_MAP:
        return [_DAY_MAP[upper]]
    if _COMPACT_RE.fullmatch(upper):
        return [_DAY_MAP[part] for part in _COMPACT_PART.findall(upper)]
    return []


def parse_days(text: str, diagnostics: Diagnostics | None = None) -> Tuple[str, ...]:
    """
    Parse a day block such as ``"M W F"``, ``"TR"``, ``"T TH"`` or
    ``"Mon, Wed"`` into the set of days it names, ordered Monday→Sunday.

    Never returns an empty tuple: if no day is found the result is
    ``("MO",)`` and an ``empty-days`` anomaly is recorded.
    """
    found: set[str] = set()
    for token in _SEPARATORS.split(text or ""):
        if token:
            found.update(_codes_in_token(token))

    days = tuple(code for code in WEEKDAY_CODES if code in found)
    if not days:
        if diagnostics is not None:
            diagnostics.record(EMPTY_DAYS, f"no weekday in {text!r}, defaulting to Monday")
        return (DEFAULT_WEEKDAY,)
    return days
