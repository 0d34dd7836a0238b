"""
Parse a saved UCSB GOLD "My Schedule" page into CourseSession records.

Usage pattern:
- Sign in to GOLD, open "My Schedule" for the quarter
- Save the page from the browser (File → Save Page As, HTML only)
- This module reads the saved HTML; the quarter start date anchors each
  session's first meeting

The markup has no stable schema. Class names and nesting differ between
lecture and section rows and between page versions, so both course blocks and
session rows are located through ordered fallback strategies, first non-empty
result wins. A typical block looks like:

    <div class="scheduleItem">
      <div class="row">
        <span id="..._CourseHeadingLabel_0">CMPSC     16  - PROBLEM SOLVING I</span>
      </div>
      <div class="row session">
        <div class="col-lg-days">Days M W F</div>
        <div class="col-lg-time">Time 2:00 PM-2:50 PM</div>
        <div class="col-lg-location">Location <a href="...map...">PHELP 3526</a></div>
        <div class="col-lg-instructor">Instructor SMITH J</div>
      </div>
    </div>
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, Tag  # type: ignore[import]

from .days import DEFAULT_WEEKDAY, parse_days
from .diagnostics import (
    Diagnostics,
    FIELD_FAILED,
    HEADING_UNPARSED,
    NO_SESSION_ROWS,
    ROW_SKIPPED,
)
from .errors import EmptyDocumentError, NoSessionsError, ParseError
from .model import CourseSession
from .times import TIME_RANGE_RE, TimeRange, parse_time_range

logger = logging.getLogger(__name__)

SCHEDULE_ITEM_CLASS = "scheduleItem"
UNITS_SECTION_CLASS = "unitsSection"
HEADING_ID_MARKER = "CourseHeadingLabel"
SCHEDULE_CONTAINER_ID = "div_Schedule_Container"

# How many enclosing ".row" levels sit between a heading label and its block
HEADING_ROW_LEVELS = 2

BlockFinder = Callable[[BeautifulSoup], List[Tag]]
RowFinder = Callable[[Tag], List[Tag]]


# ──────────────────────────────────────────────────────────────────
#  Text helpers
# ──────────────────────────────────────────────────────────────────

def _collapse(text: str) -> str:
    return re.sub(r"\s+", " ", text or "").strip()


def _strip_label(text: str, label: str) -> str:
    """Drop a field label ('Days', 'Instructor:', ...) and collapse spaces."""
    return _collapse(re.sub(rf"\b{label}s?\b:?", " ", text))


def _innermost(elements: Sequence[Tag]) -> List[Tag]:
    """Keep only elements that do not contain another element of the list."""
    ids = {id(el) for el in elements}
    return [
        el for el in elements
        if not any(id(d) in ids for d in el.find_all(True))
    ]


# ──────────────────────────────────────────────────────────────────
#  Course headings
# ──────────────────────────────────────────────────────────────────

_HEADING_SELECTORS = (
    ".courseHeadingLabel",
    f'[id*="{HEADING_ID_MARKER}"]',
    ".courseTitle",
    "span",
)

# "CMPSC     16  - PROBLEM SOLVING I": code, 2+ spaces, dash, title
_HEADING_RE = re.compile(r"^([\w&\s]+?)\s{2,}-\s*(.*)")


def split_course_heading(heading: str) -> Optional[Tuple[str, str]]:
    """
    Split a heading into (course_code, course_title), whitespace-collapsed.

    Returns None when the heading has neither the GOLD spacing pattern nor a
    dash to split on.
    """
    m = _HEADING_RE.search(heading or "")
    if m:
        code, title = m.group(1), m.group(2)
    elif "-" in (heading or ""):
        code, _, title = heading.partition("-")
    else:
        return None

    code, title = _collapse(code), _collapse(title)
    if not code:
        return None
    return code, title


def _heading_text(block: Tag) -> str:
    for selector in _HEADING_SELECTORS:
        el = block.select_one(selector)
        if el is not None:
            return el.get_text(" ", strip=True)
    return ""


# ──────────────────────────────────────────────────────────────────
#  Course block strategies
# ──────────────────────────────────────────────────────────────────

def _blocks_by_item_class(soup: BeautifulSoup) -> List[Tag]:
    return soup.find_all(class_=SCHEDULE_ITEM_CLASS)


def _climb_to_block(label: Tag, levels: int = HEADING_ROW_LEVELS) -> Optional[Tag]:
    node: Tag = label
    for _ in range(levels):
        row = node.find_parent(class_="row")
        if row is None:
            return None
        node = row
    return node.parent


def _blocks_by_heading_label(soup: BeautifulSoup) -> List[Tag]:
    blocks: List[Tag] = []
    for label in soup.select(f'[id*="{HEADING_ID_MARKER}"]'):
        block = _climb_to_block(label)
        if block is not None and not any(block is b for b in blocks):
            blocks.append(block)
    return blocks


def _blocks_in_container(soup: BeautifulSoup) -> List[Tag]:
    container = soup.find(id=SCHEDULE_CONTAINER_ID)
    if container is None:
        return []
    return [
        child for child in container.find_all(True, recursive=False)
        if child.select_one(f'[id*="{HEADING_ID_MARKER}"]') is not None
    ]


BLOCK_STRATEGIES: Tuple[Tuple[str, BlockFinder], ...] = (
    ("schedule-item", _blocks_by_item_class),
    ("heading-label", _blocks_by_heading_label),
    ("schedule-container", _blocks_in_container),
)


def find_course_blocks(soup: BeautifulSoup) -> Tuple[str, List[Tag]]:
    """Return (strategy name, blocks) for the first strategy that finds any."""
    for name, finder in BLOCK_STRATEGIES:
        blocks = finder(soup)
        if blocks:
            logger.info("Found %d course block(s) via %s", len(blocks), name)
            return name, blocks
        logger.debug("Block strategy %s found nothing", name)
    return "", []


# ──────────────────────────────────────────────────────────────────
#  Session row strategies
# ──────────────────────────────────────────────────────────────────

def _rows_by_session_class(block: Tag) -> List[Tag]:
    return block.select(".row.session")


def _rows_by_time_text(block: Tag) -> List[Tag]:
    return _innermost([
        row for row in block.select(".row")
        if TIME_RANGE_RE.search(row.get_text(" ", strip=True))
    ])


def _rows_by_days_label(block: Tag) -> List[Tag]:
    return _innermost([
        row for row in block.select(".row")
        if row.select_one('[class*="days"]') is not None
        or row.find(string=re.compile(r"\bDays\b")) is not None
    ])


ROW_STRATEGIES: Tuple[Tuple[str, RowFinder], ...] = (
    ("session-class", _rows_by_session_class),
    ("time-text", _rows_by_time_text),
    ("days-label", _rows_by_days_label),
)


def find_session_rows(block: Tag) -> List[Tag]:
    for name, finder in ROW_STRATEGIES:
        rows = finder(block)
        if rows:
            logger.debug("Found %d session row(s) via %s", len(rows), name)
            return rows
    return []


# ──────────────────────────────────────────────────────────────────
#  Per-row fields
# ──────────────────────────────────────────────────────────────────

def _div_containing(row: Tag, predicate: Callable[[str], bool]) -> Optional[Tag]:
    """Innermost <div> in the row whose text satisfies predicate."""
    matches = [d for d in row.find_all("div") if predicate(d.get_text(" ", strip=True))]
    inner = _innermost(matches)
    return inner[0] if inner else None


def _field_element(row: Tag, selector: str, label: str) -> Optional[Tag]:
    el = row.select_one(selector)
    if el is None:
        el = _div_containing(row, lambda text: label in text)
    return el


def _row_days(row: Tag, diagnostics: Diagnostics) -> Tuple[str, ...]:
    el = _field_element(row, '.col-lg-days, [class*="days"]', "Days")
    text = _strip_label(el.get_text(" ", strip=True), "Days") if el else ""
    return parse_days(text, diagnostics)


def _row_time(row: Tag, diagnostics: Diagnostics) -> TimeRange:
    candidates: List[Tag] = []
    el = row.select_one('.col-lg-time, [class*="time"]')
    if el is not None:
        candidates.append(el)
    scanned = _div_containing(row, lambda text: TIME_RANGE_RE.search(text) is not None)
    if scanned is not None:
        candidates.append(scanned)

    for candidate in candidates:
        text = _strip_label(candidate.get_text(" ", strip=True), "Time")
        if TIME_RANGE_RE.search(text):
            return parse_time_range(text, diagnostics)
    return parse_time_range(_strip_label(row.get_text(" ", strip=True), "Time"), diagnostics)


def _row_location(row: Tag) -> str:
    el = _field_element(
        row,
        '.col-lg-location a, [class*="location"] a, a[href*="map"]',
        "Location",
    )
    return _strip_label(el.get_text(" ", strip=True), "Location") if el else ""


def _row_instructor(row: Tag) -> str:
    el = _field_element(row, '.col-lg-instructor, [class*="instructor"]', "Instructor")
    return _strip_label(el.get_text(" ", strip=True), "Instructor") if el else ""


def _safe_field(name, extract, default, diagnostics: Diagnostics, where: str):
    try:
        return extract()
    except Exception as e:  # one bad field must not drop the row
        diagnostics.record(FIELD_FAILED, f"{name} in {where}: {e}")
        return default


def _parse_session_row(
    row: Tag,
    course_code: str,
    course_title: str,
    quarter_start: date,
    diagnostics: Diagnostics,
    where: str,
) -> Optional[CourseSession]:
    try:
        times = _row_time(row, diagnostics)
    except ParseError as e:
        diagnostics.record(ROW_SKIPPED, f"{where}: {e}")
        return None

    days = _safe_field(
        "days", lambda: _row_days(row, diagnostics), (DEFAULT_WEEKDAY,), diagnostics, where
    )
    location = _safe_field("location", lambda: _row_location(row), "", diagnostics, where)
    instructor = _safe_field("instructor", lambda: _row_instructor(row), "", diagnostics, where)

    return CourseSession(
        course_code=course_code,
        course_title=course_title,
        instructor=instructor,
        location=location,
        days=days,
        start_time=times.start,
        end_time=times.end,
        quarter_start=quarter_start,
    )


def _parse_block(
    block: Tag, quarter_start: date, diagnostics: Diagnostics
) -> List[CourseSession]:
    heading = _heading_text(block)
    split = split_course_heading(heading)
    if split is None:
        diagnostics.record(HEADING_UNPARSED, f"could not split heading {heading!r}")
        return []
    course_code, course_title = split

    rows = find_session_rows(block)
    if not rows:
        diagnostics.record(NO_SESSION_ROWS, f"{course_code}: no session rows")
        return []

    sessions: List[CourseSession] = []
    for i, row in enumerate(rows, start=1):
        where = f"{course_code} row {i}"
        session = _parse_session_row(
            row, course_code, course_title, quarter_start, diagnostics, where
        )
        if session is not None:
            logger.debug(
                "%s: %s %s-%s", where, ",".join(session.days),
                session.start_time, session.end_time,
            )
            sessions.append(session)
    return sessions


# ──────────────────────────────────────────────────────────────────
#  Public API
# ──────────────────────────────────────────────────────────────────

@dataclass
class Extraction:
    sessions: List[CourseSession]
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    strategy: str = ""

    @property
    def course_codes(self) -> List[str]:
        return [s.course_code for s in self.sessions]


def _as_date(value: date | str) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip())


def looks_like_schedule(html_content: str) -> bool:
    """True if any block strategy recognises course blocks in the page."""
    if not html_content or not html_content.strip():
        return False
    _, blocks = find_course_blocks(BeautifulSoup(html_content, "html.parser"))
    return bool(blocks)


def extract_sessions(html_content: str, quarter_start: date | str) -> Extraction:
    """
    Extract every course session from GOLD schedule HTML, in document order.

    :raises EmptyDocumentError: for blank input.
    :raises NoSessionsError: when no session survives extraction.
    """
    if not html_content or not html_content.strip():
        raise EmptyDocumentError("Empty HTML content provided.")

    start = _as_date(quarter_start)
    diagnostics = Diagnostics()
    soup = BeautifulSoup(html_content, "html.parser")

    strategy, blocks = find_course_blocks(soup)
    sessions: List[CourseSession] = []
    for block in blocks:
        if UNITS_SECTION_CLASS in (block.get("class") or []):
            logger.debug("Skipping units section")
            continue
        sessions.extend(_parse_block(block, start, diagnostics))

    if not sessions:
        raise NoSessionsError(
            "No course sessions found in the HTML.\n"
            "Possible causes:\n"
            "  1. The saved page is not GOLD's \"My Schedule\" page\n"
            "  2. The schedule for the selected quarter is empty"
        )

    logger.info(
        "Extracted %d session(s) with %d anomaly(ies)", len(sessions), len(diagnostics)
    )
    return Extraction(sessions=sessions, diagnostics=diagnostics, strategy=strategy)


def parse_gold_html(
    html_path: str | Path | None = None,
    html_content: str | None = None,
    quarter_start: date | str | None = None,
) -> List[CourseSession]:
    """
    Parse a saved GOLD schedule page.

    :param html_path: Path to the saved HTML file.
    :param html_content: Raw HTML string (alternative to html_path).
    :param quarter_start: First day of the quarter (date or YYYY-MM-DD).
    :returns: CourseSession list in document order.
    """
    if html_content is not None:
        html = html_content
    elif html_path is not None:
        html = Path(html_path).read_text(encoding="utf-8", errors="ignore")
    else:
        raise ValueError("Provide either html_path or html_content.")
    if quarter_start is None:
        raise ValueError("quarter_start is required (YYYY-MM-DD).")

    return extract_sessions(html, quarter_start).sessions
