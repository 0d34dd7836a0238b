"""Tests for gold_html.py – GOLD My Schedule extraction."""
import logging
from datetime import date, time

import pytest

from gold_calendar_export import gold_html
from gold_calendar_export.diagnostics import (
    EMPTY_DAYS,
    FIELD_FAILED,
    HEADING_UNPARSED,
    ROW_SKIPPED,
    TIME_CORRECTED,
)
from gold_calendar_export.errors import EmptyDocumentError, NoSessionsError
from gold_calendar_export.gold_html import (
    extract_sessions,
    looks_like_schedule,
    parse_gold_html,
    split_course_heading,
)

from conftest import gold_page, schedule_item, session_row

QUARTER_START = date(2025, 1, 6)


# ── Headings ───────────────────────────────────────────────────

class TestSplitCourseHeading:
    def test_gold_spacing(self):
        assert split_course_heading("CMPSC     16  - PROBLEM SOLVING I") == (
            "CMPSC 16", "PROBLEM SOLVING I",
        )

    def test_single_spaced_dash(self):
        assert split_course_heading("ANTH 5 - INTRO - CULTURAL") == (
            "ANTH 5", "INTRO - CULTURAL",
        )

    def test_no_dash(self):
        assert split_course_heading("INDEPENDENT STUDY") is None

    def test_ampersand_in_code(self):
        assert split_course_heading("W&L       1  - INTRO WRITING") == (
            "W&L 1", "INTRO WRITING",
        )

    def test_empty_code(self):
        assert split_course_heading("- TITLE ONLY") is None


# ── Strategy 1: .scheduleItem blocks with .row.session rows ─────

class TestScheduleItemLayout:
    def test_sessions_in_document_order(self, schedule_html):
        extraction = extract_sessions(schedule_html, QUARTER_START)
        assert extraction.strategy == "schedule-item"
        assert extraction.course_codes == ["CMPSC 16", "CMPSC 16", "MATH 4A"]

    def test_lecture_fields(self, schedule_html):
        lecture = extract_sessions(schedule_html, QUARTER_START).sessions[0]
        assert lecture.course_title == "PROBLEM SOLVING I"
        assert lecture.days == ("TU", "TH")
        assert lecture.start_time == time(14, 0)
        assert lecture.end_time == time(15, 15)
        assert lecture.location == "PHELP 3526"
        assert lecture.instructor == "SMITH J"
        assert lecture.quarter_start == QUARTER_START

    def test_section_differs_from_lecture(self, schedule_html):
        section = extract_sessions(schedule_html, QUARTER_START).sessions[1]
        assert section.course_code == "CMPSC 16"
        assert section.days == ("WE",)
        assert section.start_time == time(17, 0)
        assert section.location == "GIRV 1106"
        assert section.instructor == "DOE A"

    def test_units_section_skipped_silently(self, schedule_html):
        extraction = extract_sessions(schedule_html, QUARTER_START)
        assert len(extraction.sessions) == 3
        assert len(extraction.diagnostics) == 0

    def test_quarter_start_as_string(self, schedule_html):
        sessions = extract_sessions(schedule_html, "2025-01-06").sessions
        assert sessions[0].quarter_start == QUARTER_START

    def test_deterministic(self, schedule_html):
        first = extract_sessions(schedule_html, QUARTER_START).sessions
        second = extract_sessions(schedule_html, QUARTER_START).sessions
        assert first == second


# ── Strategy 2: heading label nested two rows deep ─────────────

class TestHeadingLabelLayout:
    HTML = """<html><body>
    <div class="courseBlock">
      <div class="row">
        <div class="row"><span id="ctl00_CourseHeadingLabel_0">ANTH 5 - INTRO CULTURAL ANTH</span></div>
        <div class="row">
          <div>Days: M W</div>
          <div>11:00 AM-12:15 PM</div>
          <div>Location: HSSB 1174</div>
          <div>Instructor: KIM P</div>
        </div>
      </div>
    </div>
    <div class="courseBlock">
      <div class="row">
        <div class="row"><span id="ctl00_CourseHeadingLabel_1">PSY 1 - INTRO TO PSYCH</span></div>
        <div class="row">
          <div>Days: F</div>
          <div>1:00 PM-1:50 PM</div>
          <div>Location: CAMPBELL HALL</div>
          <div>Instructor: ROE B</div>
        </div>
      </div>
    </div>
    </body></html>"""

    def test_blocks_recovered_by_climbing_rows(self):
        extraction = extract_sessions(self.HTML, QUARTER_START)
        assert extraction.strategy == "heading-label"
        assert extraction.course_codes == ["ANTH 5", "PSY 1"]

    def test_text_scan_fields(self):
        anth = extract_sessions(self.HTML, QUARTER_START).sessions[0]
        assert anth.course_title == "INTRO CULTURAL ANTH"
        assert anth.days == ("MO", "WE")
        assert (anth.start_time, anth.end_time) == (time(11, 0), time(12, 15))
        assert anth.location == "HSSB 1174"
        assert anth.instructor == "KIM P"


# ── Strategy 3: direct children of the schedule container ──────

class TestContainerLayout:
    HTML = """<html><body>
    <div id="div_Schedule_Container">
      <div>
        <span id="x_CourseHeadingLabel_0">CHEM      1A  - GENERAL CHEMISTRY</span>
        <div class="row">
          <div class="days">T R</div>
          <div>Time 8:00 AM-9:15 AM</div>
        </div>
      </div>
      <div><p>Final exam schedule</p></div>
    </div>
    </body></html>"""

    def test_children_with_heading(self):
        extraction = extract_sessions(self.HTML, QUARTER_START)
        assert extraction.strategy == "schedule-container"
        assert len(extraction.sessions) == 1

        chem = extraction.sessions[0]
        assert chem.course_code == "CHEM 1A"
        assert chem.days == ("TU", "TH")
        assert (chem.start_time, chem.end_time) == (time(8, 0), time(9, 15))
        assert chem.location == ""
        assert chem.instructor == ""


# ── Recoverable anomalies ──────────────────────────────────────

class TestRecoverableAnomalies:
    def test_unparsed_heading_skips_block(self):
        html = gold_page(
            schedule_item("INDEPENDENT STUDY", [session_row("M", "9:00 AM-9:50 AM", "TBA", "")], idx=0),
            schedule_item("MATH      3A  - CALCULUS", [session_row("M W F", "10:00 AM-10:50 AM", "NH 1006", "LEE K")], idx=1),
        )
        extraction = extract_sessions(html, QUARTER_START)
        assert extraction.course_codes == ["MATH 3A"]
        assert extraction.diagnostics.count(HEADING_UNPARSED) == 1

    def test_row_without_time_is_skipped(self):
        html = gold_page(
            schedule_item(
                "EACS      4A  - INTRO TO BUDDHISM",
                ["""<div class="row"><div class="days">Days T R</div><div>Time TBA</div></div>"""],
                idx=0,
            ),
            schedule_item("MATH      3A  - CALCULUS", [session_row("M W F", "10:00 AM-10:50 AM", "NH 1006", "LEE K")], idx=1),
        )
        extraction = extract_sessions(html, QUARTER_START)
        assert extraction.course_codes == ["MATH 3A"]
        assert extraction.diagnostics.count(ROW_SKIPPED) == 1

    def test_missing_days_default_to_monday(self):
        html = gold_page(
            schedule_item("WRIT      2  - ACADEMIC WRITING", [session_row("TBA", "3:30 PM-4:45 PM", "SH 1431", "PARK S")]),
        )
        extraction = extract_sessions(html, QUARTER_START)
        assert extraction.sessions[0].days == ("MO",)
        assert extraction.diagnostics.count(EMPTY_DAYS) == 1

    def test_time_correction_flagged(self):
        html = gold_page(
            schedule_item("MUS      15  - MUSIC APPRECIATION", [session_row("T R", "11:30 AM-11:00 AM", "MUSIC 1250", "ORR T")]),
        )
        extraction = extract_sessions(html, QUARTER_START)
        session = extraction.sessions[0]
        assert (session.start_time, session.end_time) == (time(11, 30), time(12, 30))
        assert extraction.diagnostics.count(TIME_CORRECTED) == 1

    def test_field_failure_keeps_row(self, schedule_html, monkeypatch):
        def boom(row):
            raise AttributeError("broken location cell")

        monkeypatch.setattr(gold_html, "_row_location", boom)
        extraction = extract_sessions(schedule_html, QUARTER_START)
        assert len(extraction.sessions) == 3
        assert all(s.location == "" for s in extraction.sessions)
        assert all(s.instructor for s in extraction.sessions)
        assert extraction.diagnostics.count(FIELD_FAILED) == 3


# ── Fatal outcomes ─────────────────────────────────────────────

class TestFatal:
    @pytest.mark.parametrize("html", ["", "   \n  "])
    def test_blank_document(self, html):
        with pytest.raises(EmptyDocumentError):
            extract_sessions(html, QUARTER_START)

    def test_no_course_blocks(self):
        with pytest.raises(NoSessionsError, match="No course sessions"):
            extract_sessions("<html><body><p>Nothing here</p></body></html>", QUARTER_START)

    def test_blocks_without_usable_rows(self):
        html = gold_page(schedule_item("INDEPENDENT STUDY", []))
        with pytest.raises(NoSessionsError):
            extract_sessions(html, QUARTER_START)


# ── Public helpers ─────────────────────────────────────────────

class TestParseGoldHtml:
    def test_from_file(self, tmp_path, schedule_html):
        path = tmp_path / "My Schedule.html"
        path.write_text(schedule_html, encoding="utf-8")
        sessions = parse_gold_html(html_path=path, quarter_start="2025-01-06")
        assert [s.course_code for s in sessions] == ["CMPSC 16", "CMPSC 16", "MATH 4A"]

    def test_requires_input(self):
        with pytest.raises(ValueError, match="html_path or html_content"):
            parse_gold_html(quarter_start="2025-01-06")

    def test_requires_quarter_start(self, schedule_html):
        with pytest.raises(ValueError, match="quarter_start"):
            parse_gold_html(html_content=schedule_html)


class TestLooksLikeSchedule:
    def test_schedule_page(self, schedule_html):
        assert looks_like_schedule(schedule_html) is True

    def test_other_pages(self):
        assert looks_like_schedule("<html><body><p>Sign in</p></body></html>") is False
        assert looks_like_schedule("") is False


def test_anomalies_logged_at_info(caplog):
    caplog.set_level(logging.DEBUG, logger="gold_calendar_export")
    html = gold_page(
        schedule_item("WRIT      2  - ACADEMIC WRITING", [session_row("TBA", "3:30 PM-4:45 PM", "SH 1431", "PARK S")]),
    )
    extract_sessions(html, QUARTER_START)

    records = [r for r in caplog.records if r.name == "gold_calendar_export.diagnostics"]
    assert [r.levelno for r in records] == [logging.INFO]
    assert EMPTY_DAYS in records[0].getMessage()
