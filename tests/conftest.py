import pytest


def session_row(days, time, location, instructor, css="row session"):
    return f"""
    <div class="{css}">
      <div class="col-lg-days">Days<br>{days}</div>
      <div class="col-lg-time">Time<br>{time}</div>
      <div class="col-lg-location">Location<br><a href="https://map.ucsb.edu/?bldg=1">{location}</a></div>
      <div class="col-lg-instructor">Instructor<br>{instructor}</div>
    </div>"""


def schedule_item(heading, rows, idx=0):
    return f"""
    <div class="scheduleItem">
      <div class="row">
        <div class="col-sm-12">
          <span id="pageContent_CourseList_CourseHeadingLabel_{idx}" class="courseHeadingLabel">{heading}</span>
        </div>
      </div>
      {''.join(rows)}
    </div>"""


def gold_page(*items):
    return f"""<html><head><title>GOLD - My Schedule</title></head><body>
    <div id="div_Schedule_Container">
      {''.join(items)}
      <div class="scheduleItem unitsSection"><span>Total Units</span> 9.0</div>
    </div>
    </body></html>"""


@pytest.fixture
def schedule_html():
    """Two courses: CMPSC 16 (lecture + section) and MATH 4A (lecture)."""
    return gold_page(
        schedule_item(
            "CMPSC     16  - PROBLEM SOLVING I",
            [
                session_row("T R", "2:00 PM-3:15 PM", "PHELP 3526", "SMITH J"),
                session_row("W", "5:00 PM-5:50 PM", "GIRV 1106", "DOE A"),
            ],
            idx=0,
        ),
        schedule_item(
            "MATH      4A  - LINEAR ALGEBRA W/APPS",
            [session_row("M W F", "9:00 AM-9:50 AM", "NH 1006", "LEE K")],
            idx=1,
        ),
    )


class FakeCalendar:
    """In-memory CalendarClient; fail_on makes the n-th call (1-based) raise."""

    def __init__(self, fail_on=None, error=None):
        self.calls = []
        self.fail_on = fail_on
        self.error = error

    def create_recurring_event(self, **kwargs):
        if self.fail_on is not None and len(self.calls) + 1 == self.fail_on:
            raise self.error
        self.calls.append(kwargs)
        return f"evt-{len(self.calls)}"


@pytest.fixture
def fake_calendar():
    return FakeCalendar()
