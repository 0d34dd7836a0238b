"""
Record types shared by the extractor, the synthesizer and the exporters.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Dict, Tuple


@dataclass(frozen=True)
class CourseSession:
    """
    One weekly meeting pattern of a course (the lecture or one section).

    Several sessions can share a course code and title; each one is placed on
    the calendar independently.
    """

    course_code: str
    course_title: str
    instructor: str
    location: str
    days: Tuple[str, ...]
    start_time: time
    end_time: time
    quarter_start: date

    def to_dict(self) -> Dict[str, str]:
        return {
            "course_code": self.course_code,
            "course_title": self.course_title,
            "instructor": self.instructor,
            "location": self.location,
            "days": ",".join(self.days),
            "start_time": self.start_time.strftime("%H:%M"),
            "end_time": self.end_time.strftime("%H:%M"),
            "quarter_start": self.quarter_start.isoformat(),
        }
