"""Tests for days.py – weekday normalisation and day-set parsing."""
import pytest

from gold_calendar_export.days import WEEKDAY_CODES, normalize_weekday, parse_days
from gold_calendar_export.diagnostics import Diagnostics, EMPTY_DAYS


class TestNormalizeWeekday:
    @pytest.mark.parametrize(
        "token, code",
        [
            ("M", "MO"), ("MON", "MO"), ("MONDAY", "MO"),
            ("T", "TU"), ("TU", "TU"), ("TUE", "TU"), ("TUESDAY", "TU"),
            ("W", "WE"), ("WED", "WE"), ("WEDNESDAY", "WE"),
            ("R", "TH"), ("TH", "TH"), ("THU", "TH"), ("THURSDAY", "TH"),
            ("F", "FR"), ("FRI", "FR"), ("FRIDAY", "FR"),
        ],
    )
    def test_known_tokens(self, token, code):
        assert normalize_weekday(token) == code

    def test_case_insensitive(self):
        assert normalize_weekday("thursday") == "TH"
        assert normalize_weekday(" Wed ") == "WE"

    @pytest.mark.parametrize("code", WEEKDAY_CODES)
    def test_idempotent_on_canonical_codes(self, code):
        assert normalize_weekday(code) == code
        assert normalize_weekday(normalize_weekday(code)) == code

    def test_bare_t_with_thursday_context(self):
        assert normalize_weekday("T", context="T R") == "TH"
        assert normalize_weekday("T", context="T THU") == "TH"

    def test_bare_t_without_thursday_context(self):
        assert normalize_weekday("T", context="M T W") == "TU"

    def test_unknown_falls_back_to_monday(self):
        assert normalize_weekday("xyz") == "MO"
        assert normalize_weekday("") == "MO"


class TestParseDays:
    def test_compact_letters(self):
        assert parse_days("MWF") == ("MO", "WE", "FR")
        assert parse_days("TR") == ("TU", "TH")
        assert parse_days("MTWRF") == ("MO", "TU", "WE", "TH", "FR")

    def test_spaced_letters(self):
        assert parse_days("M W F") == ("MO", "WE", "FR")
        assert parse_days("T R") == ("TU", "TH")

    def test_th_is_not_tuesday(self):
        assert parse_days("TH") == ("TH",)
        assert parse_days("T TH") == ("TU", "TH")
        assert parse_days("TTH") == ("TU", "TH")

    def test_words_and_punctuation(self):
        assert parse_days("Mon, Wed; Fri") == ("MO", "WE", "FR")
        assert parse_days("Tuesday & Thursday") == ("TU", "TH")

    def test_title_case_pairs(self):
        assert parse_days("MoWeFr") == ("MO", "WE", "FR")
        assert parse_days("TuTh") == ("TU", "TH")

    def test_ordered_and_deduplicated(self):
        assert parse_days("F M M") == ("MO", "FR")

    def test_label_noise_ignored(self):
        assert parse_days("Days T R") == ("TU", "TH")

    def test_empty_defaults_to_monday(self):
        diagnostics = Diagnostics()
        assert parse_days("", diagnostics) == ("MO",)
        assert diagnostics.count(EMPTY_DAYS) == 1

    def test_unrecognised_defaults_to_monday(self):
        diagnostics = Diagnostics()
        assert parse_days("TBA", diagnostics) == ("MO",)
        assert diagnostics.count(EMPTY_DAYS) == 1

    def test_no_anomaly_when_days_found(self):
        diagnostics = Diagnostics()
        parse_days("MWF", diagnostics)
        assert len(diagnostics) == 0
