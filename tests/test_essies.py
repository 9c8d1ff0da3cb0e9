"""
Tests for the Essie Mae's special extraction.
"""

from __future__ import annotations

from conftest import make_raw

from sharples_lib.parser import parse_essies


def _essies(description: str):
    return [make_raw("Essie Mae's", "2024-01-05T08:00:00-05:00", "2024-01-05T23:00:00-05:00", description)]


def test_parse_essies_extracts_special_line(essies_raw_meals) -> None:
    assert parse_essies(essies_raw_meals) == "Buffalo Chicken Wrap & Fries"


def test_parse_essies_only_reads_first_record(essies_raw_meals) -> None:
    later = _essies("<b>Special</b> Something else")
    assert parse_essies(essies_raw_meals + later) == "Buffalo Chicken Wrap & Fries"


def test_parse_essies_no_records() -> None:
    assert parse_essies([]) is None


def test_parse_essies_no_special_segment() -> None:
    assert parse_essies(_essies("<b>Hours</b> 8am to 11pm<b>Closed</b> Sundays")) is None


def test_parse_essies_special_at_end_is_empty() -> None:
    assert parse_essies(_essies("<b>Hours</b> 8 to 11<b>Ask about our special</b>")) == ""


def test_parse_essies_decodes_before_stripping() -> None:
    description = "<b>Special:</b> Mac &amp; Cheese &lt;3 <i>while it lasts</i>"
    assert parse_essies(_essies(description)) == ": Mac & Cheese while it lasts"


def test_parse_essies_keeps_text_after_first_match_only() -> None:
    assert parse_essies(_essies("<b>Special</b> Specialty Pizza")) == "Specialty Pizza"
