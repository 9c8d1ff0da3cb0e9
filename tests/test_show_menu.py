"""
Tests for the show_menu management command.
"""

from __future__ import annotations

import json
from datetime import datetime
from io import StringIO
from unittest.mock import patch

import pytest
import requests
from django.core.management import call_command
from django.core.management.base import CommandError

from conftest import NEW_YORK


def test_show_menu_prints_formatted_menu(feed) -> None:
    out = StringIO()
    with patch("menu.management.commands.show_menu.fetch_menu_feed", return_value=feed) as fetch:
        call_command("show_menu", "--date", "2024-01-05", stdout=out)

    assert fetch.call_args.args[0] == datetime(2024, 1, 5, 12, 0, tzinfo=NEW_YORK)

    output = out.getvalue()
    assert "Sharples for Jan 5" in output
    assert "Breakfast: 7:30 to 10:00" in output
    assert "Lunch (11:00 to 1:30)" in output
    assert "  - Main 1: Taco Salad" in output
    assert "Essie Mae's special: Buffalo Chicken Wrap & Fries" in output
    assert "Sat 1/6" in output
    assert "<abbr" not in output


def test_show_menu_json(feed) -> None:
    out = StringIO()
    with patch("menu.management.commands.show_menu.fetch_menu_feed", return_value=feed):
        call_command("show_menu", "--date", "2024-01-05", "--json", stdout=out)

    summary = json.loads(out.getvalue())
    assert summary["dinner_time"] == "5:00 to 8:00"
    assert summary["dinner"] == ["Main 1: Taco Salad", "Main 2: Chicken Tikka"]


def test_show_menu_json_without_dinner(feed) -> None:
    feed["today"] = [meal for meal in feed["today"] if meal.title != "Dinner"]

    with patch("menu.management.commands.show_menu.fetch_menu_feed", return_value=feed):
        with pytest.raises(CommandError, match="not both posted"):
            call_command("show_menu", "--date", "2024-01-05", "--json", stdout=StringIO())


def test_show_menu_invalid_date() -> None:
    with pytest.raises(CommandError, match="Invalid date format"):
        call_command("show_menu", "--date", "01/05/2024", stdout=StringIO())


def test_show_menu_feed_failure() -> None:
    with patch("menu.management.commands.show_menu.fetch_menu_feed",
               side_effect=requests.ConnectionError("dash is down")):
        with pytest.raises(CommandError, match="dash is down"):
            call_command("show_menu", stdout=StringIO())
