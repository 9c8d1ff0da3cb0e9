"""
Sharples Menu Formatter

A Python package for turning the Swarthmore dining feed into presentation-ready menus.
"""

from .parser import (
    parse_description,
    parse_meal,
    parse_and_filter_meals,
    breakfast_time,
    group_meals_by_day,
    parse_essies,
    strip_html_tags,
)
from .model import RawMeal, Meal, Day
from .webpage import dash_menu_url
from .feed import fetch_menu_feed
from .page import build_menu_page, build_api_summary


__version__ = "0.1.0"
__author__ = "Sharples Menu Team"

__all__ = [
    "parse_description",
    "parse_meal",
    "parse_and_filter_meals",
    "breakfast_time",
    "group_meals_by_day",
    "parse_essies",
    "strip_html_tags",
    "RawMeal",
    "Meal",
    "Day",
    "dash_menu_url",
    "fetch_menu_feed",
    "build_menu_page",
    "build_api_summary",
]
