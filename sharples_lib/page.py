"""
View models for the menu page and the JSON API.
"""
from datetime import datetime, tzinfo
from typing import Dict, List, Sequence

from .model import Meal, RawMeal
from .parser import (
    breakfast_time,
    group_meals_by_day,
    parse_and_filter_meals,
    parse_essies,
    strip_html_tags,
)

_MONTHS = ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')


def format_page_date(dt: datetime) -> str:
    """Month and day, e.g. Jan 5"""
    return f'{_MONTHS[dt.month - 1]} {dt.day}'


def build_menu_page(feed: Dict[str, List[RawMeal]], now: datetime, tz: tzinfo) -> Dict:
    """
    Assemble the context for the menu page.

    Parameters:
        feed (Dict[str, List[RawMeal]]): Output of fetch_menu_feed
        now (datetime): Current time in tz
        tz (tzinfo): Display zone

    Returns:
        Dict: date, breakfast (time or None), today (meals), upcoming (days), essies (special or None)
    """
    return {
        'date': format_page_date(now),
        'breakfast': breakfast_time(feed['today'], tz),
        'today': parse_and_filter_meals(feed['today'], tz),
        'upcoming': group_meals_by_day(parse_and_filter_meals(feed['upcoming'], tz)),
        'essies': parse_essies(feed['essies']),
    }


def build_api_summary(today: Sequence[Meal]) -> Dict:
    """
    Plain-text lunch and dinner for programmatic callers.

    Assumes today's meals are exactly [lunch, dinner]; raises IndexError when
    the day has fewer than two meals.
    """
    lunch, dinner = today[0], today[1]
    return {
        'lunch_time': lunch.short_time,
        'lunch': [strip_html_tags(item) for item in lunch.items],
        'dinner_time': dinner.short_time,
        'dinner': [strip_html_tags(item) for item in dinner.items],
    }
