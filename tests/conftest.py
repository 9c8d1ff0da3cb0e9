"""
Pytest configuration and fixtures.
"""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from sharples_lib.model import Meal, RawMeal


NEW_YORK = ZoneInfo("America/New_York")

LUNCH_DESCRIPTION = (
    '<div><span class="station">Classics</span>Beef Burger ::halal::, Mac &amp; Cheese, '
    '<span class="station">Daily Kneads</span>Brownies ::egg::, '
    '<span class="station">Fired Up</span>Grilled Cheese, '
    '<span class="station">World of Flavor</span>Rice, Chicken Tikka ::nuts::, Shrimp Curry, '
    '<span class="station">Verdant &amp; Vegan</span>Tofu Scramble ::vegan::</div>'
)

DINNER_DESCRIPTION = (
    '<span class="x">Classics:</span>Taco Salad, '
    '<span class="y">World Flavor:</span>Chicken Tikka'
)


@pytest.fixture
def tz():
    return NEW_YORK


@pytest.fixture(autouse=True)
def clear_cache(settings):
    """Views are cached per URL; start every test cold."""
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


def make_raw(title, start, end, description="") -> RawMeal:
    return RawMeal(title=title, startdate=start, enddate=end, description=description)


def make_meal(title, short_date, items=("<abbr>Main 1</abbr>: Rice",)) -> Meal:
    start = datetime(2024, 1, 5, 11, 0, tzinfo=NEW_YORK)
    return Meal(
        title=title,
        startdate=start,
        enddate=start,
        short_time="11:00 to 11:00",
        short_date=short_date,
        items=tuple(items),
    )


@pytest.fixture
def today_raw_meals():
    """A typical weekday: breakfast, lunch, dinner and a late-night entry."""
    return [
        make_raw("Breakfast", "2024-01-05T07:30:00-05:00", "2024-01-05T10:00:00-05:00",
                 '<span class="s">Classics</span>Scrambled Eggs, Bacon'),
        make_raw("Lunch", "2024-01-05T11:00:00-05:00", "2024-01-05T13:30:00-05:00", LUNCH_DESCRIPTION),
        make_raw("Dinner", "2024-01-05T17:00:00-05:00", "2024-01-05T20:00:00-05:00", DINNER_DESCRIPTION),
        make_raw("Late Night", "2024-01-05T21:00:00-05:00", "2024-01-05T23:00:00-05:00",
                 '<span class="s">Classics</span>Pizza'),
    ]


@pytest.fixture
def upcoming_raw_meals():
    return [
        make_raw("Brunch", "2024-01-06T10:30:00-05:00", "2024-01-06T13:30:00-05:00",
                 '<span class="s">Classics</span>Waffles, French Toast, Fruit'),
        make_raw("Dinner", "2024-01-06T17:00:00-05:00", "2024-01-06T19:00:00-05:00", DINNER_DESCRIPTION),
        make_raw("Lunch", "2024-01-07T11:00:00-05:00", "2024-01-07T13:30:00-05:00", LUNCH_DESCRIPTION),
    ]


@pytest.fixture
def essies_raw_meals():
    return [
        make_raw("Essie Mae's", "2024-01-05T08:00:00-05:00", "2024-01-05T23:00:00-05:00",
                 "<p>Open 8am to 11pm</p>< b >SPECIAL</b> Buffalo Chicken Wrap &amp; Fries<b>Hours</b> vary"),
    ]


@pytest.fixture
def feed(today_raw_meals, upcoming_raw_meals, essies_raw_meals):
    return {
        "today": today_raw_meals,
        "upcoming": upcoming_raw_meals,
        "essies": essies_raw_meals,
    }
