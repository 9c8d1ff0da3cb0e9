"""
Value types for the Sharples menu feed and its formatted output.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class RawMeal:
    """One meal record as returned by the dining feed."""
    title: str
    startdate: str
    enddate: str
    description: str

    @classmethod
    def from_dict(cls, record: Dict) -> "RawMeal":
        """
        Build a RawMeal from a feed record.

        Missing fields raise KeyError; the feed shape is not checked here.
        """
        return cls(
            title=record['title'],
            startdate=record['startdate'],
            enddate=record['enddate'],
            description=record['description'],
        )


@dataclass(frozen=True)
class Meal:
    """A meal ready for rendering: metadata plus ordered, formatted sections."""
    title: str
    startdate: datetime
    enddate: datetime
    short_time: str
    short_date: str
    items: Tuple[str, ...]


@dataclass
class Day:
    """Lunch and dinner for one date, keyed by short_date."""
    short_date: str
    lunch: Optional[Meal] = None
    dinner: Optional[Meal] = None
