import json
from datetime import datetime, time, timedelta
from typing import Dict
from urllib.parse import urlencode

DASH_GRAPHQL_URL = "https://dash.swarthmore.edu/graphql"

# Sharples (DCC) and Essie Mae's calendars
MENU_CALENDAR_ID = "DCC"
ESSIES_CALENDAR_ID = "r3r3af5a1gvf61ffe47b8i17d8@group.calendar.google.com"

UPCOMING_DAYS = 7

MENU_QUERY = f"""query menu($todayStart: String, $todayEnd: String, $upcomingEnd: String) {{
  today: cbordnetmenufeed(
    calendarId: "{MENU_CALENDAR_ID}",
    timeMin: $todayStart,
    timeMax: $todayEnd,
    order: ASC
  ) {{
    data {{
      title
      startdate
      enddate
      description
    }}
  }}
  upcoming: cbordnetmenufeed(
    calendarId: "{MENU_CALENDAR_ID}",
    timeMin: $todayEnd,
    timeMax: $upcomingEnd,
    order: ASC
  ) {{
    data {{
      title
      startdate
      enddate
      description
    }}
  }}
  essies: cbordnetmenufeed(
    calendarId: "{ESSIES_CALENDAR_ID}",
    timeMin: $todayStart,
    timeMax: $todayEnd,
    order: ASC
  ) {{
    data {{
      title
      startdate
      enddate
      description
    }}
  }}
}}
"""


def _start_of_day(dt: datetime) -> datetime:
    return datetime.combine(dt.date(), time.min, tzinfo=dt.tzinfo)


def _end_of_day(dt: datetime) -> datetime:
    return datetime.combine(dt.date(), time(23, 59, 59, 999000), tzinfo=dt.tzinfo)


def menu_query_variables(now: datetime) -> Dict[str, str]:
    """
    Build the time window variables for MENU_QUERY.

    Parameters:
        now (datetime): Current time, aware, in the dining hall's zone

    Returns:
        Dict[str, str]: todayStart, todayEnd and upcomingEnd as ISO strings
    """
    return {
        "todayStart": _start_of_day(now).isoformat(timespec="milliseconds"),
        "todayEnd": _end_of_day(now).isoformat(timespec="milliseconds"),
        "upcomingEnd": _end_of_day(now + timedelta(days=UPCOMING_DAYS)).isoformat(timespec="milliseconds"),
    }


def dash_menu_url(now: datetime, base_url: str = DASH_GRAPHQL_URL) -> str:
    """
    Generate the Dash GraphQL URL that returns today's, upcoming and Essie's meals.

    Parameters:
        now (datetime): Current time, aware, in the dining hall's zone
        base_url (str): GraphQL endpoint

    Returns:
        str: The full GET URL.
    """
    params = {
        "query": MENU_QUERY,
        "operationName": "menu",
        "variables": json.dumps(menu_query_variables(now), separators=(",", ":")),
    }
    return f"{base_url}?{urlencode(params)}"
