import logging
from datetime import datetime
from typing import Dict, List

import requests

from .model import RawMeal
from .webpage import DASH_GRAPHQL_URL, dash_menu_url

logger = logging.getLogger(__name__)

FEED_BUCKETS = ("today", "upcoming", "essies")

# Reusable HTTP session for the Dash GraphQL endpoint
_HTTP_SESSION = None


def _get_http_session() -> requests.Session:
    global _HTTP_SESSION
    if _HTTP_SESSION is None:
        session = requests.Session()
        session.headers.update({
            'User-Agent': 'sharples-menu/0.1 (+https://dash.swarthmore.edu)',
            'Accept': 'application/json',
        })
        _HTTP_SESSION = session
    return _HTTP_SESSION


def fetch_menu_feed(now: datetime, base_url: str = DASH_GRAPHQL_URL, timeout: float = 15) -> Dict[str, List[RawMeal]]:
    """
    Retrieve today's, upcoming and Essie Mae's meal records from Dash.

    Parameters:
        now (datetime): Current time, aware, in the dining hall's zone
        base_url (str): GraphQL endpoint
        timeout (float): Request timeout in seconds

    Returns:
        Dict[str, List[RawMeal]]: Records keyed by "today", "upcoming" and "essies"

    Raises:
        requests.RequestException: The endpoint could not be reached or returned an error status
        RuntimeError: The GraphQL response carried no data
    """
    url = dash_menu_url(now, base_url)
    logger.info(f"Fetching menu feed for {now.date()}")

    session = _get_http_session()
    response = session.get(url, timeout=timeout)
    response.raise_for_status()
    payload = response.json()

    data = payload.get("data")
    if not data:
        raise RuntimeError(f"Menu feed returned no data: {payload.get('errors')}")

    feed = {
        bucket: [RawMeal.from_dict(record) for record in data[bucket]["data"]]
        for bucket in FEED_BUCKETS
    }
    logger.info(
        f"Menu feed: {len(feed['today'])} today, "
        f"{len(feed['upcoming'])} upcoming, {len(feed['essies'])} essies"
    )
    return feed
