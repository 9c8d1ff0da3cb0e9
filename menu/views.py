"""
Views for the menu page and its JSON API.
"""
import logging
from functools import wraps
from zoneinfo import ZoneInfo

from django.conf import settings
from django.http import JsonResponse
from django.shortcuts import render
from django.utils import timezone
from django.utils.cache import patch_cache_control
from django.views.decorators.cache import cache_page

from sharples_lib.feed import fetch_menu_feed
from sharples_lib.page import build_api_summary, build_menu_page
from sharples_lib.parser import parse_and_filter_meals

logger = logging.getLogger(__name__)


def with_error_page(view):
    """Render the error page when the wrapped view fails; successful responses get a shared-cache lifetime."""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            response = view(request, *args, **kwargs)
        except Exception:
            logger.exception(f"Error rendering menu for {request.path}")
            return render(request, 'menu/error.html', status=500)
        patch_cache_control(response, s_maxage=settings.MENU_CACHE_SECONDS)
        return response
    return wrapper


def _load_feed():
    """Fetch the Dash feed for the current day in the dining hall's zone."""
    tz = ZoneInfo(settings.MENU_TIME_ZONE)
    now = timezone.now().astimezone(tz)
    feed = fetch_menu_feed(now, base_url=settings.DASH_GRAPHQL_URL, timeout=settings.MENU_FEED_TIMEOUT)
    return feed, now, tz


@cache_page(settings.MENU_CACHE_SECONDS)
@with_error_page
def index(request):
    feed, now, tz = _load_feed()
    return render(request, 'menu/index.html', build_menu_page(feed, now, tz))


@cache_page(settings.MENU_CACHE_SECONDS)
@with_error_page
def api(request):
    """Lunch and dinner as plain text; fails over to the error page if either is missing."""
    feed, _now, tz = _load_feed()
    today = parse_and_filter_meals(feed['today'], tz)
    return JsonResponse(build_api_summary(today))
