"""
Management command to fetch the Sharples menu from Dash and print it.
"""
import json
from datetime import date, datetime, time
from zoneinfo import ZoneInfo

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from sharples_lib.feed import fetch_menu_feed
from sharples_lib.page import build_api_summary, build_menu_page
from sharples_lib.parser import strip_html_tags


class Command(BaseCommand):
    help = 'Fetch the Sharples menu from Dash and print it'

    def add_arguments(self, parser):
        parser.add_argument(
            '--date',
            type=str,
            help='Date to show (YYYY-MM-DD), defaults to today',
        )
        parser.add_argument(
            '--json',
            action='store_true',
            help='Print the lunch/dinner JSON summary instead of the full menu',
        )

    def handle(self, *args, **options):
        tz = ZoneInfo(settings.MENU_TIME_ZONE)

        # Parse date
        if options['date']:
            try:
                target_date = date.fromisoformat(options['date'])
            except ValueError:
                raise CommandError(f'Invalid date format: {options["date"]}. Use YYYY-MM-DD')
            now = datetime.combine(target_date, time(12, 0), tzinfo=tz)
        else:
            now = timezone.now().astimezone(tz)

        try:
            feed = fetch_menu_feed(now, base_url=settings.DASH_GRAPHQL_URL, timeout=settings.MENU_FEED_TIMEOUT)
        except Exception as e:
            raise CommandError(f'Error fetching menu feed: {e}')

        page = build_menu_page(feed, now, tz)

        if options['json']:
            try:
                summary = build_api_summary(page['today'])
            except IndexError:
                raise CommandError(f'Lunch and dinner are not both posted for {page["date"]}')
            self.stdout.write(json.dumps(summary, indent=2, ensure_ascii=False))
            return

        self.stdout.write(f'Sharples for {page["date"]}')
        if page['breakfast']:
            self.stdout.write(f'Breakfast: {page["breakfast"]}')

        for meal in page['today']:
            self._write_meal(meal)

        if page['essies']:
            self.stdout.write(f'\nEssie Mae\'s special: {page["essies"]}')

        for day in page['upcoming']:
            self.stdout.write(f'\n{"="*60}')
            self.stdout.write(day.short_date)
            self.stdout.write(f'{"="*60}')
            for meal in (day.lunch, day.dinner):
                if meal is not None:
                    self._write_meal(meal)

    def _write_meal(self, meal):
        self.stdout.write(self.style.SUCCESS(f'\n{meal.title} ({meal.short_time})'))
        for item in meal.items:
            self.stdout.write(f'  - {strip_html_tags(item)}')
