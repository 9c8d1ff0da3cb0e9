import html
import logging
import re
from datetime import datetime, tzinfo
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .model import Day, Meal, RawMeal

logger = logging.getLogger(__name__)


# =============================================================================
# MARKUP HELPERS
# =============================================================================

_TAG_RE = re.compile(r'</?[^>]+(>|$)')


def strip_html_tags(text: str) -> str:
    """Remove every opening/closing tag, including an unterminated one at the end."""
    return _TAG_RE.sub('', text)


def decode_entities(text: str) -> str:
    """Decode HTML character references (&amp;, &#39;, &nbsp; ...) to literal characters."""
    return html.unescape(text)


# =============================================================================
# SUBSTITUTION TABLES
# =============================================================================

# Dietary tag markup, adapted from the Sharples chrome extension
# (https://github.com/swat-sccs/sharples-chrome-extension)
VEGAN = '<abbr class="tag vegan" title="Vegan">(v)</abbr>'
HALAL = '<abbr class="tag halal" title="Halal">(h)</abbr>'
VEGETARIAN = '<abbr class="tag veget" title="Vegetarian">(vg)</abbr>'
EGG = '<abbr class="tag egg" title="Egg">(e)</abbr>'
MILK = '<abbr class="tag milk" title="Milk">(m)</abbr>'
SOY = '<abbr class="tag soy" title="Soy">(s)</abbr>'
WHEAT = '<abbr class="tag wheat" title="Wheat">(w)</abbr>'
FISH = '<abbr class="tag fish" title="Fish">(f)</abbr>'
GLUTEN_FREE = '<abbr class="tag gf" title="Gluten Free">(gf)</abbr>'
SESAME = '<abbr class="tag sesame" title="Sesame">(ses)</abbr>'
ALCOHOL = '<abbr class="tag alcohol" title="Alcohol">(a)</abbr>'

DIETARY_TAGS: Tuple[Tuple[re.Pattern, str], ...] = tuple(
    (re.compile(re.escape(token)), markup) for token, markup in (
        ('::vegan::', VEGAN),
        ('::halal::', HALAL),
        ('::vegetarian::', VEGETARIAN),
        ('::egg::', EGG),
        ('::milk::', MILK),
        ('::soy::', SOY),
        ('::wheat::', WHEAT),
        ('::fish::', FISH),
        ('::gluten free::', GLUTEN_FREE),
        ('::sesame::', SESAME),
        ('::alcohol::', ALCOHOL),
    )
)

# Any token left after DIETARY_TAGS has no display form and is dropped
UNKNOWN_TAG_RE = re.compile(r' ::.*?::')

MAIN_1 = '<abbr title="Classics">Main 1</abbr>:'
MAIN_2 = '<abbr title="World of Flavor">Main 2</abbr>:'
MAIN_3 = '<abbr title="Spice of Life">Main 3</abbr>:'
VEGAN_MAIN = '<abbr title="Verdant & Vegan">Vegan Main</abbr>:'
SALAD = '<abbr title="Field of Greens">Salad</abbr>:'
DESSERT = '<abbr title="Daily Kneads">Dessert</abbr>:'
ALLERGEN = '<abbr title="Free Zone">Allergen Choice</abbr>:'

# The station name may or may not carry its own colon before the one the
# splitter inserts, so each pattern swallows the whole run of colons.
SECTION_LABELS: Tuple[Tuple[re.Pattern, str], ...] = (
    (re.compile(r'Classics:+'), MAIN_1),
    (re.compile(r'World (?:of )?Flavor:+'), MAIN_2),
    (re.compile(r'Verdant & Vegan:+'), VEGAN_MAIN),
    (re.compile(r'Daily Kneads:+'), DESSERT),
    (re.compile(r'Free Zone:+'), ALLERGEN),
    (re.compile(r'Spice(?: of Life)?:+'), MAIN_3),
    (re.compile(r'Field of Greens?:+'), SALAD),
)

# Presentation order of stations within a meal
SECTION_ORDER: Tuple[str, ...] = (MAIN_1, MAIN_2, MAIN_3, VEGAN_MAIN, ALLERGEN, SALAD, DESSERT)

# Stations that are promotions rather than food
EXCLUDED_SECTIONS: Tuple[str, ...] = ('Fired Up', "Grillin' Out")

# Protein/dish keywords in priority order
MAIN_DISH_KEYWORDS: Tuple[str, ...] = (
    'taco',
    'chicken',
    'steak',
    'beef',
    'shrimp',
    'tofu',
    'seitan',
    'bacon',
    'sausage',
    'pork',
    'cod',
    'meatball',
    'tilapia',
    'salmon',
    'wing',
    'pizza',
    'pasta',
    'fried rice',
    'waffles',
    'french toast',
    'aloo gobi',
    'vindaloo',
)

UNRANKED = -1


def _apply_table(text: str, table: Iterable[Tuple[re.Pattern, str]]) -> str:
    for pattern, replacement in table:
        text = pattern.sub(replacement, text)
    return text


# =============================================================================
# DESCRIPTION PARSER
# =============================================================================

_SPAN_CLOSE_RE = re.compile(r'</span>')
_SPAN_OPEN_RE = re.compile(r'<span\s[^>]+>')
_LEADING_AMPERSAND_RE = re.compile(r'^& ')


def split_sections(description: str) -> List[str]:
    """
    Split a raw meal description into station fragments.

    Each closing span becomes a ": " separator between the station name and
    its items, and each opening span with attributes starts a new fragment.
    Fragments are returned in feed order, including the text before the
    first span.
    """
    return _SPAN_OPEN_RE.split(_SPAN_CLOSE_RE.sub(': ', description))


def substitute_block(fragment: str) -> str:
    """
    Turn one raw fragment into display text.

    Tags are stripped, entities decoded, dietary tokens swapped for their
    markup (unknown tokens dropped), and station names swapped for labels.
    """
    text = decode_entities(strip_html_tags(fragment)).strip()
    text = _apply_table(text, DIETARY_TAGS)
    text = UNKNOWN_TAG_RE.sub('', text)
    return _apply_table(text, SECTION_LABELS)


def filter_blocks(blocks: Iterable[str]) -> List[str]:
    """Drop promotional stations and empty blocks, keeping order."""
    kept = []
    for block in blocks:
        if not block.strip():
            continue
        if block.startswith(EXCLUDED_SECTIONS):
            logger.debug(f'Dropping excluded station: {block[:40]}')
            continue
        kept.append(block)
    return kept


def sort_mains(items: Sequence[str]) -> List[str]:
    """
    Float main dishes to the front of an item list.

    Parameters:
        items (Sequence[str]): Food items of one station, in feed order

    Returns:
        List[str]: Distinct items; those matching MAIN_DISH_KEYWORDS come first,
        grouped by keyword priority and wrapped in <strong>, then the rest in
        their original order.
    """
    remaining = dict.fromkeys(items)

    # when several proteins are listed, they come out in keyword order
    sorted_items = []
    for keyword in MAIN_DISH_KEYWORDS:
        for item in list(remaining):
            if keyword in item.lower():
                del remaining[item]
                sorted_items.append(f'<strong>{item.strip()}</strong>')

    sorted_items.extend(item.strip() for item in remaining)
    return sorted_items


def format_block(block: str) -> Optional[str]:
    """
    Re-sort the items of a "label: items" block.

    Returns None when the block has no label separator.
    """
    label, separator, item_text = block.partition(': ')
    if not separator:
        logger.debug(f'Dropping block without items: {block[:40]}')
        return None

    # the ", " before the next station is left dangling at the end
    items = [_LEADING_AMPERSAND_RE.sub('', item) for item in item_text.rstrip(', ').split(', ')]
    return f"{label}: {', '.join(sort_mains(items))}"


def section_rank(block: str) -> int:
    """Position of the block's label in SECTION_ORDER, or UNRANKED."""
    for index, label in enumerate(SECTION_ORDER):
        if block.startswith(label):
            return index
    return UNRANKED


def order_blocks(blocks: Iterable[str]) -> List[str]:
    """Stable sort into presentation order; unlabelled blocks come first."""
    return sorted(blocks, key=section_rank)


def parse_description(description: str) -> List[str]:
    """
    Parse a raw meal description into ordered, formatted station blocks.

    Parameters:
        description (str): The feed's markup blob for one meal

    Returns:
        List[str]: Blocks shaped "<label markup>: <items>", in SECTION_ORDER
    """
    blocks = filter_blocks(substitute_block(fragment) for fragment in split_sections(description))
    formatted = [block for block in map(format_block, blocks) if block is not None]
    return order_blocks(formatted)


# =============================================================================
# MEAL ASSEMBLY
# =============================================================================

MEAL_TITLES = ('Brunch', 'Lunch', 'Dinner')

_WEEKDAYS = ('Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun')


def parse_timestamp(value: str, tz: tzinfo) -> datetime:
    """
    Parse a feed timestamp into the given zone.

    Offsets in the string are honoured and converted; naive values are read as
    local time in tz.
    """
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=tz)
    return parsed.astimezone(tz)


def format_clock(dt: datetime) -> str:
    """12-hour clock time without padding, e.g. 5:30"""
    return f'{dt.hour % 12 or 12}:{dt.minute:02d}'


def format_short_time(start: datetime, end: datetime) -> str:
    return f'{format_clock(start)} to {format_clock(end)}'


def format_short_date(dt: datetime) -> str:
    """Weekday and date, e.g. Fri 1/5"""
    return f'{_WEEKDAYS[dt.weekday()]} {dt.month}/{dt.day}'


def parse_meal(meal: RawMeal, tz: tzinfo) -> Meal:
    """
    Format one feed record.

    Parameters:
        meal (RawMeal): The raw feed record
        tz (tzinfo): Zone that times and dates are displayed in

    Returns:
        Meal: Meal with display times and formatted station blocks
    """
    startdate = parse_timestamp(meal.startdate, tz)
    enddate = parse_timestamp(meal.enddate, tz)

    return Meal(
        title=meal.title,
        startdate=startdate,
        enddate=enddate,
        short_time=format_short_time(startdate, enddate),
        short_date=format_short_date(startdate),
        items=tuple(parse_description(meal.description)),
    )


def parse_and_filter_meals(raw_meals: Iterable[RawMeal], tz: tzinfo) -> List[Meal]:
    """Format a batch of records, keeping brunch/lunch/dinner meals that have items."""
    meals = [parse_meal(raw, tz) for raw in raw_meals]
    return [meal for meal in meals if meal.title in MEAL_TITLES and meal.items]


def breakfast_time(raw_meals: Iterable[RawMeal], tz: tzinfo) -> Optional[str]:
    """Display time of the first breakfast record, if the feed has one."""
    for raw in raw_meals:
        if raw.title == 'Breakfast':
            return parse_meal(raw, tz).short_time
    return None


def group_meals_by_day(meals: Iterable[Meal]) -> List[Day]:
    """
    Bucket meals by date into lunch/dinner pairs.

    Brunch takes the lunch slot. If a date has more than one meal for a slot,
    the later one wins. Days come out in the order their dates first appear.
    """
    days: Dict[str, Day] = {}
    for meal in meals:
        day = days.setdefault(meal.short_date, Day(short_date=meal.short_date))
        if meal.title in ('Brunch', 'Lunch'):
            day.lunch = meal
        elif meal.title == 'Dinner':
            day.dinner = meal
    return list(days.values())


# =============================================================================
# ESSIE MAE'S SPECIAL
# =============================================================================

_BOLD_OPEN_RE = re.compile(r'<\s*b\s*>')
_SPECIAL_RE = re.compile(r'special', re.IGNORECASE)


def parse_essies(raw_meals: Sequence[RawMeal]) -> Optional[str]:
    """
    Extract the daily special line from the snack bar calendar.

    Parameters:
        raw_meals (Sequence[RawMeal]): Records from the secondary calendar; only the first is read

    Returns:
        Optional[str]: Plain text following the word "special", or None when there
        is no record or no bold segment mentioning a special
    """
    if not raw_meals:
        return None

    segments = _BOLD_OPEN_RE.split(raw_meals[0].description)
    special = next((segment for segment in segments if 'special' in segment.lower()), None)
    if special is None:
        return None

    parts = _SPECIAL_RE.split(decode_entities(special), maxsplit=1)
    food = parts[1] if len(parts) > 1 else ''
    return strip_html_tags(food).strip()
