"""
Pre-persist normalization steps for event documents.

Each function is pure and handles a single field. The repository decides which
of them run, based on the fields present in a write, and in which order:
slug -> date -> time.
"""

from datetime import datetime, timezone
import re

from dateutil import parser as date_parser

from evently.platform.exception.exceptions import NormalizationError


_NON_SLUG_CHARS = re.compile(r'[^A-Za-z0-9_\s-]')
_WHITESPACE_RUN = re.compile(r'\s+')
_HYPHEN_RUN = re.compile(r'-+')

# Values shaped like ISO dates are held to ISO rules; no day/month swapping
_ISO_DATE_PREFIX = re.compile(r'\d{4}-\d{2}-\d{2}')

# Fills components a free-form date leaves out ("March 2024" -> 2024-03-01)
_DATE_DEFAULTS = datetime(1970, 1, 1)

# Hour 0-23 with optional leading zero, minutes always two digits
_TIME_PATTERN = re.compile(r'([0-1]?[0-9]|2[0-3]):([0-5][0-9])')


def slugify(title: str) -> str:
    slug = title.lower().strip()
    slug = _NON_SLUG_CHARS.sub('', slug)
    slug = _WHITESPACE_RUN.sub('-', slug)
    slug = _HYPHEN_RUN.sub('-', slug)
    return slug.strip('-')


def disambiguate_slug(slug: str, *, now: datetime) -> str:
    """Suffix with epoch milliseconds. The result is not re-checked for collisions."""
    return f'{slug}-{int(now.timestamp() * 1000)}'


def _parse_date(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        if _ISO_DATE_PREFIX.match(value):
            raise
    return date_parser.parse(value, default=_DATE_DEFAULTS)


def normalize_date(value: str) -> str:
    """Accept ISO dates and date-times plus common written forms such as "March 5, 2024"."""
    try:
        parsed = _parse_date(value.strip())
    except (ValueError, OverflowError) as e:
        raise NormalizationError('Invalid date format. Please provide a valid date.') from e

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()


def normalize_time(value: str) -> str:
    match = _TIME_PATTERN.fullmatch(value)
    if not match:
        raise NormalizationError('Invalid time format. Please use HH:MM format (e.g., 14:30).')

    hours, minutes = match.groups()
    return f'{hours.zfill(2)}:{minutes}'
