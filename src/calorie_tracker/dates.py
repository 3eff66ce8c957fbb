"""Calendar-date helpers shared by the API and the client."""

import re
from datetime import UTC, date, datetime, timedelta

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def today() -> date:
    """Return the current UTC calendar day."""
    return datetime.now(tz=UTC).date()


def tomorrow() -> date:
    """Return the UTC calendar day after today."""
    return today() + timedelta(days=1)


def is_valid_date_format(value: str) -> bool:
    """Return True for a real calendar day written as YYYY-MM-DD."""
    if not _DATE_PATTERN.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def is_date_in_future(value: date | str) -> bool:
    """Return True when the day is after today."""
    day = parse_api_date(value) if isinstance(value, str) else value
    return day > today()


def is_date_range_valid(date_from: date | str, date_to: date | str) -> bool:
    """Return True when the range is not inverted."""
    start = parse_api_date(date_from) if isinstance(date_from, str) else date_from
    end = parse_api_date(date_to) if isinstance(date_to, str) else date_to
    return start <= end


def parse_api_date(value: str) -> date:
    """Parse the API's YYYY-MM-DD representation (or a full timestamp)."""
    if _DATE_PATTERN.match(value):
        return date.fromisoformat(value)
    return datetime.fromisoformat(value).date()


def to_api_format(value: date) -> str:
    """Render a day in the API's YYYY-MM-DD representation."""
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def day_bounds(day: date) -> tuple[str, str]:
    """Return the first and last UTC instants of a day as ISO strings."""
    iso_day = day.isoformat()
    return f"{iso_day}T00:00:00Z", f"{iso_day}T23:59:59.999Z"
