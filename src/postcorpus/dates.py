"""Timestamp parsing for post front matter."""

from datetime import UTC, date, datetime, tzinfo

from dateutil import parser as date_parser

from postcorpus.exceptions import InvalidDateError

# Two defaults that differ in every date field. A token parsed against both only
# agrees when it names year, month and day itself.
_FILL_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 3, 3))


def _localize(parsed: datetime, timezone: tzinfo) -> datetime:
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone)
    return parsed


def parse_timestamp(value: object, *, timezone: tzinfo = UTC) -> datetime:
    """Return a timezone-aware datetime for a front matter ``date`` value.

    ``date`` and ``datetime`` objects are used as they are. Strings go through
    dateutil, ISO 8601 first, then free-form; a free-form string must spell out
    a full date, since dateutil would otherwise fill the gaps from today. Naive
    values are placed in ``timezone``, aware values keep their offset.

    Raises:
        InvalidDateError: If ``value`` is empty or cannot be parsed.

    """
    if isinstance(value, datetime):
        return _localize(value, timezone)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone)
    if not isinstance(value, str) or not value.strip():
        raise InvalidDateError(value)

    token = value.strip()
    try:
        return _localize(date_parser.isoparse(token), timezone)
    except (ValueError, OverflowError):
        pass

    try:
        first, second = (date_parser.parse(token, default=default) for default in _FILL_DEFAULTS)
    except (ValueError, OverflowError) as exc:
        raise InvalidDateError(value) from exc
    if first != second:
        raise InvalidDateError(value)
    return _localize(first, timezone)


def format_timestamp(value: datetime) -> str:
    """ISO 8601 with a 'Z' suffix for UTC, as written into front matter."""
    return value.isoformat().replace("+00:00", "Z")
