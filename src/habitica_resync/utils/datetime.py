import re
from datetime import date, datetime, timezone
from typing import Optional

import tzlocal

# JavaScript Date.toString(), e.g. "Thu Oct 16 2026 12:00:00 GMT+0000 (Coordinated Universal Time)"
_JS_DATE_PATTERN = re.compile(
    r'^\w{3} (\w{3} \d{1,2} \d{4} \d{2}:\d{2}:\d{2}) GMT([+-]\d{4})'
)


def current_datetime_local_timezone() -> datetime:
    """
    Returns the current date and time in the local timezone.

    Returns:
        A datetime object representing the current date and time.
    """
    return datetime.now(tzlocal.get_localzone())


def today_local() -> date:
    """Returns today's date in the local timezone."""
    return current_datetime_local_timezone().date()


def convert_datetime_to_local_timezone(date_time: datetime) -> datetime:
    """
    Converts a given datetime object to a local-timezone-aware datetime.
    Naive datetimes are taken to be in UTC, which is what the API sends.

    Args:
        date_time: The datetime object to be converted.

    Returns:
        A datetime object in the local timezone.
    """
    if date_time.tzinfo is None:
        date_time = date_time.replace(tzinfo=timezone.utc)
    return date_time.astimezone(tzlocal.get_localzone())


def to_local_date(date_time: datetime) -> date:
    """Returns the calendar date of ``date_time`` as seen in the local timezone."""
    return convert_datetime_to_local_timezone(date_time).date()


def convert_datetime_to_iso(date_time: datetime) -> str:
    """
    Converts a datetime to an ISO-8601 string in UTC with a trailing 'Z'.

    Args:
        date_time: The datetime object to be converted.

    Returns:
        The ISO formatted string, e.g. "2026-10-16T00:00:00.000Z".
    """
    if date_time.tzinfo is None:
        date_time = date_time.replace(tzinfo=timezone.utc)
    utc = date_time.astimezone(timezone.utc)
    return utc.strftime('%Y-%m-%dT%H:%M:%S.') + f"{utc.microsecond // 1000:03d}Z"


def parse_api_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a timestamp as sent by the Habitica API.

    Accepts ISO-8601 (with or without a trailing 'Z'), the JavaScript
    ``Date.toString()`` format used by the rate-limit headers, and epoch seconds.

    Args:
        value: Raw timestamp string

    Returns:
        Timezone-aware datetime, or None if the value is empty

    Raises:
        ValueError: If the value is not in any recognised format
    """
    if value is None:
        return None
    value = str(value).strip()
    if not value:
        return None

    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    try:
        dt = datetime.fromisoformat(value)
        return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)
    except ValueError:
        pass

    match = _JS_DATE_PATTERN.match(value)
    if match:
        return datetime.strptime(f"{match.group(1)} {match.group(2)}", "%b %d %Y %H:%M:%S %z")

    if re.fullmatch(r'\d+(\.\d+)?', value):
        return datetime.fromtimestamp(float(value), tz=timezone.utc)

    raise ValueError(f"Unrecognised datetime format: {value!r}")
