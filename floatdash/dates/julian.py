import re
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Tuple

from ..errors import InvalidDateRange

# ARGO stores profile times as days since this instant.
JULIAN_EPOCH = datetime(1950, 1, 1, tzinfo=timezone.utc)
_ONE_DAY = timedelta(days=1)
_CALENDAR_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date(value: str) -> datetime:
    """
    Parse an ISO-8601 date or datetime into an aware UTC datetime.
    Naive values are taken as UTC. Raises ValueError when unparseable.
    """
    s = value.strip()
    if _CALENDAR_DATE_RE.match(s):
        d = date.fromisoformat(s)
        return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)
    if s.endswith("Z") or s.endswith("z"):
        s = s[:-1] + "+00:00"
    parsed = datetime.fromisoformat(s)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def validate_date_range(
    start: Optional[str], end: Optional[str]
) -> Tuple[Optional[datetime], Optional[datetime]]:
    """
    Returns the parsed (start, end) bounds. Empty strings count as absent.
    Raises InvalidDateRange on an unparseable bound or when start > end.
    """
    bounds = []
    for label, raw in (("start", start), ("end", end)):
        if not raw:
            bounds.append(None)
            continue
        try:
            bounds.append(parse_date(raw))
        except (ValueError, OverflowError):
            raise InvalidDateRange(f"Invalid {label} date: {raw!r}")

    lo, hi = bounds
    if lo is not None and hi is not None and lo > hi:
        raise InvalidDateRange("Start date must be before or equal to end date")
    return lo, hi


def to_julian_day(value: str) -> int:
    """
    Day offset from 1950-01-01T00:00:00Z for a calendar date (YYYY-MM-DD).
    Anything carrying a time of day is rejected with ValueError.
    """
    s = value.strip()
    if not _CALENDAR_DATE_RE.match(s):
        raise ValueError(f"Not a calendar date: {value!r}")
    return (parse_date(s) - JULIAN_EPOCH) // _ONE_DAY


def julian_day_to_datetime(juld: float) -> datetime:
    return JULIAN_EPOCH + timedelta(days=float(juld))


def julian_day_to_epoch_ms(juld: float) -> int:
    """Milliseconds since the Unix epoch, the form the dashboard charts consume."""
    epoch_ms = int(JULIAN_EPOCH.timestamp() * 1000)
    return epoch_ms + round(float(juld) * 86_400_000)


def to_timestamp_literal(value: datetime) -> str:
    """ISO-8601 UTC with milliseconds and a Z suffix."""
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
