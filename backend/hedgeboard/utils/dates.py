"""
Date helpers shared by the Polymarket, Yahoo Finance and news code.
"""
from datetime import datetime, timezone
from typing import Optional, Union

# Timestamps above this are milliseconds
MILLISECOND_THRESHOLD = 1e12


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 string; naive values are treated as UTC."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_epoch_seconds(value: Union[int, float, None]) -> Optional[float]:
    """Normalize a unix timestamp that may be in seconds or milliseconds."""
    if value is None:
        return None
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    return value / 1000 if value > MILLISECOND_THRESHOLD else value


def years_ago(now: datetime, years: int) -> datetime:
    try:
        return now.replace(year=now.year - years)
    except ValueError:
        # Feb 29 on a non-leap target year
        return now.replace(year=now.year - years, day=28)
