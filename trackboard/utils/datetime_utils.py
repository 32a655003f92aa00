"""
Epoch-millisecond helpers.

The tracker encodes timestamps as epoch milliseconds, sometimes as strings.
Calendar logic (week boundaries, due-day labels) runs on naive local-time
datetimes, so everything here converts between the two.
"""

from datetime import datetime
from typing import Any, Optional

from .units import parse_millis


def parse_epoch_ms(value: Any) -> Optional[int]:
    """Parse an epoch-millisecond timestamp; returns None if unparseable."""
    millis = parse_millis(value)
    if millis is None:
        return None
    return int(millis)


def to_local_naive(moment: datetime) -> datetime:
    """Return ``moment`` as a naive datetime in the local timezone.

    Naive inputs are assumed to already be local time.
    """
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def from_epoch_ms(millis: int) -> datetime:
    """Convert epoch milliseconds to a naive local datetime."""
    return datetime.fromtimestamp(millis / 1000)


def to_epoch_ms(moment: datetime) -> int:
    """Convert a datetime (naive values are local time) to epoch milliseconds."""
    return int(round(moment.timestamp() * 1000))


def format_month_day(moment: datetime, with_year: bool = False) -> str:
    """Format as "Dec 5" or, with_year, "Dec 5, 2025"."""
    text = f"{moment:%b} {moment.day}"
    if with_year:
        text = f"{text}, {moment.year}"
    return text
