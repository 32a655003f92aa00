"""Duration conversion and rounding helpers.

The tracker reports every duration in milliseconds; the engine works in
hours. Values arrive as ints, numeric strings, or not at all, and all of
them must convert without raising.
"""

import logging
import math
from typing import Any, Optional

from ..config.constants import HOURS_DECIMAL_PLACES, MS_PER_HOUR

logger = logging.getLogger(__name__)


def parse_millis(value: Any) -> Optional[float]:
    """Parse a millisecond value from an int, float or numeric string.

    Returns None for missing, boolean or unparseable values.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            logger.debug(f"Ignoring unparseable millisecond value {value!r}")
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def ms_to_hours(value: Any) -> float:
    """Convert a millisecond duration to hours; missing or zero yields 0."""
    millis = parse_millis(value)
    if not millis:
        return 0.0
    return millis / MS_PER_HOUR


def round_half_away(value: float, places: int = HOURS_DECIMAL_PLACES) -> float:
    """Round to ``places`` decimals, with halves rounded away from zero.

    Python's built-in round() uses banker's rounding, which would turn 0.25
    into 0.2; hour totals must read 0.3.
    """
    factor = 10**places
    rounded = math.floor(abs(value) * factor + 0.5) / factor
    return -rounded if value < 0 else rounded


def round_percent(value: float) -> int:
    """Round a percentage to the nearest integer, halves away from zero."""
    return int(round_half_away(value, 0))
