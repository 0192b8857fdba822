"""
Unit conversion utilities for durations.

Converts a raw second count into the supported duration units (millisecond
through year), rounds half away from zero, and renders the ``HH:MM:SS``
pretty form.
"""

import logging
import math
from enum import Enum
from typing import Optional, Union

logger = logging.getLogger(__name__)


class TimeUnit(Enum):
    """Duration units accepted by the filter."""

    MILLISECONDS = "millisecond"
    SECONDS = "second"
    MINUTES = "minute"
    HOURS = "hour"
    DAYS = "day"
    WEEKS = "week"
    YEARS = "year"


DEFAULT_UNIT = TimeUnit.SECONDS

# Seconds per unit. A year is a fixed 365 days, not calendar-aware.
_SECONDS_PER_UNIT = {
    TimeUnit.MILLISECONDS: 0.001,
    TimeUnit.SECONDS: 1.0,
    TimeUnit.MINUTES: 60.0,
    TimeUnit.HOURS: 3_600.0,
    TimeUnit.DAYS: 86_400.0,
    TimeUnit.WEEKS: 604_800.0,
    TimeUnit.YEARS: 31_536_000.0,
}

_SECONDS_PER_DAY = 86_400


def parse_unit(value: Union[str, TimeUnit, None]) -> Optional[TimeUnit]:
    """
    Look up a unit by its token.

    Returns ``None`` for unrecognised tokens.

    Examples
    --------
    >>> parse_unit("minute")
    <TimeUnit.MINUTES: 'minute'>
    >>> parse_unit("fortnight") is None
    True
    """
    if value is None or isinstance(value, TimeUnit):
        return value
    try:
        return TimeUnit(value)
    except ValueError:
        logger.debug("units.parse_unit.unknown", extra={"unit": value})
        return None


def convert_seconds(seconds: float, to_unit: TimeUnit) -> float:
    """
    Convert a second count into the target unit.

    Negative values are converted as is.

    Examples
    --------
    >>> convert_seconds(90.0, TimeUnit.MINUTES)
    1.5
    >>> convert_seconds(1.5, TimeUnit.MILLISECONDS)
    1500.0
    """
    if to_unit is TimeUnit.MILLISECONDS:
        return seconds * 1000.0
    return seconds / _SECONDS_PER_UNIT[to_unit]


def round_half_away(value: float) -> int:
    """
    Round to the nearest integer, ties away from zero.

    Examples
    --------
    >>> round_half_away(5.5)
    6
    >>> round_half_away(-5.5)
    -6
    >>> round_half_away(2.49)
    2
    """
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def prettify_seconds(seconds: float) -> str:
    """
    Render a duration as ``HH:MM:SS`` from ``floor(seconds)``.

    Only meaningful under 24 hours: hours wrap modulo 24 and negative values
    wrap back from midnight, like formatting the instant ``seconds`` after the
    epoch in UTC.

    Examples
    --------
    >>> prettify_seconds(3661.9)
    '01:01:01'
    >>> prettify_seconds(90000)
    '01:00:00'
    """
    total = math.floor(seconds) % _SECONDS_PER_DAY
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
