"""Interval computation between two resolved instants."""

from __future__ import annotations

import logging
from typing import Optional, Union

from .models import DurationResult
from .utils.units import (
    DEFAULT_UNIT,
    TimeUnit,
    convert_seconds,
    parse_unit,
    prettify_seconds,
    round_half_away,
)

logger = logging.getLogger(__name__)


def compute(
    first_millis: int,
    second_millis: int,
    unit: Union[str, TimeUnit, None] = None,
    pretty: bool = False,
) -> DurationResult:
    """Compute the signed interval from ``first_millis`` to ``second_millis``.

    Parameters
    ----------
    first_millis, second_millis: int
        Resolved instants in epoch milliseconds.
    unit: str or TimeUnit, optional
        Target unit; ``second`` when not given. An unrecognised token leaves
        ``value`` unset.
    pretty: bool
        Also render the unconverted raw seconds as ``HH:MM:SS``.

    Examples
    --------
    >>> compute(1_000_000, 1_005_500, "second").output
    6
    >>> compute(0, 3_661_000, pretty=True).output
    '01:01:01'
    """
    seconds = (second_millis - first_millis) / 1000.0
    token = unit.value if isinstance(unit, TimeUnit) else (unit or DEFAULT_UNIT.value)

    value: Optional[int] = None
    resolved_unit = parse_unit(token)
    if resolved_unit is not None:
        value = round_half_away(convert_seconds(seconds, resolved_unit))
    else:
        logger.warning("calculator.unknown_unit", extra={"unit": token})

    formatted = prettify_seconds(seconds) if pretty else None
    return DurationResult(seconds=seconds, unit=token, value=value, formatted=formatted)
