"""Timestamp format registry.

This module maps format tokens to parsers that turn a raw timestamp into epoch
milliseconds. Symbolic tokens (``ISO8601``, ``UNIX``, ``UNIX_MS``,
``TAI64N``) are looked up in a simple in-memory registry; any other token is
compiled as a custom pattern (see :mod:`.patterns`).

The registry is populated at import time and only read afterwards, so compiled
parsers can be shared freely between threads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import tzinfo
from functools import partial
from typing import Callable, Dict, Iterable, Optional, Union

from ..errors import ConfigurationError, MalformedTimestamp, UnsupportedFormat
from ..utils.timestamps import (
    check_epoch_millis,
    datetime_to_millis,
    get_zone,
    parse_iso8601_millis,
    parse_tai64n_millis,
    parse_unix_millis,
    parse_unix_ms,
)
from .patterns import CompiledPattern, compile_pattern

logger = logging.getLogger(__name__)

ISO8601 = "ISO8601"
UNIX = "UNIX"
UNIX_MS = "UNIX_MS"
TAI64N = "TAI64N"

Converter = Callable[[str], int]
FormatFactory = Callable[[Optional[tzinfo]], Converter]


@dataclass(frozen=True)
class TimestampParser:
    """A format token compiled into a ``value -> epoch milliseconds`` function.

    Calling the parser raises :class:`MalformedTimestamp` (carrying the value
    and the token) when the value does not match or the instant falls outside
    the years 1 to 9999.
    """

    token: str
    convert: Converter

    def __call__(self, value: object) -> int:
        try:
            return check_epoch_millis(self.convert(_as_text(value)))
        except (ValueError, TypeError, OverflowError) as exc:
            raise MalformedTimestamp(value, self.token, str(exc), exc) from exc


def _as_text(value: object) -> str:
    if isinstance(value, str):
        return value
    # bool is an int subclass but never a timestamp
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise TypeError(f"unsupported timestamp type: {type(value).__name__}")


_registry: Dict[str, FormatFactory] = {}


def register(token: str, factory: FormatFactory) -> None:
    """Register a symbolic format token.

    Parameters
    ----------
    token: str
        Case-sensitive token name. Re-registering a token replaces it.
    factory: FormatFactory
        Called once per compilation with the configured zone (or ``None``);
        returns the ``str -> int`` converter.
    """
    _registry[token] = factory
    logger.debug("formats.registered", extra={"token": token})


def get(token: str) -> FormatFactory:
    """Retrieve the factory for a symbolic token.

    Raises
    ------
    KeyError
        If ``token`` is not a registered symbolic format.
    """
    return _registry[token]


def all_formats() -> Iterable[str]:
    """Iterate over the registered symbolic tokens."""
    return _registry.keys()


def log_format_status() -> None:
    """Log the symbolic formats available for field declarations."""
    logger.info(
        "Timestamp formats available: %s (any other token is a custom pattern)",
        ", ".join(sorted(_registry)),
    )


def resolve_zone(time_zone: Union[str, tzinfo, None]) -> Optional[tzinfo]:
    """Turn a configured zone name into a ``tzinfo``.

    Raises
    ------
    ConfigurationError
        If the zone name is unknown.
    """
    if time_zone is None or isinstance(time_zone, tzinfo):
        return time_zone
    try:
        return get_zone(time_zone)
    except ValueError as exc:
        raise ConfigurationError(str(exc), wrapped=exc) from exc


def compile_format(
    token: str, time_zone: Union[str, tzinfo, None] = None
) -> TimestampParser:
    """Compile a format token into a :class:`TimestampParser`.

    Parameters
    ----------
    token: str
        A symbolic token or a custom pattern.
    time_zone: str or tzinfo, optional
        Zone used to interpret zone-less timestamps. Timestamps carrying an
        offset keep it.

    Raises
    ------
    UnsupportedFormat
        If the token is empty or the pattern cannot be compiled.
    ConfigurationError
        If the zone is unknown.
    """
    if not isinstance(token, str) or not token.strip():
        raise UnsupportedFormat(str(token), "format token must be a non-empty string")

    zone = resolve_zone(time_zone)
    factory = _registry.get(token)
    if factory is None:
        factory = partial(_pattern_converter, compile_pattern(token))
    parser = TimestampParser(token=token, convert=factory(zone))
    logger.info(
        "formats.compiled",
        extra={"token": token, "zone": str(zone) if zone else None},
    )
    return parser


def _pattern_converter(pattern: CompiledPattern, zone: Optional[tzinfo]) -> Converter:
    def convert(value: str) -> int:
        return datetime_to_millis(pattern.parse(value, zone))

    return convert


register(ISO8601, lambda zone: partial(parse_iso8601_millis, zone=zone))
register(UNIX, lambda zone: parse_unix_millis)
register(UNIX_MS, lambda zone: parse_unix_ms)
register(TAI64N, lambda zone: parse_tai64n_millis)
