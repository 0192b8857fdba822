"""
Timestamp parsing and conversion utilities.

Provides converters from the built-in timestamp conventions (ISO8601, Unix
seconds, Unix milliseconds and TAI64N) to epoch milliseconds. Every converter
raises ``ValueError`` on input it cannot interpret; callers attach the format
token that was tried.
"""

import logging
import math
import re
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Approximation of the accumulated TAI-UTC leap-second offset, in milliseconds.
# It does not track the historical leap-second table.
TAI64N_LEAP_OFFSET_MS = 10000

_TAI64N_RE = re.compile(r"[0-9a-fA-F]{24}")
_ONE_MS = timedelta(milliseconds=1)

# Instants representable as a datetime; anything outside is not a timestamp.
MIN_EPOCH_MILLIS = (datetime.min.replace(tzinfo=timezone.utc) - EPOCH) // _ONE_MS
MAX_EPOCH_MILLIS = (datetime.max.replace(tzinfo=timezone.utc) - EPOCH) // _ONE_MS


def check_epoch_millis(epoch_millis: int) -> int:
    """
    Return ``epoch_millis`` if it lies within the datetime range.

    Raises
    ------
    ValueError
        If the instant is before year 1 or after year 9999

    Examples
    --------
    >>> check_epoch_millis(0)
    0
    """
    if not MIN_EPOCH_MILLIS <= epoch_millis <= MAX_EPOCH_MILLIS:
        raise ValueError(f"timestamp out of range: {epoch_millis} ms")
    return epoch_millis


def _check_plain_number(value: str) -> None:
    # int() and float() accept digit separators, timestamps do not
    if "_" in value:
        raise ValueError(f"digit separators not allowed: {value!r}")


def get_zone(name: str) -> tzinfo:
    """
    Resolve a time zone identifier.

    Parameters
    ----------
    name : str
        IANA zone identifier (e.g. "Europe/Paris") or "UTC"

    Returns
    -------
    tzinfo
        The resolved zone

    Raises
    ------
    ValueError
        If the identifier is unknown to the platform's zone database
    """
    if name.upper() in ("UTC", "Z"):
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"unknown time zone: {name!r}") from e


def apply_zone(dt: datetime, zone: Optional[tzinfo] = None) -> datetime:
    """
    Attach a zone to a naive datetime; aware datetimes keep their offset.

    Naive values are interpreted in ``zone`` when given, otherwise in UTC.
    """
    if dt.tzinfo is not None:
        return dt
    return dt.replace(tzinfo=zone or timezone.utc)


def datetime_to_millis(dt: datetime) -> int:
    """
    Convert an aware datetime to integer epoch milliseconds.

    Sub-millisecond precision is floored.

    Examples
    --------
    >>> datetime_to_millis(datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc))
    1000
    """
    return (dt - EPOCH) // _ONE_MS


def millis_to_datetime(epoch_millis: int) -> datetime:
    """Convert epoch milliseconds back to an aware UTC datetime."""
    return EPOCH + timedelta(milliseconds=epoch_millis)


def parse_iso8601_millis(value: str, zone: Optional[tzinfo] = None) -> int:
    """
    Parse an ISO8601 timestamp string into epoch milliseconds.

    Handles a trailing 'Z' and the space separator. Zone-less timestamps are
    interpreted in ``zone`` when given, otherwise in UTC.

    Examples
    --------
    >>> parse_iso8601_millis("1970-01-01T00:00:01Z")
    1000
    >>> parse_iso8601_millis("1970-01-01T01:00:00+01:00")
    0
    """
    if not value:
        raise ValueError("empty timestamp")

    value = value.strip()
    # Handle trailing 'Z' (Zulu time)
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"

    dt = datetime.fromisoformat(value)
    return datetime_to_millis(apply_zone(dt, zone))


def parse_unix_millis(value: str) -> int:
    """
    Parse Unix seconds (possibly fractional) into epoch milliseconds.

    Examples
    --------
    >>> parse_unix_millis("1000.5")
    1000500
    """
    _check_plain_number(value)
    scaled = float(value) * 1000
    if not math.isfinite(scaled):
        raise ValueError(f"non-finite unix timestamp: {value!r}")
    return check_epoch_millis(round(scaled))


def parse_unix_ms(value: str) -> int:
    """
    Parse integer Unix milliseconds; no scaling is applied.

    Examples
    --------
    >>> parse_unix_ms("1697385600000")
    1697385600000
    """
    _check_plain_number(value)
    return check_epoch_millis(int(value))


def parse_tai64n_millis(value: str) -> int:
    """
    Parse a TAI64N external representation into epoch milliseconds.

    The value is 24 hex characters, optionally prefixed with '@'. The first 16
    characters are the TAI64 label, whose leading nibble carries the 2**62
    offset, and the last 8 are nanoseconds. The result subtracts a fixed
    10 second leap offset, which is an approximation.

    Examples
    --------
    >>> parse_tai64n_millis("@4000000000000001000f4240")
    -8999
    """
    if value.startswith("@"):
        value = value[1:]
    if not _TAI64N_RE.fullmatch(value):
        raise ValueError(f"not a TAI64N timestamp: {value!r}")

    seconds = int(value[1:16], 16)
    nanoseconds = int(value[16:24], 16)
    return check_epoch_millis(
        seconds * 1000 - TAI64N_LEAP_OFFSET_MS + nanoseconds // 1_000_000
    )


def to_iso8601(epoch_millis: Optional[int]) -> Optional[str]:
    """
    Render epoch milliseconds as an ISO8601 string with 'Z' suffix.

    Examples
    --------
    >>> to_iso8601(1500)
    '1970-01-01T00:00:01.500000Z'
    """
    if epoch_millis is None:
        return None

    try:
        iso_str = millis_to_datetime(epoch_millis).isoformat()
    except OverflowError:
        logger.warning(
            "timestamps.to_iso8601_failed",
            extra={"epoch_millis": epoch_millis},
        )
        return None
    if iso_str.endswith("+00:00"):
        iso_str = iso_str[:-6] + "Z"
    return iso_str
