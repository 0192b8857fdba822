"""
Tests for timestamp utilities.
"""

from datetime import datetime, timezone

import pytest

from duration_filter.domain.utils.timestamps import (
    MAX_EPOCH_MILLIS,
    MIN_EPOCH_MILLIS,
    TAI64N_LEAP_OFFSET_MS,
    check_epoch_millis,
    datetime_to_millis,
    get_zone,
    millis_to_datetime,
    parse_iso8601_millis,
    parse_tai64n_millis,
    parse_unix_millis,
    parse_unix_ms,
    to_iso8601,
)

# October 15, 2023 16:00:00 UTC
OCT_15_MS = 1697385600000


def test_parse_iso8601_with_z():
    """Test parsing ISO8601 timestamp with Z suffix."""
    assert parse_iso8601_millis("2023-10-15T16:00:00Z") == OCT_15_MS


def test_parse_iso8601_with_offset():
    """Test parsing ISO8601 timestamp with an embedded offset."""
    assert parse_iso8601_millis("2023-10-15T18:00:00+02:00") == OCT_15_MS


def test_parse_iso8601_without_timezone_defaults_to_utc():
    """Test parsing ISO8601 timestamp without timezone (defaults to UTC)."""
    assert parse_iso8601_millis("2023-10-15T16:00:00") == OCT_15_MS


def test_parse_iso8601_zone_applies_to_naive_values():
    """Test that a configured zone interprets zone-less timestamps."""
    paris = get_zone("Europe/Paris")
    # Paris is on CEST (UTC+2) in mid October
    assert parse_iso8601_millis("2023-10-15T18:00:00", paris) == OCT_15_MS


def test_parse_iso8601_zone_does_not_override_offset():
    """Test that an embedded offset wins over the configured zone."""
    paris = get_zone("Europe/Paris")
    assert parse_iso8601_millis("2023-10-15T16:00:00Z", paris) == OCT_15_MS


def test_parse_iso8601_variations():
    """Test various ISO8601 format variations."""
    assert parse_iso8601_millis("2023-10-15T16:00:00.250Z") == OCT_15_MS + 250
    assert parse_iso8601_millis("2023-10-15 16:00:00") == OCT_15_MS
    assert parse_iso8601_millis("2023-10-15") == OCT_15_MS - 16 * 3_600_000


def test_parse_iso8601_invalid():
    """Test parsing invalid strings raises ValueError."""
    with pytest.raises(ValueError):
        parse_iso8601_millis("not a date")
    with pytest.raises(ValueError):
        parse_iso8601_millis("")
    with pytest.raises(ValueError):
        parse_iso8601_millis("2025-13-45T99:99:99Z")


@pytest.mark.parametrize(
    "value", ["0", "0.001", "1.0005", "12.3456", "1697385600.123", "-1.5"]
)
def test_parse_unix_matches_rounded_scaling(value):
    """Test UNIX parsing is round(float(value) * 1000)."""
    assert parse_unix_millis(value) == round(float(value) * 1000)


def test_parse_unix_seconds():
    """Test parsing Unix timestamp in seconds."""
    assert parse_unix_millis("1697385600") == OCT_15_MS
    assert parse_unix_millis("1000.5") == 1_000_500


@pytest.mark.parametrize("value", ["abc", "", "nan", "inf", "-inf"])
def test_parse_unix_invalid(value):
    """Test non-numeric or non-finite values are rejected."""
    with pytest.raises(ValueError):
        parse_unix_millis(value)


@pytest.mark.parametrize("value", ["0", "1697385600123", "-42", " 42 "])
def test_parse_unix_ms_is_unscaled(value):
    """Test UNIX_MS parsing is int(value), without scaling."""
    assert parse_unix_ms(value) == int(value)


def test_parse_unix_ms_rejects_fractions():
    """Test UNIX_MS rejects fractional input."""
    with pytest.raises(ValueError):
        parse_unix_ms("12.5")


@pytest.mark.parametrize(
    "seconds,nanos",
    [(0, 0), (1, 1_000_000), (1697385600, 123_456_789), (935467455, 999_999_999)],
)
def test_parse_tai64n_labelled(seconds, nanos):
    """Test TAI64N decoding of labelled values, with and without '@'."""
    encoded = f"4{seconds:015x}{nanos:08x}"
    expected = seconds * 1000 - TAI64N_LEAP_OFFSET_MS + nanos // 1_000_000
    assert parse_tai64n_millis(encoded) == expected
    assert parse_tai64n_millis("@" + encoded) == expected
    assert parse_tai64n_millis("@" + encoded.upper()) == expected


def test_parse_tai64n_daemontools_sample():
    """Test a typical multilog timestamp."""
    value = "@4000000037c219bf2ef02e94"
    expected = 0x37C219BF * 1000 - 10000 + 0x2EF02E94 // 1_000_000
    assert parse_tai64n_millis(value) == expected


@pytest.mark.parametrize(
    "value", ["@4000000037c219bf", "4000000037c219bf2ef02e9", "zz00000037c219bf2ef02e94", ""]
)
def test_parse_tai64n_invalid(value):
    """Test malformed TAI64N values are rejected."""
    with pytest.raises(ValueError):
        parse_tai64n_millis(value)


def test_datetime_to_millis_floors_sub_millisecond():
    """Test sub-millisecond precision is floored, also before the epoch."""
    dt = datetime(1970, 1, 1, 0, 0, 1, 999, tzinfo=timezone.utc)
    assert datetime_to_millis(dt) == 1000
    before = datetime(1969, 12, 31, 23, 59, 59, 999500, tzinfo=timezone.utc)
    assert datetime_to_millis(before) == -1


def test_millis_roundtrip():
    """Test roundtrip: millis -> datetime -> millis."""
    assert datetime_to_millis(millis_to_datetime(OCT_15_MS + 7)) == OCT_15_MS + 7


def test_get_zone():
    """Test zone resolution."""
    assert get_zone("UTC") is timezone.utc
    assert str(get_zone("Europe/Paris")) == "Europe/Paris"
    with pytest.raises(ValueError):
        get_zone("Mars/Olympus_Mons")


def test_to_iso8601():
    """Test rendering epoch millis as ISO8601."""
    assert to_iso8601(OCT_15_MS) == "2023-10-15T16:00:00Z"
    assert to_iso8601(None) is None


@pytest.mark.parametrize("value", ["1_000", "1_0.5", "-1_000"])
def test_digit_separators_rejected(value):
    """Test underscores are not accepted in numeric timestamps."""
    with pytest.raises(ValueError):
        parse_unix_ms(value)
    with pytest.raises(ValueError):
        parse_unix_millis(value)


def test_epoch_range_matches_datetime_limits():
    """Test the accepted range is exactly what a datetime can hold."""
    assert millis_to_datetime(MIN_EPOCH_MILLIS).year == 1
    assert millis_to_datetime(MAX_EPOCH_MILLIS).year == 9999
    assert check_epoch_millis(MIN_EPOCH_MILLIS) == MIN_EPOCH_MILLIS
    assert check_epoch_millis(MAX_EPOCH_MILLIS) == MAX_EPOCH_MILLIS
    with pytest.raises(ValueError):
        check_epoch_millis(MIN_EPOCH_MILLIS - 1)
    with pytest.raises(ValueError):
        check_epoch_millis(MAX_EPOCH_MILLIS + 1)


@pytest.mark.parametrize("value", ["9" * 400, "-" + "9" * 400, str(MAX_EPOCH_MILLIS + 1)])
def test_parse_unix_ms_out_of_range(value):
    """Test huge millisecond values are rejected rather than resolved."""
    with pytest.raises(ValueError):
        parse_unix_ms(value)


@pytest.mark.parametrize("value", ["1.5e305", "-1.5e305", "1e400", "253402300800"])
def test_parse_unix_out_of_range(value):
    """Test second values beyond year 9999, or overflowing once scaled, are rejected."""
    with pytest.raises(ValueError):
        parse_unix_millis(value)


def test_parse_tai64n_out_of_range():
    """Test TAI64N labels beyond year 9999 are rejected."""
    with pytest.raises(ValueError):
        parse_tai64n_millis("@4fffffffffffffff00000000")
