"""CLI smoke tests.

Runs the JSON-lines pipeline against in-memory streams and temporary files
using minimal filter configs.
"""

from __future__ import annotations

import io
import json
import logging
from pathlib import Path

import pytest

from duration_filter.cli import build_filters, main, run
from duration_filter.domain.errors import ConfigurationError


def _write_config(tmp_path: Path, filters) -> Path:
    cfg_path = tmp_path / "config.json"
    cfg_path.write_text(json.dumps({"filters": filters}))
    return cfg_path


def test_build_filters_from_config(tmp_path: Path, unix_filter_config) -> None:
    """Build every configured filter from a temporary JSON config."""
    cfg_path = _write_config(
        tmp_path,
        [unix_filter_config, {**unix_filter_config, "field_name": "elapsed"}],
    )
    filters = build_filters(cfg_path)
    assert [f.config.field_name for f in filters] == ["duration", "elapsed"]


def test_build_filters_rejects_bad_format(tmp_path: Path) -> None:
    """A pattern that cannot be compiled fails the whole build."""
    cfg_path = _write_config(
        tmp_path,
        [{"first_date": ["start", "qqq"], "second_date": ["end", "UNIX"]}],
    )
    with pytest.raises(ConfigurationError):
        build_filters(cfg_path)


def test_build_filters_warns_when_empty(tmp_path: Path, caplog) -> None:
    """An empty filter list is allowed but logged."""
    cfg_path = _write_config(tmp_path, [])
    with caplog.at_level(logging.WARNING):
        assert build_filters(cfg_path) == []
    assert any(r.message == "cli.no_filters" for r in caplog.records)


def test_run_writes_every_event(tmp_path: Path, unix_filter_config) -> None:
    """Processed and unprocessable events are both written, in order."""
    filters = build_filters(_write_config(tmp_path, [unix_filter_config]))
    lines = [
        b'{"id": 1, "start": "1000.000", "end": "1005.500"}\n',
        b"\n",
        b'{"id": 2, "start": "1000"}\n',
    ]
    out = io.StringIO()

    assert run(filters, lines, out) == 2

    events = [json.loads(line) for line in out.getvalue().splitlines()]
    assert events == [
        {"id": 1, "start": "1000.000", "end": "1005.500", "duration": 6},
        {"id": 2, "start": "1000"},
    ]
    assert filters[0].stats.matched == 1
    assert filters[0].stats.missing == 1


def test_run_applies_filters_in_order(tmp_path: Path) -> None:
    """A later filter can read a field another filter wrote."""
    filters = build_filters(
        _write_config(
            tmp_path,
            [
                {
                    "first_date": ["a", "UNIX_MS"],
                    "second_date": ["b", "UNIX_MS"],
                    "field_name": "gap",
                    "time_unit": "millisecond",
                },
                {
                    "first_date": ["a", "UNIX_MS"],
                    "second_date": ["gap", "UNIX_MS"],
                    "field_name": "echo",
                    "time_unit": "millisecond",
                },
            ],
        )
    )
    out = io.StringIO()
    run(filters, [b'{"a": 0, "b": 2500}'], out)
    assert json.loads(out.getvalue()) == {"a": 0, "b": 2500, "gap": 2500, "echo": 2500}


def test_run_skips_invalid_lines(tmp_path: Path, unix_filter_config, caplog) -> None:
    """Lines that are not JSON objects are logged and skipped."""
    filters = build_filters(_write_config(tmp_path, [unix_filter_config]))
    out = io.StringIO()
    with caplog.at_level(logging.WARNING):
        written = run(filters, [b"{broken", b"[1, 2]", b'{"start": "0", "end": "1"}'], out)

    assert written == 1
    assert json.loads(out.getvalue()) == {"start": "0", "end": "1", "duration": 1}
    messages = [r.message for r in caplog.records]
    assert "cli.invalid_json" in messages
    assert "cli.not_an_object" in messages


def test_main_with_files(tmp_path: Path, unix_filter_config) -> None:
    """main() reads --input and writes --output."""
    cfg_path = _write_config(
        tmp_path, [{**unix_filter_config, "prettify_duration": True}]
    )
    input_path = tmp_path / "events.jsonl"
    input_path.write_text('{"start": "0", "end": "3661"}\n{"start": "5", "end": "6"}\n')
    output_path = tmp_path / "out.jsonl"

    main(
        [
            "--config",
            str(cfg_path),
            "--input",
            str(input_path),
            "--output",
            str(output_path),
            "--log-level",
            "WARNING",
        ]
    )

    events = [json.loads(line) for line in output_path.read_text().splitlines()]
    assert [e["duration"] for e in events] == ["01:01:01", "00:00:01"]


def test_main_exits_on_bad_config(tmp_path: Path, capsys) -> None:
    """A configuration error exits with status 2 and a message on stderr."""
    cfg_path = _write_config(tmp_path, [{"first_date": ["start"]}])
    with pytest.raises(SystemExit) as exc_info:
        main(["--config", str(cfg_path)])
    assert exc_info.value.code == 2
    assert "invalid configuration in" in capsys.readouterr().err


def test_main_requires_config() -> None:
    """--config is mandatory."""
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == 2


def test_package_exposes_version() -> None:
    """The package reports a version string."""
    from duration_filter import __version__

    assert isinstance(__version__, str) and __version__
