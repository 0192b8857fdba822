"""Command-line interface to apply duration filters to JSON-lines events.

The CLI loads the application configuration, builds every configured filter,
then reads one JSON object per line, applies the filters in order and writes
each event back as one JSON line. Events a filter cannot process pass through
unchanged.

Usage
-----
    python -m duration_filter --config config.json < events.jsonl
"""

from __future__ import annotations

import argparse
import contextlib
import logging
import sys
from pathlib import Path
from typing import IO, Iterable, List, Optional

import orjson

from .config.models import AppConfig, EnvSettings
from .domain.errors import ConfigurationError
from .domain.event import Event
from .domain.filter import DurationFilter
from .domain.formats import log_format_status
from .observability import setup_logging

logger = logging.getLogger(__name__)


def build_filters(config_path: Path) -> List[DurationFilter]:
    """Build the configured filters from a JSON config file.

    Raises
    ------
    ConfigurationError
        If the file is invalid or any filter fails to compile.
    """
    cfg = AppConfig.load(config_path)
    if not cfg.filters:
        logger.warning("cli.no_filters", extra={"config": str(config_path)})
    filters = [DurationFilter(filter_cfg) for filter_cfg in cfg.filters]
    log_format_status()
    return filters


def run(filters: List[DurationFilter], lines: Iterable[bytes], out: IO[str]) -> int:
    """Apply ``filters`` to each JSON line and write the results to ``out``.

    Returns
    -------
    int
        Number of events written.
    """
    written = 0
    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            payload = orjson.loads(line)
        except orjson.JSONDecodeError as exc:
            logger.warning("cli.invalid_json", extra={"line": lineno, "error": str(exc)})
            continue
        if not isinstance(payload, dict):
            logger.warning("cli.not_an_object", extra={"line": lineno})
            continue

        event = Event(payload)
        for duration_filter in filters:
            duration_filter.filter(event)
        out.write(orjson.dumps(event.to_dict()).decode("utf-8"))
        out.write("\n")
        written += 1

    for index, duration_filter in enumerate(filters):
        logger.info(
            "cli.filter_stats",
            extra={
                "filter": index,
                "field_name": duration_filter.config.field_name,
                "matched": duration_filter.stats.matched,
                "missing": duration_filter.stats.missing,
                "unresolvable": duration_filter.stats.unresolvable,
            },
        )
    return written


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entrypoint for applying duration filters."""
    parser = argparse.ArgumentParser(description="Event duration filter")
    parser.add_argument("--config", required=True, help="Path to JSON app config")
    parser.add_argument(
        "--input", help="JSON-lines file to read (default: standard input)"
    )
    parser.add_argument(
        "--output", help="File to write events to (default: standard output)"
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=[
            "CRITICAL",
            "ERROR",
            "WARNING",
            "INFO",
            "DEBUG",
        ],
        help="Logging level (overrides environment)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (once sets DEBUG)",
    )
    args = parser.parse_args(argv)

    # Determine effective log level
    env_level = EnvSettings().log_level.upper()
    effective_level = args.log_level or ("DEBUG" if args.verbose > 0 else env_level)
    setup_logging(effective_level)

    try:
        filters = build_filters(Path(args.config))
    except ConfigurationError as exc:
        logger.debug("cli.configuration_error", extra={"details": exc.internal()})
        parser.exit(2, f"{parser.prog}: error: {exc}\n")

    with contextlib.ExitStack() as stack:
        if args.input:
            source: IO[bytes] = stack.enter_context(open(args.input, "rb"))
        else:
            source = sys.stdin.buffer
        if args.output:
            sink: IO[str] = stack.enter_context(
                open(args.output, "w", encoding="utf-8")
            )
        else:
            sink = sys.stdout
        run(filters, source, sink)


if __name__ == "__main__":
    main()
