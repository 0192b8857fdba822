"""Field resolution against an ordered list of timestamp formats."""

from __future__ import annotations

import logging
from datetime import tzinfo
from typing import List, Sequence, Tuple, Union

from .errors import ConfigurationError, MalformedTimestamp
from .formats import TimestampParser, compile_format
from .models import Failed, ParseOutcome, Resolved

logger = logging.getLogger(__name__)


class FieldResolver:
    """Resolves one field's raw value(s) to epoch milliseconds.

    Parsers are compiled once, in declared order, when the resolver is built.
    ``resolve`` short-circuits on the first format that succeeds; when every
    format fails only the last error is kept.

    Raises
    ------
    ConfigurationError
        If ``formats`` is empty or the zone is unknown.
    UnsupportedFormat
        If a token cannot be compiled.
    """

    def __init__(
        self,
        field: str,
        formats: Sequence[str],
        time_zone: Union[str, tzinfo, None] = None,
    ) -> None:
        if not formats:
            raise ConfigurationError(
                f"field {field!r} must declare at least one timestamp format"
            )
        self.field = field
        self.parsers: Tuple[TimestampParser, ...] = tuple(
            compile_format(token, time_zone) for token in formats
        )
        logger.info(
            "resolver.compiled",
            extra={"field": field, "formats": [p.token for p in self.parsers]},
        )

    @property
    def formats(self) -> Tuple[str, ...]:
        return tuple(p.token for p in self.parsers)

    def resolve(self, raw_value: object) -> ParseOutcome:
        """Try each format in order; the first success wins."""
        last_error: Exception = RuntimeError("no format attempted")
        for parser in self.parsers:
            try:
                epoch_millis = parser(raw_value)
            except MalformedTimestamp as exc:
                last_error = exc
                logger.debug(
                    "resolver.format_failed",
                    extra={"field": self.field, "format": parser.token},
                )
                continue
            return Resolved(epoch_millis=epoch_millis, token=parser.token)
        return Failed.from_error(last_error)

    def resolve_all(self, raw_values: Sequence[object]) -> List[ParseOutcome]:
        """Resolve every element independently, in source order.

        A failing element is logged and scanning continues with its siblings.
        """
        outcomes: List[ParseOutcome] = []
        for index, raw_value in enumerate(raw_values):
            outcome = self.resolve(raw_value)
            if isinstance(outcome, Failed):
                logger.warning(
                    "resolver.element_failed",
                    extra={
                        "field": self.field,
                        "index": index,
                        "value": raw_value,
                        "error": str(outcome.error),
                    },
                )
            outcomes.append(outcome)
        return outcomes
