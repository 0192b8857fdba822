"""Duration filter: computes the interval between two timestamp fields.

The filter resolves the ``first_date`` field, then the ``second_date`` field,
computes the interval and writes it under ``field_name``. Per-event failures
(missing field, unresolvable timestamp) are logged and counted; the event
passes through without the output field and no exception escapes
:meth:`DurationFilter.filter`. Setup errors are raised from the constructor.
"""

from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Any, Iterable, Iterator, Mapping, Optional, Union

from ..config.models import DurationFilterConfig, FieldBinding
from .calculator import compute
from .errors import DurationFilterError, MissingField, UnresolvableTimestamp
from .event import EventLike, add_tag
from .formats import resolve_zone
from .models import DurationResult, FilterStats, Resolved
from .resolver import FieldResolver
from .utils.timestamps import to_iso8601

logger = logging.getLogger(__name__)


class DurationFilter:
    """Writes the interval between two event timestamps into the event.

    Parameters
    ----------
    config: DurationFilterConfig or mapping
        Filter declarations. A mapping is validated first.

    Raises
    ------
    ConfigurationError
        If the declarations are invalid or a zone is unknown.
    UnsupportedFormat
        If a declared format cannot be compiled.
    """

    def __init__(
        self, config: Union[DurationFilterConfig, Mapping[str, Any]]
    ) -> None:
        if not isinstance(config, DurationFilterConfig):
            config = DurationFilterConfig.from_mapping(config)
        self.config = config
        zone = resolve_zone(config.timezone)
        self.first = self._build_resolver("first", config.first_date, zone)
        self.second = self._build_resolver("second", config.second_date, zone)
        self.stats = FilterStats()

    @staticmethod
    def _build_resolver(
        role: str, binding: FieldBinding, zone: Optional[tzinfo]
    ) -> FieldResolver:
        logger.info(
            "Generating %s date parser for field '%s' (formats: %s)",
            role,
            binding.field,
            ", ".join(binding.formats),
        )
        return FieldResolver(binding.field, binding.formats, zone)

    def filter(self, event: EventLike) -> Optional[DurationResult]:
        """Process one event.

        Returns
        -------
        DurationResult or None
            The computed duration, or ``None`` when the event could not be
            processed (it is then left without the output field).
        """
        try:
            first_millis = self._resolve(self.first, event)
            second_millis = self._resolve(self.second, event)
        except MissingField as exc:
            self.stats.missing += 1
            self._report_failure(event, exc)
            return None
        except UnresolvableTimestamp as exc:
            self.stats.unresolvable += 1
            self._report_failure(event, exc)
            return None

        result = compute(
            first_millis,
            second_millis,
            self.config.time_unit,
            self.config.prettify_duration,
        )
        event.set(self.config.field_name, result.output)
        self._filter_matched(event)
        logger.debug(
            "filter.matched",
            extra={
                "first": to_iso8601(first_millis),
                "second": to_iso8601(second_millis),
                "field_name": self.config.field_name,
                "value": result.output,
            },
        )
        return result

    def process(self, events: Iterable[EventLike]) -> Iterator[EventLike]:
        """Apply :meth:`filter` to each event and yield every event in order."""
        for event in events:
            self.filter(event)
            yield event

    def _resolve(self, resolver: FieldResolver, event: EventLike) -> int:
        field = resolver.field
        if not event.has(field):
            raise MissingField(field)
        raw_value = event.get(field)

        if isinstance(raw_value, (list, tuple)):
            if not raw_value:
                raise MissingField(field)
            # First element that resolves wins; the others are only logged.
            outcomes = resolver.resolve_all(raw_value)
            for outcome in outcomes:
                if isinstance(outcome, Resolved):
                    return outcome.epoch_millis
            raise UnresolvableTimestamp(field, raw_value, outcomes[-1].error)

        outcome = resolver.resolve(raw_value)
        if isinstance(outcome, Resolved):
            return outcome.epoch_millis
        raise UnresolvableTimestamp(field, raw_value, outcome.error)

    def _filter_matched(self, event: EventLike) -> None:
        self.stats.matched += 1
        for tag in self.config.add_tag:
            add_tag(event, tag)

    def _report_failure(self, event: EventLike, exc: DurationFilterError) -> None:
        logger.warning(
            "filter.event_failed",
            extra={
                "error": str(exc),
                "details": exc.internal(),
                "field_name": self.config.field_name,
            },
        )
        for tag in self.config.tag_on_failure:
            add_tag(event, tag)
