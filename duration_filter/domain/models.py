"""Domain data model for timestamp resolution and duration results.

``Resolved`` and ``Failed`` are the per-value parse outcomes produced by the
field resolver. ``DurationResult`` is the computed interval for one event.
All of these are transient: built and consumed while one event is processed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

from .utils.units import round_half_away


@dataclass(frozen=True)
class Resolved:
    """A raw value resolved to epoch milliseconds."""

    epoch_millis: int
    token: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failed:
    """No format matched; ``error`` is the last failure encountered.

    Outcomes compare by message so repeated resolutions of the same value
    are equal.
    """

    message: str
    error: Exception = field(compare=False)

    @classmethod
    def from_error(cls, error: Exception) -> "Failed":
        return cls(message=str(error), error=error)

    @property
    def ok(self) -> bool:
        return False


ParseOutcome = Union[Resolved, Failed]


class DurationResult(BaseModel):
    """Interval between the first and second timestamps of an event.

    Attributes
    ----------
    seconds: float
        Signed raw difference ``second - first`` in seconds.
    unit: str
        Unit token the value was converted to.
    value: Optional[int]
        Unit-converted, rounded value; ``None`` for an unrecognised unit.
    formatted: Optional[str]
        ``HH:MM:SS`` rendering when prettifying is enabled.
    """

    model_config = ConfigDict(frozen=True)

    seconds: float
    unit: str
    value: Optional[int] = None
    formatted: Optional[str] = None

    @property
    def output(self) -> Union[int, str]:
        """Value written to the event.

        The pretty string replaces the numeric value; an unset value falls
        back to the raw seconds, rounded.
        """
        if self.formatted is not None:
            return self.formatted
        if self.value is not None:
            return self.value
        return round_half_away(self.seconds)


@dataclass
class FilterStats:
    """Per-filter event counters reported to the host."""

    matched: int = 0
    missing: int = 0
    unresolvable: int = 0
