"""Config models and loader.

This module defines Pydantic models for a duration filter's declarations, the
file-based application configuration holding one or more filters, and
environment-based settings. Validation failures surface as
:class:`ConfigurationError` before any event is processed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Literal, Mapping, Optional, Tuple

import orjson
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.errors import ConfigurationError
from ..domain.utils.timestamps import get_zone

TimeUnitName = Literal["millisecond", "second", "minute", "hour", "day", "week", "year"]


class FieldBinding(BaseModel):
    """A timestamp field and its ordered candidate formats.

    Accepts the array form ``["field", "fmt1", "fmt2"]`` as well as
    ``{"field": ..., "formats": [...]}``.

    Attributes
    ----------
    field: str
        Field reference in the event (``"start"`` or ``"[timing][start]"``).
    formats: Tuple[str, ...]
        Format tokens tried in declared order.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    field: str = Field(..., min_length=1, description="Event field reference")
    formats: Tuple[str, ...] = Field(
        ..., min_length=1, description="Ordered timestamp format tokens"
    )

    @model_validator(mode="before")
    @classmethod
    def _from_array(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            if len(data) < 2:
                raise ValueError(
                    "should contain first a field name and at least one date "
                    f"format, current value is {list(data)}"
                )
            return {"field": data[0], "formats": tuple(data[1:])}
        return data

    @field_validator("formats")
    @classmethod
    def _formats_not_blank(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        for token in value:
            if not token.strip():
                raise ValueError("format tokens must be non-empty")
        return value


class DurationFilterConfig(BaseModel):
    """Configuration for one duration filter instance.

    Attributes
    ----------
    field_name: str
        Output field written with the computed duration.
    first_date: FieldBinding
        Field holding the first (earlier) timestamp.
    second_date: FieldBinding
        Field holding the second (later) timestamp.
    timezone: Optional[str]
        Zone used to interpret zone-less timestamps; UTC when unset.
    time_unit: Optional[str]
        Output unit; ``second`` when unset.
    prettify_duration: bool
        Write ``HH:MM:SS`` instead of a number (intervals under 24 hours).
    add_tag: Tuple[str, ...]
        Tags appended to events the filter matched.
    tag_on_failure: Tuple[str, ...]
        Tags appended to events whose timestamps could not be resolved.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    field_name: str = Field("duration", min_length=1)
    first_date: FieldBinding
    second_date: FieldBinding
    timezone: Optional[str] = Field(None, description="IANA time zone identifier")
    time_unit: Optional[TimeUnitName] = None
    prettify_duration: bool = False
    add_tag: Tuple[str, ...] = ()
    tag_on_failure: Tuple[str, ...] = ()

    @field_validator("timezone")
    @classmethod
    def _known_zone(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            get_zone(value)
        return value

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DurationFilterConfig":
        """Validate a raw mapping, raising :class:`ConfigurationError`."""
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(
                "invalid duration filter configuration", str(exc), exc
            ) from exc


class AppConfig(BaseModel):
    """Top-level application configuration.

    Attributes
    ----------
    filters: List[DurationFilterConfig]
        Filters applied to every event, in order.
    """

    filters: List[DurationFilterConfig] = Field(default_factory=list)

    @staticmethod
    def load(path: Path) -> "AppConfig":
        """Load application config from a JSON file.

        Raises
        ------
        ConfigurationError
            If the file is unreadable, not JSON, or fails validation.
        """
        try:
            data = orjson.loads(path.read_bytes())
        except (OSError, orjson.JSONDecodeError) as exc:
            raise ConfigurationError(
                f"cannot read configuration file {path}", str(exc), exc
            ) from exc
        try:
            return AppConfig.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(
                f"invalid configuration in {path}", str(exc), exc
            ) from exc


class EnvSettings(BaseSettings):
    """Environment-driven settings and .env support.

    Attributes
    ----------
    log_level: str
        Logging level name (e.g., "DEBUG", "INFO"). Defaults to "INFO".
    """

    model_config = SettingsConfigDict(env_file=".env", env_prefix="DURATION_FILTER_")

    log_level: str = Field("INFO")
