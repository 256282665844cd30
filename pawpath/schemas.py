"""Data schemas for the PawPath application."""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

_LOGGER = logging.getLogger(__name__)

_CLOCK_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


def normalise_clock_time(value: str) -> str:
    """Zero-pad ``H:MM`` times so lexicographic order matches the clock.

    Anything that is not a 24-hour ``H:MM``/``HH:MM`` value is returned as-is.
    """

    match = _CLOCK_PATTERN.match(value)
    if not match:
        _LOGGER.debug("Keeping non HH:MM time %r as received", value)
        return value
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        _LOGGER.debug("Keeping out-of-range time %r as received", value)
        return value
    return f"{hours:02d}:{minutes:02d}"


def _blank_to_none(value: object) -> object:
    if value is None:
        return None
    if isinstance(value, str):
        candidate = value.strip()
        return candidate or None
    return value


class Point(BaseModel):
    """A registered coordinate pair.

    Points that failed to parse carry ``nan`` coordinates and report
    ``is_valid == False``.
    """

    lat: float
    lng: float

    model_config = ConfigDict(frozen=True)

    @property
    def is_valid(self) -> bool:
        return math.isfinite(self.lat) and math.isfinite(self.lng)

    def as_lng_lat(self) -> Tuple[float, float]:
        return (self.lng, self.lat)


class FunctionCall(BaseModel):
    """One structured call returned by the model (``location`` or ``line``)."""

    name: str = ""
    args: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("args", mode="before")
    @classmethod
    def _coerce_args(cls, value: object) -> object:
        if value is None:
            return {}
        return value


class LocationRecord(BaseModel):
    """Raw ``location`` arguments as emitted by the model."""

    name: str = Field(min_length=1)
    description: str = ""
    lat: Any
    lng: Any
    time: Optional[str] = None
    duration: Optional[str] = None
    sequence: Optional[int] = None

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("description", mode="before")
    @classmethod
    def _coerce_description(cls, value: object) -> object:
        if value is None:
            return ""
        return value

    @field_validator("time", mode="before")
    @classmethod
    def _coerce_time(cls, value: object) -> object:
        value = _blank_to_none(value)
        if isinstance(value, str):
            return normalise_clock_time(value)
        return value

    @field_validator("duration", mode="before")
    @classmethod
    def _coerce_duration(cls, value: object) -> object:
        return _blank_to_none(value)

    @field_validator("sequence", mode="before")
    @classmethod
    def _coerce_sequence(cls, value: object) -> Optional[int]:
        """Accept ints, integral floats and numeric strings; drop anything else."""

        value = _blank_to_none(value)
        if value is None:
            return None
        if isinstance(value, bool):
            _LOGGER.warning("Ignoring boolean sequence value %r", value)
            return None
        if isinstance(value, int):
            return value
        try:
            number = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            _LOGGER.warning("Ignoring non-numeric sequence value %r", value)
            return None
        if not math.isfinite(number) or not number.is_integer():
            _LOGGER.warning("Ignoring non-integral sequence value %r", value)
            return None
        return int(number)


class RawPoint(BaseModel):
    """Unparsed ``{lat, lng}`` pair from a ``line`` record."""

    lat: Any = None
    lng: Any = None


class LineRecord(BaseModel):
    """Raw ``line`` arguments as emitted by the model."""

    name: Optional[str] = None
    start: RawPoint
    end: RawPoint
    transport: Optional[str] = None
    travel_time: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("travelTime", "travel_time"),
    )

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("name", "transport", "travel_time", mode="before")
    @classmethod
    def _strip_text(cls, value: object) -> object:
        return _blank_to_none(value)


class Stop(BaseModel):
    """A location on the map, optionally anchored to a time of day."""

    name: str
    description: str = ""
    position: Point
    time: Optional[str] = None
    duration: Optional[str] = None
    sequence: Optional[int] = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_timed(self) -> bool:
        return bool(self.time)

    def popup_text(self) -> str:
        """Plain-text summary used for marker tooltips."""

        parts = [self.name]
        if self.description:
            parts.append(self.description)
        if self.time:
            schedule = self.time
            if self.duration:
                schedule += f" • {self.duration}"
            parts.append(schedule)
        return "\n".join(parts)


class Leg(BaseModel):
    """A travel connection between two points."""

    name: Optional[str] = None
    start_point: Point
    end_point: Point
    transport: Optional[str] = None
    travel_time: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def has_travel_details(self) -> bool:
        return bool(self.transport or self.travel_time)


class DayPlan(BaseModel):
    """Ordered, time-anchored stops for one planning session."""

    stops: List[Stop] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.stops)

    def adjacent_pairs(self) -> Iterator[Tuple[int, Stop, Stop]]:
        """Yield ``(index, stop, next_stop)`` for every consecutive pair."""

        for index, (current, following) in enumerate(zip(self.stops, self.stops[1:])):
            yield index, current, following


__all__ = [
    "DayPlan",
    "FunctionCall",
    "Leg",
    "LineRecord",
    "LocationRecord",
    "Point",
    "RawPoint",
    "Stop",
    "normalise_clock_time",
]
