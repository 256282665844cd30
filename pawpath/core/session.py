"""State for one prompt/response cycle, guarded by a generation counter."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from pawpath.core import InvalidRecordError
from pawpath.core.itinerary import ItineraryBuilder
from pawpath.core.legs import build_leg
from pawpath.core.points import Bounds, PointRegistry
from pawpath.core.timeline import TimelineEntry, assemble
from pawpath.schemas import DayPlan, FunctionCall, Leg, LineRecord, LocationRecord, Stop

_LOGGER = logging.getLogger(__name__)

RawCall = Union[FunctionCall, Mapping[str, Any]]


@dataclass(frozen=True)
class SessionState:
    """Everything derived from one batch of model records."""

    generation: int = 0
    stops: Tuple[Stop, ...] = ()
    legs: Tuple[Leg, ...] = ()
    day_plan: DayPlan = field(default_factory=DayPlan)
    timeline: Tuple[TimelineEntry, ...] = ()
    warnings: Tuple[str, ...] = ()
    bounds: Optional[Bounds] = None

    @property
    def is_empty(self) -> bool:
        return not self.stops and not self.legs

    @property
    def has_day_plan(self) -> bool:
        return len(self.day_plan) > 0


def _unpack(call: RawCall) -> Tuple[str, Any]:
    if isinstance(call, FunctionCall):
        return call.name, call.args
    if isinstance(call, Mapping):
        return str(call.get("name") or ""), call.get("args") or {}
    return "", call


def _record_label(index: int, name: str, args: Any) -> str:
    kind = name or "record"
    if isinstance(args, Mapping):
        title = args.get("name")
        if isinstance(title, str) and title.strip():
            return f"{kind} '{title.strip()}'"
    return f"{kind} #{index}"


def _describe_error(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ())) or "record"
            return f"{location}: {first.get('msg', 'invalid value')}"
    return str(exc)


def ingest_batch(calls: Iterable[RawCall], *, generation: int = 0) -> SessionState:
    """Build a complete :class:`SessionState` from one batch of model calls.

    Malformed records are skipped; each one adds a single warning.
    """

    registry = PointRegistry()
    builder = ItineraryBuilder(registry)
    legs: List[Leg] = []
    warnings: List[str] = []

    for index, call in enumerate(calls, start=1):
        name, args = _unpack(call)
        try:
            if name == "location":
                builder.add_stop(LocationRecord.model_validate(args))
            elif name == "line":
                legs.append(build_leg(LineRecord.model_validate(args), registry))
            else:
                raise InvalidRecordError(f"unknown record type {name!r}")
        except (ValidationError, InvalidRecordError) as exc:
            message = f"Skipped {_record_label(index, name, args)}: {_describe_error(exc)}"
            _LOGGER.warning("%s", message)
            warnings.append(message)

    day_plan = builder.day_plan()
    timeline = assemble(day_plan, legs)
    _LOGGER.debug(
        "Batch %d: %d stops (%d planned), %d legs, %d timeline entries",
        generation,
        len(builder.stops),
        len(day_plan),
        len(legs),
        len(timeline),
    )
    return SessionState(
        generation=generation,
        stops=tuple(builder.stops),
        legs=tuple(legs),
        day_plan=day_plan,
        timeline=tuple(timeline),
        warnings=tuple(warnings),
        bounds=registry.bounds(),
    )


class PlannerSession:
    """Owns the current :class:`SessionState`.

    ``begin()`` discards the current state and hands out a generation token;
    ``apply_batch`` ignores any batch whose token is no longer current.
    """

    def __init__(self) -> None:
        self._generation = 0
        self.state = SessionState()

    @property
    def generation(self) -> int:
        return self._generation

    def reset(self) -> int:
        self._generation += 1
        self.state = SessionState(generation=self._generation)
        return self._generation

    def begin(self) -> int:
        return self.reset()

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    def apply_batch(self, generation: int, calls: Iterable[RawCall]) -> Optional[SessionState]:
        """Replace the state with the batch, unless ``generation`` is stale."""

        if not self.is_current(generation):
            _LOGGER.info(
                "Discarding stale batch for generation %d (current is %d)",
                generation,
                self._generation,
            )
            return None
        state = ingest_batch(calls, generation=generation)
        self.state = state
        return state


__all__ = ["PlannerSession", "SessionState", "ingest_batch"]
