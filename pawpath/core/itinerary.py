"""Turns ``location`` records into stops and orders them into a day plan."""

from __future__ import annotations

import math
from typing import Iterable, List, Tuple

from pawpath.core import InvalidRecordError
from pawpath.core.points import PointRegistry
from pawpath.schemas import DayPlan, LocationRecord, Stop


def _sort_key(stop: Stop) -> Tuple[float, bool, str]:
    sequence = stop.sequence if stop.sequence is not None else math.inf
    return (sequence, not stop.time, stop.time or "")


def build_day_plan(stops: Iterable[Stop]) -> DayPlan:
    """Stable-sort stops by ``(sequence, time)``.

    Missing sequences sort after every numbered stop, missing times sort
    after every time within the same sequence, and ties keep arrival order.
    """

    return DayPlan(stops=sorted(stops, key=_sort_key))


class ItineraryBuilder:
    """Accumulates stops for one batch."""

    def __init__(self, registry: PointRegistry) -> None:
        self.registry = registry
        self._stops: List[Stop] = []
        self._timed: List[Stop] = []

    def add_stop(self, record: LocationRecord) -> Stop:
        """Convert ``record`` into a :class:`Stop`.

        Raises :class:`InvalidRecordError` when the coordinates do not parse.
        Stops without a time are kept for the map but left out of the plan.
        """

        position = self.registry.register(record.lat, record.lng)
        if not position.is_valid:
            raise InvalidRecordError(
                f"unusable coordinates (lat={record.lat!r}, lng={record.lng!r})"
            )
        stop = Stop(
            name=record.name,
            description=record.description,
            position=position,
            time=record.time,
            duration=record.duration,
            sequence=record.sequence,
        )
        self._stops.append(stop)
        if stop.is_timed:
            self._timed.append(stop)
        return stop

    @property
    def stops(self) -> List[Stop]:
        return list(self._stops)

    @property
    def timed_stops(self) -> List[Stop]:
        return list(self._timed)

    def day_plan(self) -> DayPlan:
        return build_day_plan(self._timed)


__all__ = ["ItineraryBuilder", "build_day_plan"]
