"""Matching ``line`` records to consecutive stops."""

from __future__ import annotations

from typing import Iterable, Optional

from pawpath.core import InvalidRecordError
from pawpath.core.points import PointRegistry, equals
from pawpath.schemas import Leg, LineRecord, Point, Stop


def build_leg(record: LineRecord, registry: PointRegistry) -> Leg:
    """Register both endpoints and return the :class:`Leg`.

    Raises :class:`InvalidRecordError` when either endpoint does not parse;
    neither endpoint is registered in that case.
    """

    start = registry.parse(record.start.lat, record.start.lng)
    end = registry.parse(record.end.lat, record.end.lng)
    if not (start.is_valid and end.is_valid):
        raise InvalidRecordError(
            "unusable endpoints "
            f"(start={record.start.lat!r},{record.start.lng!r}; "
            f"end={record.end.lat!r},{record.end.lng!r})"
        )
    registry.add(start)
    registry.add(end)
    return Leg(
        name=record.name,
        start_point=start,
        end_point=end,
        transport=record.transport,
        travel_time=record.travel_time,
    )


def connects(leg: Leg, first: Point, second: Point) -> bool:
    """True when the leg joins the two points, in either direction."""

    forward = equals(leg.start_point, first) and equals(leg.end_point, second)
    backward = equals(leg.start_point, second) and equals(leg.end_point, first)
    return forward or backward


def find_connecting_leg(legs: Iterable[Leg], stop_a: Stop, stop_b: Stop) -> Optional[Leg]:
    """Return the first leg in arrival order joining the two stops, if any."""

    for leg in legs:
        if connects(leg, stop_a.position, stop_b.position):
            return leg
    return None


__all__ = ["build_leg", "connects", "find_connecting_leg"]
