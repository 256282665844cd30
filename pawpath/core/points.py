"""Coordinate parsing, equality and bounds for stops and legs."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from pawpath.schemas import Point

COORDINATE_PRECISION = int(os.getenv("PAWPATH_COORDINATE_PRECISION", "7"))

INVALID_COORDINATE = math.nan


def parse_coordinate(value: object, *, precision: int = COORDINATE_PRECISION) -> float:
    """Parse a number or decimal string, rounding to ``precision`` digits.

    Unparseable and non-finite values yield :data:`INVALID_COORDINATE`.
    """

    if value is None or isinstance(value, bool):
        return INVALID_COORDINATE
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return INVALID_COORDINATE
    else:
        return INVALID_COORDINATE
    if not math.isfinite(number):
        return INVALID_COORDINATE
    return round(number, precision)


def equals(first: Point, second: Point) -> bool:
    """Exact equality of registered coordinates; invalid points match nothing."""

    if not (first.is_valid and second.is_valid):
        return False
    return first.lat == second.lat and first.lng == second.lng


@dataclass(frozen=True)
class Bounds:
    south: float
    west: float
    north: float
    east: float

    @property
    def center(self) -> Tuple[float, float]:
        """Return the ``(lat, lng)`` midpoint."""

        return ((self.south + self.north) / 2, (self.west + self.east) / 2)

    @property
    def span(self) -> float:
        """Largest side of the box in degrees."""

        return max(self.north - self.south, self.east - self.west)


def bounds_of(points: Iterable[Point]) -> Optional[Bounds]:
    """Return the bounding box of the valid points, or ``None`` if there are none."""

    valid = [point for point in points if point.is_valid]
    if not valid:
        return None
    return Bounds(
        south=min(point.lat for point in valid),
        west=min(point.lng for point in valid),
        north=max(point.lat for point in valid),
        east=max(point.lng for point in valid),
    )


class PointRegistry:
    """Every point seen in one batch, in arrival order."""

    def __init__(self, *, precision: int = COORDINATE_PRECISION) -> None:
        self.precision = precision
        self._points: List[Point] = []

    def parse(self, lat: object, lng: object) -> Point:
        """Parse a coordinate pair without storing it. Never raises."""

        return Point(
            lat=parse_coordinate(lat, precision=self.precision),
            lng=parse_coordinate(lng, precision=self.precision),
        )

    def add(self, point: Point) -> Point:
        self._points.append(point)
        return point

    def register(self, lat: object, lng: object) -> Point:
        """Parse and store a coordinate pair. Never raises."""

        return self.add(self.parse(lat, lng))

    @property
    def points(self) -> List[Point]:
        return list(self._points)

    @property
    def invalid_count(self) -> int:
        return sum(1 for point in self._points if not point.is_valid)

    def bounds(self) -> Optional[Bounds]:
        return bounds_of(self._points)

    def __len__(self) -> int:
        return len(self._points)


__all__ = [
    "Bounds",
    "COORDINATE_PRECISION",
    "INVALID_COORDINATE",
    "PointRegistry",
    "bounds_of",
    "equals",
    "parse_coordinate",
]
