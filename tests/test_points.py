from __future__ import annotations

import math

import pytest

from pawpath.core.points import PointRegistry, equals, parse_coordinate
from pawpath.schemas import Point


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("30.1", 30.1),
        (" -97.25 ", -97.25),
        (30.1, 30.1),
        (42, 42.0),
    ],
)
def test_parse_coordinate_accepts_numbers_and_decimal_strings(raw: object, expected: float) -> None:
    assert parse_coordinate(raw) == expected


@pytest.mark.parametrize("raw", ["north", "", None, True, "inf", "nan", float("inf"), ["30.1"]])
def test_parse_coordinate_marks_unusable_values_invalid(raw: object) -> None:
    assert math.isnan(parse_coordinate(raw))


def test_parse_coordinate_rounds_away_string_to_float_noise() -> None:
    assert parse_coordinate("30.10000000001") == parse_coordinate("30.1")
    assert parse_coordinate(0.1 + 0.2) == parse_coordinate("0.3")


def test_equals_is_exact_on_registered_values() -> None:
    registry = PointRegistry()
    first = registry.register("30.1", "-97.1")
    second = registry.register(30.1, -97.1)
    other = registry.register("30.1", "-97.2")

    assert equals(first, second)
    assert equals(second, first)
    assert not equals(first, other)


def test_invalid_points_never_match_even_themselves() -> None:
    registry = PointRegistry()
    broken = registry.register("not-a-number", "-97.1")

    assert not broken.is_valid
    assert not equals(broken, broken)
    assert not equals(broken, Point(lat=math.nan, lng=-97.1))


def test_register_never_raises_and_keeps_arrival_order() -> None:
    registry = PointRegistry()
    registry.register("30.1", "-97.1")
    registry.register(None, {"lng": 1})
    registry.register("30.2", "-97.2")

    assert len(registry) == 3
    assert registry.invalid_count == 1
    assert [point.is_valid for point in registry.points] == [True, False, True]


def test_bounds_skip_invalid_points() -> None:
    registry = PointRegistry()
    registry.register("30.1", "-97.3")
    registry.register("bogus", "bogus")
    registry.register("30.4", "-97.1")

    bounds = registry.bounds()

    assert bounds is not None
    assert (bounds.south, bounds.west, bounds.north, bounds.east) == (30.1, -97.3, 30.4, -97.1)
    assert bounds.center == pytest.approx((30.25, -97.2))
    assert bounds.span == pytest.approx(0.3)


def test_bounds_are_none_without_valid_points() -> None:
    registry = PointRegistry()
    registry.register("", "")

    assert registry.bounds() is None
