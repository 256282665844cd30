from __future__ import annotations

from typing import Optional

import pytest

from pawpath.core import InvalidRecordError
from pawpath.core.itinerary import ItineraryBuilder, build_day_plan
from pawpath.core.points import PointRegistry
from pawpath.schemas import LocationRecord, Point, Stop


def _stop(name: str, *, sequence: Optional[int] = None, time: Optional[str] = None) -> Stop:
    return Stop(name=name, position=Point(lat=30.0, lng=-97.0), sequence=sequence, time=time)


def test_sequence_dominates_time_and_missing_sequence_sorts_last() -> None:
    stops = [
        _stop("Third", sequence=3, time="10:00"),
        _stop("First", sequence=1, time="09:00"),
        _stop("Unnumbered", time="08:00"),
    ]

    plan = build_day_plan(stops)

    assert [stop.name for stop in plan.stops] == ["First", "Third", "Unnumbered"]


def test_time_orders_stops_without_sequence() -> None:
    stops = [
        _stop("Lunch", time="12:30"),
        _stop("Breakfast", time="08:15"),
        _stop("Dinner", time="18:00"),
    ]

    plan = build_day_plan(stops)

    assert [stop.name for stop in plan.stops] == ["Breakfast", "Lunch", "Dinner"]


def test_equal_keys_keep_arrival_order() -> None:
    stops = [
        _stop("a", sequence=2, time="10:00"),
        _stop("b", sequence=1, time="11:00"),
        _stop("c", sequence=2, time="10:00"),
        _stop("d", time="09:00"),
        _stop("e", sequence=1, time="11:00"),
        _stop("f", time="09:00"),
    ]

    plan = build_day_plan(stops)

    assert [stop.name for stop in plan.stops] == ["b", "e", "a", "c", "d", "f"]


def test_stops_missing_sequence_and_time_keep_relative_order_after_numbered_stops() -> None:
    stops = [_stop("x"), _stop("numbered", sequence=5), _stop("y"), _stop("z")]

    plan = build_day_plan(stops)

    assert [stop.name for stop in plan.stops] == ["numbered", "x", "y", "z"]


def test_build_day_plan_returns_new_sequence() -> None:
    stops = [_stop("b", time="10:00"), _stop("a", time="09:00")]

    plan = build_day_plan(stops)

    assert [stop.name for stop in stops] == ["b", "a"]
    assert len(plan) == 2


def test_add_stop_keeps_untimed_stops_off_the_day_plan() -> None:
    builder = ItineraryBuilder(PointRegistry())
    builder.add_stop(LocationRecord(name="Dog Park", lat="30.1", lng="-97.1", time="09:00"))
    untimed = builder.add_stop(LocationRecord(name="Pet Store", lat="30.3", lng="-97.3"))

    assert [stop.name for stop in builder.stops] == ["Dog Park", "Pet Store"]
    assert [stop.name for stop in builder.day_plan().stops] == ["Dog Park"]
    assert not untimed.is_timed


def test_add_stop_rejects_unparseable_coordinates() -> None:
    registry = PointRegistry()
    builder = ItineraryBuilder(registry)

    with pytest.raises(InvalidRecordError):
        builder.add_stop(LocationRecord(name="Nowhere", lat="north-ish", lng="-97.1", time="10:00"))

    assert builder.stops == []
    assert registry.invalid_count == 1


@pytest.mark.parametrize(
    "raw, expected",
    [("9:00", "09:00"), ("09:05", "09:05"), (" 14:30 ", "14:30"), ("2pm", "2pm"), ("25:00", "25:00"), ("", None)],
)
def test_location_time_is_zero_padded_at_the_boundary(raw: str, expected: Optional[str]) -> None:
    record = LocationRecord(name="Trail", lat=1, lng=2, time=raw)

    assert record.time == expected


@pytest.mark.parametrize(
    "raw, expected",
    [(2, 2), (2.0, 2), ("3", 3), ("3.0", 3), ("soon", None), (1.5, None), (None, None), (True, None)],
)
def test_location_sequence_coercion(raw: object, expected: Optional[int]) -> None:
    record = LocationRecord(name="Trail", lat=1, lng=2, sequence=raw)

    assert record.sequence == expected


def test_location_requires_a_name() -> None:
    with pytest.raises(ValueError):
        LocationRecord.model_validate({"name": "  ", "lat": "1", "lng": "2"})


def test_stops_without_sequence_or_time_sort_after_timed_stops() -> None:
    stops = [_stop("Whenever"), _stop("Evening walk", time="18:00"), _stop("Someday"), _stop("Breakfast", time="08:00")]

    plan = build_day_plan(stops)

    assert [stop.name for stop in plan.stops] == ["Breakfast", "Evening walk", "Whenever", "Someday"]
