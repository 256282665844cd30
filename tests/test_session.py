from __future__ import annotations

import logging
from typing import Any, Dict, List

import pytest

from pawpath.core.session import PlannerSession, SessionState, ingest_batch
from pawpath.core.timeline import LegEntry, StopEntry
from pawpath.schemas import FunctionCall


def _location(name: str, lat: object, lng: object, **extra: object) -> Dict[str, Any]:
    return {"name": "location", "args": {"name": name, "description": f"{name} details", "lat": lat, "lng": lng, **extra}}


def _line(start: tuple, end: tuple, **extra: object) -> Dict[str, Any]:
    return {
        "name": "line",
        "args": {
            "start": {"lat": start[0], "lng": start[1]},
            "end": {"lat": end[0], "lng": end[1]},
            **extra,
        },
    }


def _park_and_cafe_batch() -> List[Dict[str, Any]]:
    return [
        _location("Park", "30.1", "-97.1", time="09:00"),
        _location("Cafe", "30.2", "-97.2", time="11:00"),
        _line(("30.1", "-97.1"), ("30.2", "-97.2"), transport="walking", travelTime="20 minutes"),
    ]


def test_park_to_cafe_end_to_end() -> None:
    state = ingest_batch(_park_and_cafe_batch())

    assert [stop.name for stop in state.day_plan.stops] == ["Park", "Cafe"]
    assert [entry.kind for entry in state.timeline] == ["stop", "leg", "stop"]
    first, leg_entry, last = state.timeline
    assert isinstance(first, StopEntry) and first.stop.name == "Park"
    assert isinstance(leg_entry, LegEntry)
    assert leg_entry.leg.transport == "walking"
    assert leg_entry.leg.travel_time == "20 minutes"
    assert isinstance(last, StopEntry) and last.stop.name == "Cafe"
    assert state.warnings == ()


def test_one_malformed_location_is_skipped_with_one_warning(caplog: pytest.LogCaptureFixture) -> None:
    batch = [
        _location("Trailhead", "30.1", "-97.1", time="08:00"),
        _location("Mystery Spot", "somewhere north", "-97.4", time="09:00"),
        _location("Bakery", "30.2", "-97.2", time="10:00"),
        _location("Lake", "30.3", "-97.3", time="12:00"),
    ]

    with caplog.at_level(logging.WARNING):
        state = ingest_batch(batch)

    assert [stop.name for stop in state.day_plan.stops] == ["Trailhead", "Bakery", "Lake"]
    assert len(state.warnings) == 1
    assert "Mystery Spot" in state.warnings[0]
    assert any("Mystery Spot" in record.getMessage() for record in caplog.records)


def test_records_missing_required_fields_are_skipped() -> None:
    batch = [
        {"name": "location", "args": {"description": "no name", "lat": "1", "lng": "2"}},
        {"name": "line", "args": {"transport": "walking"}},
        {"name": "location", "args": "not even a mapping"},
        _location("Vet", "30.5", "-97.5", time="15:00"),
    ]

    state = ingest_batch(batch)

    assert [stop.name for stop in state.stops] == ["Vet"]
    assert state.legs == ()
    assert len(state.warnings) == 3


def test_unknown_function_names_are_reported() -> None:
    state = ingest_batch([{"name": "weather", "args": {"sunny": True}}])

    assert state.is_empty
    assert state.warnings == ("Skipped weather #1: unknown record type 'weather'",)


def test_untimed_locations_stay_on_the_map_only() -> None:
    state = ingest_batch(
        [
            _location("Pet store", "30.4", "-97.4"),
            _location("Dog park", "30.1", "-97.1", time="9:30"),
        ]
    )

    assert [stop.name for stop in state.stops] == ["Pet store", "Dog park"]
    assert [stop.name for stop in state.day_plan.stops] == ["Dog park"]
    assert state.day_plan.stops[0].time == "09:30"


def test_bounds_cover_stops_and_leg_endpoints() -> None:
    state = ingest_batch(
        [
            _location("Park", "30.1", "-97.1", time="09:00"),
            _line(("30.1", "-97.1"), ("30.9", "-96.5"), transport="driving"),
        ]
    )

    assert state.bounds is not None
    assert (state.bounds.south, state.bounds.north) == (30.1, 30.9)
    assert (state.bounds.west, state.bounds.east) == (-97.1, -96.5)


def test_accepts_function_call_models() -> None:
    calls = [FunctionCall.model_validate(call) for call in _park_and_cafe_batch()]

    state = ingest_batch(calls)

    assert len(state.timeline) == 3


def test_apply_batch_replaces_state() -> None:
    session = PlannerSession()
    generation = session.begin()

    state = session.apply_batch(generation, _park_and_cafe_batch())

    assert state is session.state
    assert state is not None and state.generation == generation
    assert len(state.day_plan) == 2


def test_stale_batch_is_discarded(caplog: pytest.LogCaptureFixture) -> None:
    session = PlannerSession()
    stale = session.begin()
    current = session.begin()

    with caplog.at_level(logging.INFO):
        assert session.apply_batch(stale, _park_and_cafe_batch()) is None

    assert session.state == SessionState(generation=current)
    assert any("stale" in record.getMessage() for record in caplog.records)


def test_reset_discards_everything() -> None:
    session = PlannerSession()
    generation = session.begin()
    session.apply_batch(generation, _park_and_cafe_batch())

    new_generation = session.reset()

    assert new_generation == generation + 1
    assert session.state.is_empty
    assert not session.state.has_day_plan
    assert session.state.timeline == ()
    assert session.apply_batch(generation, _park_and_cafe_batch()) is None


def test_rejected_leg_does_not_widen_bounds() -> None:
    state = ingest_batch(
        [
            _location("Park", "30.1", "-97.1", time="09:00"),
            _line(("45.0", "10.0"), ("north", "-97.1"), transport="walking"),
        ]
    )

    assert len(state.warnings) == 1
    assert state.bounds is not None
    assert (state.bounds.south, state.bounds.north) == (30.1, 30.1)
    assert (state.bounds.west, state.bounds.east) == (-97.1, -97.1)
