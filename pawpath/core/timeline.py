"""Interleaves the ordered stops with the legs that connect them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Optional, Sequence, Tuple, Union

from pawpath.core.legs import find_connecting_leg
from pawpath.schemas import DayPlan, Leg, Stop


@dataclass(frozen=True)
class StopEntry:
    stop: Stop
    index: int
    kind: Literal["stop"] = "stop"


@dataclass(frozen=True)
class LegEntry:
    leg: Leg
    after_index: int
    kind: Literal["leg"] = "leg"


TimelineEntry = Union[StopEntry, LegEntry]


_TRANSPORT_ICONS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("walk",), "🚶"),
    (("car", "driv"), "🚗"),
    (("bus", "transit", "public"), "🚌"),
    (("train", "subway", "metro"), "🚆"),
    (("bike", "cycl"), "🚲"),
    (("taxi", "cab"), "🚕"),
    (("boat", "ferry"), "⛴️"),
    (("plane", "fly"), "✈️"),
)
_DEFAULT_TRANSPORT_ICON = "🧭"


def transport_icon(transport: Optional[str]) -> str:
    lowered = (transport or "").lower()
    for keywords, icon in _TRANSPORT_ICONS:
        if any(keyword in lowered for keyword in keywords):
            return icon
    return _DEFAULT_TRANSPORT_ICON


def transport_label(transport: Optional[str]) -> str:
    text = transport or "Travel"
    return text[:1].upper() + text[1:]


def assemble(day_plan: DayPlan, legs: Sequence[Leg]) -> List[TimelineEntry]:
    """Return the display sequence: stop, optional leg, stop, ...

    Legs without a transport mode or travel time are matched but not shown.
    """

    entries: List[TimelineEntry] = []
    stops = day_plan.stops
    for index, stop in enumerate(stops):
        entries.append(StopEntry(stop=stop, index=index))
        if index == len(stops) - 1:
            break
        leg = find_connecting_leg(legs, stop, stops[index + 1])
        if leg is not None and leg.has_travel_details:
            entries.append(LegEntry(leg=leg, after_index=index))
    return entries


__all__ = [
    "LegEntry",
    "StopEntry",
    "TimelineEntry",
    "assemble",
    "transport_icon",
    "transport_label",
]
