"""Interactive map of the current plan."""

from __future__ import annotations

import html
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import pydeck as pdk
import streamlit as st

from pawpath.core.points import Bounds
from pawpath.core.session import SessionState
from pawpath.core.timeline import transport_label
from pawpath.schemas import Point, Stop
from pawpath.ui.plan import planner_session
from pawpath.ui.timeline import SELECTED_STOP_KEY, selected_stop

_STOP_LAYER_ID = "plan-stops"
_LEG_LAYER_ID = "plan-legs"

_PLANNED_COLOR: Tuple[int, int, int, int] = (33, 150, 243, 220)
_UNPLANNED_COLOR: Tuple[int, int, int, int] = (120, 144, 156, 200)
_SELECTED_COLOR: Tuple[int, int, int, int] = (255, 152, 0, 255)
_LEG_COLOR: Tuple[int, int, int, int] = (33, 150, 243, 255)

_DEFAULT_VIEW = pdk.ViewState(latitude=51.505, longitude=-0.09, zoom=13)
_FOCUS_ZOOM = 15


@dataclass
class _Marker:
    position: Tuple[float, float]
    title: str
    subtitle: str
    color: Tuple[int, int, int, int]
    radius: int = 60

    def as_dict(self) -> Dict[str, object]:
        longitude, latitude = self.position
        return {
            "longitude": longitude,
            "latitude": latitude,
            "color": list(self.color),
            "radius": self.radius,
            "title": self.title,
            "subtitle": self.subtitle,
        }


def _marker_subtitle(description: str, time: Optional[str], duration: Optional[str]) -> str:
    parts: List[str] = []
    if description:
        parts.append(html.escape(description))
    if time:
        parts.append(html.escape(f"{time} • {duration}" if duration else time))
    return "<br/>".join(parts)


def _marker_color(stop: Stop, selected: bool) -> Tuple[int, int, int, int]:
    if selected:
        return _SELECTED_COLOR
    return _PLANNED_COLOR if stop.is_timed else _UNPLANNED_COLOR


def collect_markers(state: SessionState, selected: Optional[Stop] = None) -> List[_Marker]:
    markers: List[_Marker] = []
    for stop in state.stops:
        is_selected = stop is selected
        markers.append(
            _Marker(
                position=stop.position.as_lng_lat(),
                title=html.escape(stop.name),
                subtitle=_marker_subtitle(stop.description, stop.time, stop.duration),
                color=_marker_color(stop, is_selected),
                radius=120 if is_selected else 60,
            )
        )
    return markers


def collect_lines(state: SessionState) -> List[Dict[str, object]]:
    lines: List[Dict[str, object]] = []
    for leg in state.legs:
        subtitle = " · ".join(part for part in (leg.name, leg.travel_time) if part)
        lines.append(
            {
                "source": list(leg.start_point.as_lng_lat()),
                "target": list(leg.end_point.as_lng_lat()),
                "color": list(_LEG_COLOR),
                "title": transport_label(leg.transport),
                "subtitle": subtitle,
            }
        )
    return lines


def _zoom_for_span(span: float) -> int:
    if span <= 0:
        return 14
    return max(1, min(15, int(math.log2(360 / span)) - 1))


def view_for_bounds(bounds: Optional[Bounds], focus: Optional[Point] = None) -> pdk.ViewState:
    """Centre the view on ``bounds`` and zoom so every point is visible.

    A valid ``focus`` point overrides the bounds and zooms in on it.
    """

    if focus is not None and focus.is_valid:
        return pdk.ViewState(latitude=focus.lat, longitude=focus.lng, zoom=_FOCUS_ZOOM)
    if bounds is None:
        return _DEFAULT_VIEW
    latitude, longitude = bounds.center
    return pdk.ViewState(latitude=latitude, longitude=longitude, zoom=_zoom_for_span(bounds.span))


def _build_deck(
    markers: Sequence[_Marker],
    lines: List[Dict[str, object]],
    view_state: pdk.ViewState,
) -> pdk.Deck:
    layers = []
    if lines:
        layers.append(
            pdk.Layer(
                "LineLayer",
                data=lines,
                id=_LEG_LAYER_ID,
                get_source_position="source",
                get_target_position="target",
                get_color="color",
                get_width=4,
                width_min_pixels=2,
                pickable=True,
            )
        )
    if markers:
        layers.append(
            pdk.Layer(
                "ScatterplotLayer",
                data=[marker.as_dict() for marker in markers],
                id=_STOP_LAYER_ID,
                get_position="[longitude, latitude]",
                get_fill_color="color",
                get_radius="radius",
                radius_units="meters",
                radius_min_pixels=6,
                pickable=True,
                stroked=True,
            )
        )

    tooltip = {
        "html": "<b>{title}</b><br/>{subtitle}",
        "style": {"backgroundColor": "#111", "color": "white"},
    }
    return pdk.Deck(
        map_style="https://basemaps.cartocdn.com/gl/positron-gl-style/style.json",
        layers=layers,
        initial_view_state=view_state,
        tooltip=tooltip,
    )


def render_map_tab(container) -> None:
    """Render the map tab."""

    state = planner_session().state

    with container:
        st.subheader("Map")

        if state.is_empty:
            st.info("Generate a plan to explore it on the map.")
            return

        selected = selected_stop(state, st.session_state.get(SELECTED_STOP_KEY))
        markers = collect_markers(state, selected)
        lines = collect_lines(state)
        view_state = view_for_bounds(state.bounds, selected.position if selected is not None else None)
        st.pydeck_chart(_build_deck(markers, lines, view_state), key="plan_map")
        if selected is not None:
            st.caption(f"Showing {selected.name} ({selected.time}).")

        unplanned = len(state.stops) - len(state.day_plan)
        if unplanned:
            st.caption(f"{unplanned} place(s) without a time are shown in grey and left out of the timeline.")


__all__ = ["collect_lines", "collect_markers", "render_map_tab", "view_for_bounds"]
