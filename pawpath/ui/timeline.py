"""Timeline view of the day plan, with PDF export."""

from __future__ import annotations

import html
import logging
from typing import List, Optional, Tuple

import streamlit as st

from pawpath.core.session import SessionState
from pawpath.core.timeline import LegEntry, StopEntry, TimelineEntry, transport_icon, transport_label
from pawpath.schemas import Stop
from pawpath.ui.plan import EXPORT_KEY, planner_session
from pawpath.workflows.plan_pipeline import export_day_plan

_LOGGER = logging.getLogger(__name__)

PDF_FILE_NAME = "doggy-day-plan.pdf"
SELECTED_STOP_KEY = "_timeline_selected_stop"
FOCUS_MAP_KEY = "_focus_map"

_HIGHLIGHT_START = (
    "<div style=\"background-color:#eef2ff;border-left:4px solid "
    "#2196f3;padding:0.75rem;border-radius:0.5rem;\">"
)
_HIGHLIGHT_END = "</div>"


def _entry_markdown(entry: TimelineEntry) -> str:
    if isinstance(entry, StopEntry):
        stop = entry.stop
        lines = [f"**{stop.time or 'Flexible'}** · **{html.escape(stop.name)}**"]
        if stop.description:
            lines.append(html.escape(stop.description))
        if stop.duration:
            lines.append(f"_{html.escape(stop.duration)}_")
        return "  \n".join(lines)

    leg = entry.leg
    lines = [f"{transport_icon(leg.transport)} {html.escape(transport_label(leg.transport))}"]
    if leg.name:
        lines.append(html.escape(leg.name))
    if leg.travel_time:
        lines.append(f"_{html.escape(leg.travel_time)}_")
    return "> " + "  \n> ".join(lines)


def timeline_markdown(state: SessionState) -> List[str]:
    return [_entry_markdown(entry) for entry in state.timeline]


def selected_stop(state: SessionState, selection: Optional[Tuple[int, int]]) -> Optional[Stop]:
    """Resolve a ``(generation, plan index)`` selection against ``state``."""

    if not selection:
        return None
    generation, index = selection
    if generation != state.generation or not 0 <= index < len(state.day_plan):
        return None
    return state.day_plan.stops[index]


def select_stop(state: SessionState, index: int) -> None:
    st.session_state[SELECTED_STOP_KEY] = (state.generation, index)
    st.session_state[FOCUS_MAP_KEY] = True


def _render_entry(state: SessionState, entry: TimelineEntry, selected: Optional[Stop]) -> None:
    markdown = _entry_markdown(entry)
    if not isinstance(entry, StopEntry):
        st.markdown(markdown)
        return

    is_selected = entry.stop is selected
    with st.container():
        if is_selected:
            st.markdown(_HIGHLIGHT_START, unsafe_allow_html=True)

        details_col, action_col = st.columns([4, 1])
        details_col.markdown(markdown)
        action_col.button(
            "Show on map",
            key=f"timeline_focus_{state.generation}_{entry.index}",
            on_click=select_stop,
            args=(state, entry.index),
            use_container_width=True,
        )

        if is_selected:
            st.markdown(_HIGHLIGHT_END, unsafe_allow_html=True)


def _format_export_error(exc: Exception) -> str:
    base_message = "Could not generate PDF."
    details = str(exc).strip()
    if "google_maps_api_key" in details.lower():
        return (
            f"{base_message} Add a Google Maps API key by setting the "
            "GOOGLE_MAPS_API_KEY environment variable."
        )
    if details:
        return f"{base_message} {details}"
    return f"{base_message} An error occurred."


def _render_export(state: SessionState) -> None:
    exported: Optional[Tuple[int, bytes]] = st.session_state.get(EXPORT_KEY)

    if st.button("Export PDF", key="timeline_export"):
        try:
            with st.spinner("Exporting…"):
                pdf_bytes = export_day_plan(state)
        except Exception as exc:  # noqa: BLE001 - surfaced to the user
            _LOGGER.exception("PDF export failed")
            st.error(_format_export_error(exc))
            return
        exported = (state.generation, pdf_bytes)
        st.session_state[EXPORT_KEY] = exported

    if exported and exported[0] == state.generation:
        st.download_button(
            "Download PDF",
            data=exported[1],
            file_name=PDF_FILE_NAME,
            mime="application/pdf",
            key="timeline_download",
        )


def render_timeline_tab(container) -> None:
    """Render the day plan timeline tab."""

    state = planner_session().state

    with container:
        st.subheader("Your Doggy Day Plan")

        if not state.has_day_plan:
            st.info("Generate a plan with times to see it here.")
            return

        selected = selected_stop(state, st.session_state.get(SELECTED_STOP_KEY))
        for entry in state.timeline:
            _render_entry(state, entry, selected)

        _render_export(state)


__all__ = [
    "FOCUS_MAP_KEY",
    "PDF_FILE_NAME",
    "SELECTED_STOP_KEY",
    "render_timeline_tab",
    "select_stop",
    "selected_stop",
    "timeline_markdown",
]
