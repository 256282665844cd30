"""PawPath Streamlit UI helpers."""

from __future__ import annotations

from .map import render_map_tab
from .plan import ensure_plan_state, planner_session, render_plan_tab, reset_plan
from .timeline import render_timeline_tab

__all__ = [
    "ensure_plan_state",
    "planner_session",
    "render_map_tab",
    "render_plan_tab",
    "render_timeline_tab",
    "reset_plan",
]
