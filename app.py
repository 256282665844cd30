"""Streamlit entry point for the PawPath application."""
from __future__ import annotations

import logging
from typing import Sequence

import streamlit as st
from dotenv import load_dotenv

from pawpath.ui import ensure_plan_state, render_map_tab, render_plan_tab, render_timeline_tab


_TAB_ORDER: Sequence[str] = ("Plan", "Timeline", "Map")


def configure() -> None:
    """Configure global Streamlit settings and load environment variables."""

    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    st.set_page_config(page_title="PawPath", page_icon="🐾", layout="wide")


def _resolve_tab_order() -> Sequence[str]:
    """Return the ordered list of tab labels for the current render cycle."""

    default_tab = st.session_state.get("app_active_tab", "Plan")
    focus_timeline = st.session_state.pop("_focus_timeline", False)
    focus_map = st.session_state.pop("_focus_map", False)
    if focus_map:
        default_tab = "Map"
    elif focus_timeline:
        default_tab = "Timeline"

    if default_tab not in _TAB_ORDER:
        default_tab = "Plan"

    ordered = [default_tab, *[label for label in _TAB_ORDER if label != default_tab]]
    st.session_state["app_active_tab"] = default_tab
    return ordered


def render() -> None:
    """Render the PawPath tab shell."""

    ensure_plan_state()

    st.title("🐾 PawPath")
    st.caption("Dog-friendly day plans, mapped and ready to print.")

    ordered_tabs = _resolve_tab_order()
    tab_containers = st.tabs(list(ordered_tabs))
    tab_lookup = {label: container for label, container in zip(ordered_tabs, tab_containers)}

    render_plan_tab(tab_lookup["Plan"])
    render_timeline_tab(tab_lookup["Timeline"])
    render_map_tab(tab_lookup["Map"])


if __name__ == "__main__":
    configure()
    render()
