"""Prompt entry and plan generation for the Streamlit UI."""

from __future__ import annotations

import logging

import streamlit as st

from pawpath.core.session import PlannerSession
from pawpath.workflows.plan_pipeline import EmptyPlanError, run_plan_pipeline

_SESSION_KEY = "_planner_session"
_PIPELINE_ERROR_KEY = "pipeline_error"
_PROMPT_KEY = "plan_prompt"
EXPORT_KEY = "_day_plan_pdf"

_PROMPT_PLACEHOLDER = "Plan a dog-friendly day in... (e.g. 'Austin, TX')"

_LOGGER = logging.getLogger(__name__)


def ensure_plan_state() -> None:
    """Initialise the Streamlit session state used by the planner UI."""

    if _SESSION_KEY not in st.session_state:
        st.session_state[_SESSION_KEY] = PlannerSession()
    st.session_state.setdefault(_PIPELINE_ERROR_KEY, None)
    st.session_state.setdefault(EXPORT_KEY, None)


def planner_session() -> PlannerSession:
    ensure_plan_state()
    return st.session_state[_SESSION_KEY]


def _format_pipeline_error(exc: Exception) -> str:
    base_message = "Failed to generate a day plan."
    if isinstance(exc, EmptyPlanError):
        return str(exc)
    details = str(exc).strip()
    if details:
        lowered = details.lower()
        if "gemini_api_key" in lowered:
            return (
                f"{base_message} Add a Gemini API key by setting the "
                "GEMINI_API_KEY environment variable."
            )
        if any(token in lowered for token in ("401", "403", "unauthorized", "permission denied")):
            return (
                f"{base_message} The Gemini API rejected the key. Check the "
                "GEMINI_API_KEY environment variable."
            )
        if "429" in lowered or "too many requests" in lowered:
            return f"{base_message} The model rate limit was hit. Wait a moment and try again."
        return f"{base_message} {details}"
    return f"{base_message} Check your configuration and try again."


def _handle_submit(prompt: str) -> bool:
    if not prompt.strip():
        st.warning("Describe where you'd like to spend the day first.")
        return False

    session = planner_session()
    st.session_state[EXPORT_KEY] = None

    try:
        with st.spinner("Sniffing out dog-friendly spots…"):
            state = run_plan_pipeline(prompt, session)
    except Exception as exc:  # noqa: BLE001 - surfaced to the user
        friendly_message = _format_pipeline_error(exc)
        _LOGGER.exception("Plan pipeline failed")
        st.session_state[_PIPELINE_ERROR_KEY] = friendly_message
        st.error(friendly_message)
        return False

    st.session_state[_PIPELINE_ERROR_KEY] = None
    if state is None:
        return False

    for warning in state.warnings:
        st.warning(warning)

    if state.is_empty:
        st.info("None of the suggested places had usable coordinates. Try a different prompt.")
        return False

    st.session_state["_focus_timeline"] = state.has_day_plan
    st.success(
        f"Found {len(state.stops)} places and {len(state.legs)} routes. "
        "Check the Timeline and Map tabs."
    )
    return True


def reset_plan() -> None:
    planner_session().reset()
    st.session_state[_PIPELINE_ERROR_KEY] = None
    st.session_state[EXPORT_KEY] = None


def render_plan_tab(container) -> None:
    """Render the prompt form inside the provided container."""

    with container:
        with st.form("plan_prompt_form", clear_on_submit=True):
            prompt = st.text_area(
                "Where are you and your dog headed?",
                key=_PROMPT_KEY,
                placeholder=_PROMPT_PLACEHOLDER,
            )
            submitted = st.form_submit_button("Generate", type="primary")

        if submitted:
            _handle_submit(prompt)
        elif st.session_state.get(_PIPELINE_ERROR_KEY):
            st.error(st.session_state[_PIPELINE_ERROR_KEY])

        if st.button("Start over", key="plan_reset"):
            reset_plan()
            st.rerun()


__all__ = ["EXPORT_KEY", "ensure_plan_state", "planner_session", "render_plan_tab", "reset_plan"]
