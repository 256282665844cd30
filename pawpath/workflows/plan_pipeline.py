"""Orchestrates prompt-to-plan generation and PDF export."""

from __future__ import annotations

import logging
import time
from typing import Optional

from pawpath.core import exporters, llm, static_map
from pawpath.core.session import PlannerSession, SessionState

_LOGGER = logging.getLogger(__name__)

EMPTY_RESULT_MESSAGE = "Could not generate any results. Try again, or try a different prompt."


class EmptyPlanError(RuntimeError):
    """Raised when the model answers without any location or line calls."""


def _log_stage(stage: str, duration: float, prompt_version: str) -> None:
    _LOGGER.info(
        "%s stage completed in %.2fs [prompt_version=%s]",
        stage.capitalize(),
        duration,
        prompt_version,
    )


def run_plan_pipeline(
    prompt: str,
    session: PlannerSession,
    *,
    client: Optional[llm.LLMClient] = None,
) -> Optional[SessionState]:
    """Generate a day plan for ``prompt`` and apply it to ``session``.

    Returns ``None`` when a newer submission superseded this one while the
    model call was in flight.
    """

    cleaned = prompt.strip()
    if not cleaned:
        raise ValueError("Enter a prompt describing the day you want to plan.")

    pipeline_start = time.perf_counter()
    generation = session.begin()
    _LOGGER.info("Starting plan pipeline [generation=%d]", generation)

    start = time.perf_counter()
    if client is None:
        calls = llm.generate_function_calls(cleaned, prompt_version=llm.PROMPT_VERSION)
    else:
        response = client.generate(prompt=cleaned, prompt_version=llm.PROMPT_VERSION)
        calls = client.extract_function_calls(response)
    _log_stage("model", time.perf_counter() - start, llm.PROMPT_VERSION)

    if not calls:
        raise EmptyPlanError(EMPTY_RESULT_MESSAGE)

    start = time.perf_counter()
    state = session.apply_batch(generation, calls)
    if state is None:
        return None
    _log_stage("assembly", time.perf_counter() - start, llm.PROMPT_VERSION)

    _LOGGER.info(
        "Plan pipeline completed in %.2fs with %d stops and %d warnings",
        time.perf_counter() - pipeline_start,
        len(state.stops),
        len(state.warnings),
    )
    return state


def export_day_plan(state: SessionState, *, include_map: bool = True) -> bytes:
    """Render ``state`` to PDF bytes.

    The map snapshot is fetched first; failures propagate to the caller.
    """

    map_image: Optional[bytes] = None
    if include_map and state.stops:
        start = time.perf_counter()
        map_image = static_map.fetch_static_map(state.stops)
        _LOGGER.info("Map snapshot fetched in %.2fs", time.perf_counter() - start)

    start = time.perf_counter()
    pdf_bytes = exporters.day_plan_to_pdf(state.timeline, map_image=map_image)
    _LOGGER.info(
        "Exported %d timeline entries to PDF in %.2fs",
        len(state.timeline),
        time.perf_counter() - start,
    )
    return pdf_bytes


__all__ = ["EMPTY_RESULT_MESSAGE", "EmptyPlanError", "export_day_plan", "run_plan_pipeline"]
