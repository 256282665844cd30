"""Tests for surfacing plan tab pipeline failures."""

from __future__ import annotations

import pytest

from pawpath.ui import plan
from pawpath.workflows.plan_pipeline import EMPTY_RESULT_MESSAGE, EmptyPlanError


@pytest.mark.parametrize(
    "exception, expected",
    [
        (
            RuntimeError("GEMINI_API_KEY environment variable is not set"),
            "Failed to generate a day plan. Add a Gemini API key by setting the GEMINI_API_KEY environment variable.",
        ),
        (
            RuntimeError(
                "Client error '403 Forbidden' for url 'https://generativelanguage.googleapis.com/v1beta/models/x:generateContent'"
            ),
            "Failed to generate a day plan. The Gemini API rejected the key. Check the GEMINI_API_KEY environment variable.",
        ),
        (
            RuntimeError("Client error '429 Too Many Requests'"),
            "Failed to generate a day plan. The model rate limit was hit. Wait a moment and try again.",
        ),
        (
            ValueError("The prompt was blocked by the model (SAFETY)"),
            "Failed to generate a day plan. The prompt was blocked by the model (SAFETY)",
        ),
        (
            Exception(""),
            "Failed to generate a day plan. Check your configuration and try again.",
        ),
    ],
)
def test_format_pipeline_error(exception: Exception, expected: str) -> None:
    assert plan._format_pipeline_error(exception) == expected


def test_empty_plan_error_is_shown_verbatim() -> None:
    error = EmptyPlanError(EMPTY_RESULT_MESSAGE)

    assert plan._format_pipeline_error(error) == EMPTY_RESULT_MESSAGE


def test_format_pipeline_error_handles_non_str_messages() -> None:
    class CustomError(Exception):
        def __str__(self) -> str:
            return "Unexpected failure"

    error = CustomError()
    assert (
        plan._format_pipeline_error(error)
        == "Failed to generate a day plan. Unexpected failure"
    )
