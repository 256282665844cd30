"""Gemini client that asks for ``location`` and ``line`` function calls."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

import httpx
from pydantic import ValidationError

from pawpath.schemas import FunctionCall

DEFAULT_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
DEFAULT_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "1"))
DEFAULT_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "60"))
DEFAULT_BASE_URL = os.getenv(
    "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
)

PROMPT_VERSION = "dayplan.v1"

SYSTEM_INSTRUCTIONS = """You are a helpful assistant that creates dog-friendly day trip itineraries.
- Your primary goal is to respond to user queries by creating a detailed, dog-friendly day plan.
- **STRICT RULE**: Only include locations that are verifiably dog-friendly. If unsure, do not include them.
- You **MUST** use the 'location' and 'line' functions to structure your response.
- For the best user experience, you should ideally include a logical sequence, times, durations, and travel details for the itinerary."""

_COORDINATE_PROPERTIES = {
    "lat": {"type": "STRING", "description": "Latitude of the location."},
    "lng": {"type": "STRING", "description": "Longitude of the location."},
}

LOCATION_FUNCTION: Dict[str, Any] = {
    "name": "location",
    "description": "Geographic coordinates of a location.",
    "parameters": {
        "type": "OBJECT",
        "properties": {
            "name": {"type": "STRING", "description": "Name of the location."},
            "description": {
                "type": "STRING",
                "description": "Description of the location: why is it relevant, details to know.",
            },
            **_COORDINATE_PROPERTIES,
            "time": {
                "type": "STRING",
                "description": 'Time of day to visit this location (e.g., "09:00", "14:30").',
            },
            "duration": {
                "type": "STRING",
                "description": 'Suggested duration of stay at this location (e.g., "1 hour", "45 minutes").',
            },
            "sequence": {
                "type": "NUMBER",
                "description": "Order in the day itinerary (1 = first stop of the day).",
            },
        },
        "required": ["name", "description", "lat", "lng"],
    },
}

LINE_FUNCTION: Dict[str, Any] = {
    "name": "line",
    "description": "Connection between a start location and an end location.",
    "parameters": {
        "type": "OBJECT",
        "properties": {
            "name": {"type": "STRING", "description": "Name of the route or connection"},
            "start": {
                "type": "OBJECT",
                "description": "Start location of the route",
                "properties": dict(_COORDINATE_PROPERTIES),
            },
            "end": {
                "type": "OBJECT",
                "description": "End location of the route",
                "properties": dict(_COORDINATE_PROPERTIES),
            },
            "transport": {
                "type": "STRING",
                "description": 'Mode of transportation between locations (e.g., "walking", "driving", "public transit").',
            },
            "travelTime": {
                "type": "STRING",
                "description": 'Estimated travel time between locations (e.g., "15 minutes", "1 hour").',
            },
        },
        "required": ["start", "end"],
    },
}


_LOGGER = logging.getLogger(__name__)


class LLMResponseError(ValueError):
    """Raised when the model response cannot be interpreted."""


def _api_key() -> str:
    api_key = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
    if not api_key:
        raise RuntimeError("GEMINI_API_KEY environment variable is not set")
    return api_key


@dataclass
class LLMClient:
    """A small wrapper around the Gemini ``generateContent`` endpoint."""

    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    timeout: Optional[float] = DEFAULT_TIMEOUT
    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL

    def generate(
        self,
        *,
        prompt: str,
        prompt_version: str,
        system: str = SYSTEM_INSTRUCTIONS,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Call the model with the function declarations and return its raw response."""

        payload: Dict[str, Any] = {
            "systemInstruction": {"parts": [{"text": system}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "tools": [{"functionDeclarations": [LOCATION_FUNCTION, LINE_FUNCTION]}],
            "generationConfig": {
                "temperature": temperature if temperature is not None else self.temperature,
                "thinkingConfig": {"thinkingBudget": 0},
            },
        }
        model_name = model or self.model

        _LOGGER.debug(
            "Calling generateContent model %s [prompt_version=%s]",
            model_name,
            prompt_version,
        )

        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key or _api_key(),
        }
        request_timeout = timeout if timeout is not None else self.timeout
        request_kwargs: Dict[str, Any] = {}
        if request_timeout is not None:
            request_kwargs["timeout"] = request_timeout

        response = httpx.post(
            f"{self.base_url.rstrip('/')}/models/{model_name}:generateContent",
            json=payload,
            headers=headers,
            **request_kwargs,
        )
        response.raise_for_status()
        return response.json()

    @staticmethod
    def extract_function_calls(response: Mapping[str, Any]) -> List[Union[FunctionCall, Dict[str, Any]]]:
        """Return the function calls of the first candidate, in order.

        Calls that do not fit :class:`FunctionCall` are passed through as raw
        mappings so batch ingestion can reject them one by one.
        """

        candidates = response.get("candidates") or []
        if not candidates:
            feedback = response.get("promptFeedback") or {}
            reason = feedback.get("blockReason") if isinstance(feedback, Mapping) else None
            if reason:
                raise LLMResponseError(f"The prompt was blocked by the model ({reason})")
            return []

        content = candidates[0].get("content") or {}
        parts = content.get("parts") or []
        calls: List[Union[FunctionCall, Dict[str, Any]]] = []
        for part in parts:
            if not isinstance(part, Mapping):
                continue
            function_call = part.get("functionCall")
            if not isinstance(function_call, Mapping):
                continue
            try:
                calls.append(FunctionCall.model_validate(dict(function_call)))
            except ValidationError as exc:
                _LOGGER.debug("Keeping malformed function call as received: %s", exc)
                calls.append(dict(function_call))
        return calls


_default_client = LLMClient()


def generate_function_calls(
    prompt: str, *, prompt_version: str = PROMPT_VERSION
) -> List[Union[FunctionCall, Dict[str, Any]]]:
    """Ask the shared client for a day plan and return its function calls."""

    response = _default_client.generate(prompt=prompt, prompt_version=prompt_version)
    return _default_client.extract_function_calls(response)


__all__ = [
    "LINE_FUNCTION",
    "LLMClient",
    "LLMResponseError",
    "LOCATION_FUNCTION",
    "PROMPT_VERSION",
    "SYSTEM_INSTRUCTIONS",
    "generate_function_calls",
]
