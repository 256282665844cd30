"""Thin wrapper around the Google Static Maps API used for PDF snapshots."""

from __future__ import annotations

import os
from typing import Dict, List, Sequence

import requests

from pawpath.schemas import Stop

_STATIC_MAP_URL = "https://maps.googleapis.com/maps/api/staticmap"
_DEFAULT_TIMEOUT = float(os.getenv("GOOGLE_MAPS_TIMEOUT", "10"))
_MAP_SIZE = "640x400"
_MAP_SCALE = 2
_MARKER_LABELS = "123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


class StaticMapError(RuntimeError):
    """Raised when the Static Maps API does not return an image."""


def _api_key() -> str:
    api_key = os.getenv("GOOGLE_MAPS_API_KEY")
    if not api_key:
        raise RuntimeError("GOOGLE_MAPS_API_KEY environment variable is not set")
    return api_key


def marker_params(stops: Sequence[Stop]) -> List[str]:
    """Return one ``markers`` parameter per stop with valid coordinates."""

    markers: List[str] = []
    for index, stop in enumerate(stop for stop in stops if stop.position.is_valid):
        label = _MARKER_LABELS[index] if index < len(_MARKER_LABELS) else "X"
        markers.append(f"color:blue|label:{label}|{stop.position.lat},{stop.position.lng}")
    return markers


def fetch_static_map(stops: Sequence[Stop]) -> bytes:
    """Fetch a JPEG snapshot of the stops, framed to fit every marker."""

    markers = marker_params(stops)
    if not markers:
        raise StaticMapError("There are no stops with coordinates to draw")

    params: Dict[str, object] = {
        "size": _MAP_SIZE,
        "scale": _MAP_SCALE,
        "format": "jpg",
        "markers": markers,
        "key": _api_key(),
    }
    response = requests.get(_STATIC_MAP_URL, params=params, timeout=_DEFAULT_TIMEOUT)
    response.raise_for_status()
    content_type = response.headers.get("Content-Type", "")
    if not content_type.startswith("image/"):
        message = response.text.strip() or content_type or "unknown response"
        raise StaticMapError(f"Static Maps API error: {message}")
    return response.content


__all__ = ["StaticMapError", "fetch_static_map", "marker_params"]
