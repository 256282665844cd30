"""Page geometry for the exported day plan.

The layout engine never draws anything. It walks the timeline entries with a
running vertical cursor (y grows downward from the top of the page, in
points) and emits :class:`Placement` instructions that a document renderer
turns into text, dots and connector lines.
"""

from __future__ import annotations

import logging
import textwrap
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pawpath.core.timeline import LegEntry, StopEntry, TimelineEntry, transport_label

_LOGGER = logging.getLogger(__name__)

# A4 portrait in points.
PAGE_WIDTH = 595.28
PAGE_HEIGHT = 841.89
MARGIN = 20.0
START_Y = 40.0

DOCUMENT_TITLE = "Your Doggy Day Plan"
TITLE_FONT_SIZE = 22
TITLE_SPACING = 25.0

BLOCK_MIN_HEIGHT = 40.0
BODY_FONT_SIZE = 10
LINE_HEIGHT_FACTOR = 1.15
# Average Helvetica glyph width as a fraction of the font size.
AVERAGE_CHAR_WIDTH = 0.5

DOT_RADIUS = 3.0
TIME_COLUMN_WIDTH = 45.0
CONTENT_INDENT = 15.0

STOP_DOT_COLOR: Tuple[int, int, int] = (33, 150, 243)
LEG_DOT_COLOR: Tuple[int, int, int] = (153, 153, 153)
ACCENT_COLOR: Tuple[int, int, int] = (33, 150, 243)
CONNECTOR_COLOR: Tuple[int, int, int] = (224, 224, 224)
CONNECTOR_WIDTH = 0.5


@dataclass(frozen=True)
class Placement:
    """One drawing instruction.

    ``kind`` is one of ``title``, ``text``, ``circle``, ``line`` or
    ``page_break``. ``page`` is 1-based within the itinerary pages.
    """

    kind: str
    x: float
    y: float
    page: int
    payload: Dict[str, Any] = field(default_factory=dict)


def wrap_text(text: str, width_points: float, font_size: float = BODY_FONT_SIZE) -> List[str]:
    """Wrap ``text`` to the number of characters that fit ``width_points``."""

    chars_per_line = max(1, int(width_points / (font_size * AVERAGE_CHAR_WIDTH)))
    lines: List[str] = []
    for paragraph in text.splitlines():
        lines.extend(textwrap.wrap(paragraph, width=chars_per_line) or [""])
    return lines


def _text_height(lines: Sequence[str], font_size: float = BODY_FONT_SIZE) -> float:
    return len(lines) * font_size * LINE_HEIGHT_FACTOR


def _body_text(entry: TimelineEntry) -> str:
    if isinstance(entry, StopEntry):
        return entry.stop.description
    return entry.leg.name or ""


def estimate_height(entry: TimelineEntry, content_width: float) -> float:
    """Height reserved for ``entry`` before deciding on a page break."""

    return BLOCK_MIN_HEIGHT + _text_height(wrap_text(_body_text(entry), content_width))


class _Cursor:
    def __init__(self, start_y: float) -> None:
        self.y = start_y
        self.page = 1
        self.page_blank = False
        self.placements: List[Placement] = []
        self.previous_start: Optional[float] = None

    def emit(self, kind: str, x: float, y: float, **payload: Any) -> None:
        self.placements.append(Placement(kind=kind, x=x, y=y, page=self.page, payload=payload))

    def page_break(self, margin: float) -> None:
        self.emit("page_break", 0.0, self.y)
        self.page += 1
        self.y = margin
        self.page_blank = True
        self.previous_start = None


def _place_stop(cursor: _Cursor, entry: StopEntry, columns: Dict[str, float], content_width: float) -> None:
    stop = entry.stop
    y = cursor.y
    cursor.emit("text", columns["time"], y, text=stop.time or "", size=12, bold=True)
    cursor.emit("circle", columns["connector"], y - 1, radius=DOT_RADIUS, color=STOP_DOT_COLOR)
    cursor.emit("text", columns["content"], y, text=stop.name, size=14, bold=True)

    description = wrap_text(stop.description, content_width)
    line_height = BODY_FONT_SIZE * LINE_HEIGHT_FACTOR
    for offset, line in enumerate(description):
        cursor.emit("text", columns["content"], y + 14 + offset * line_height, text=line, size=BODY_FONT_SIZE)

    duration_y = y + 14 + _text_height(description) + 6
    if stop.duration:
        cursor.emit("text", columns["content"], duration_y, text=stop.duration, size=9, color=ACCENT_COLOR)
    cursor.y = duration_y + 20


def _place_leg(cursor: _Cursor, entry: LegEntry, columns: Dict[str, float]) -> None:
    leg = entry.leg
    y = cursor.y
    cursor.emit("circle", columns["connector"], y - 1, radius=DOT_RADIUS, color=LEG_DOT_COLOR)
    cursor.emit("text", columns["content"], y, text=transport_label(leg.transport), size=12, bold=True)
    cursor.emit("text", columns["content"], y + 14, text=leg.name or "", size=BODY_FONT_SIZE)

    travel_time_y = y + 14 + 12
    if leg.travel_time:
        cursor.emit("text", columns["content"], travel_time_y, text=leg.travel_time, size=9, color=ACCENT_COLOR)
    cursor.y = travel_time_y + 20


def layout(
    entries: Sequence[TimelineEntry],
    page_height: float = PAGE_HEIGHT,
    margin: float = MARGIN,
    *,
    page_width: float = PAGE_WIDTH,
    start_y: float = START_Y,
    title: Optional[str] = DOCUMENT_TITLE,
) -> List[Placement]:
    """Compute placements, page breaks and connectors for ``entries``."""

    columns = {
        "time": margin,
        "connector": margin + TIME_COLUMN_WIDTH,
        "content": margin + TIME_COLUMN_WIDTH + CONTENT_INDENT,
    }
    content_width = max(1.0, page_width - columns["content"] - margin)
    degenerate = page_height - 2 * margin <= 0
    if degenerate:
        _LOGGER.warning(
            "Page height %.1f leaves no room inside margin %.1f; breaking before every entry",
            page_height,
            margin,
        )

    cursor = _Cursor(start_y)
    cursor.page_blank = not title
    if title:
        cursor.emit("title", margin, cursor.y, text=title, size=TITLE_FONT_SIZE, bold=False)
        cursor.y += TITLE_SPACING

    for entry in entries:
        height = estimate_height(entry, content_width)
        overflows = cursor.y + height > page_height - margin
        if degenerate or (overflows and not cursor.page_blank):
            cursor.page_break(margin)

        entry_start = cursor.y
        if cursor.previous_start is not None:
            cursor.emit(
                "line",
                columns["connector"],
                cursor.previous_start + DOT_RADIUS + 1,
                x2=columns["connector"],
                y2=entry_start - 12,
                color=CONNECTOR_COLOR,
                width=CONNECTOR_WIDTH,
            )

        if isinstance(entry, StopEntry):
            _place_stop(cursor, entry, columns, content_width)
        else:
            _place_leg(cursor, entry, columns)
        cursor.page_blank = False
        cursor.previous_start = entry_start

    return cursor.placements


def page_count(placements: Sequence[Placement]) -> int:
    return max((placement.page for placement in placements), default=1)


__all__ = [
    "DOCUMENT_TITLE",
    "MARGIN",
    "PAGE_HEIGHT",
    "PAGE_WIDTH",
    "Placement",
    "estimate_height",
    "layout",
    "page_count",
    "wrap_text",
]
