"""Utilities for exporting the day plan to PDF."""

from __future__ import annotations

from io import BytesIO
from typing import Dict, List, Optional, Sequence, Tuple

from pawpath.core.layout import PAGE_HEIGHT, PAGE_WIDTH, Placement, layout, page_count
from pawpath.core.timeline import TimelineEntry

# Bezier control distance for a quarter circle.
_KAPPA = 0.5523

_JPEG_SOF_MARKERS = {0xC0, 0xC1, 0xC2, 0xC3, 0xC5, 0xC6, 0xC7, 0xC9, 0xCA, 0xCB, 0xCD, 0xCE, 0xCF}
_COLOR_SPACES = {1: "/DeviceGray", 3: "/DeviceRGB", 4: "/DeviceCMYK"}


def _pdf_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def _rgb(color: Sequence[int], operator: str) -> str:
    red, green, blue = (channel / 255 for channel in color)
    return f"{red:.3f} {green:.3f} {blue:.3f} {operator}"


def jpeg_info(data: bytes) -> Tuple[int, int, int]:
    """Return ``(width, height, components)`` read from a JPEG frame header."""

    if not data.startswith(b"\xff\xd8"):
        raise ValueError("Map image is not a JPEG")
    index = 2
    while index + 4 <= len(data):
        if data[index] != 0xFF:
            index += 1
            continue
        marker = data[index + 1]
        if marker == 0xFF:
            index += 1
            continue
        if marker in (0xD8, 0x01) or 0xD0 <= marker <= 0xD7:
            index += 2
            continue
        length = int.from_bytes(data[index + 2 : index + 4], "big")
        if marker in _JPEG_SOF_MARKERS and index + 10 <= len(data):
            height = int.from_bytes(data[index + 5 : index + 7], "big")
            width = int.from_bytes(data[index + 7 : index + 9], "big")
            components = data[index + 9]
            return width, height, components
        index += 2 + length
    raise ValueError("JPEG frame header not found")


def _text_op(placement: Placement, page_height: float) -> str:
    payload = placement.payload
    font = "F2" if payload.get("bold") else "F1"
    size = payload.get("size", 10)
    color = payload.get("color", (0, 0, 0))
    text = _pdf_escape(str(payload.get("text", "")))
    return (
        f"{_rgb(color, 'rg')} BT /{font} {size} Tf "
        f"{placement.x:.2f} {page_height - placement.y:.2f} Td ({text}) Tj ET"
    )


def _circle_op(placement: Placement, page_height: float) -> str:
    radius = float(placement.payload.get("radius", 3))
    color = placement.payload.get("color", (0, 0, 0))
    x = placement.x
    y = page_height - placement.y
    c = radius * _KAPPA
    return "\n".join(
        [
            _rgb(color, "rg"),
            f"{x + radius:.2f} {y:.2f} m",
            f"{x + radius:.2f} {y + c:.2f} {x + c:.2f} {y + radius:.2f} {x:.2f} {y + radius:.2f} c",
            f"{x - c:.2f} {y + radius:.2f} {x - radius:.2f} {y + c:.2f} {x - radius:.2f} {y:.2f} c",
            f"{x - radius:.2f} {y - c:.2f} {x - c:.2f} {y - radius:.2f} {x:.2f} {y - radius:.2f} c",
            f"{x + c:.2f} {y - radius:.2f} {x + radius:.2f} {y - c:.2f} {x + radius:.2f} {y:.2f} c",
            "f",
        ]
    )


def _line_op(placement: Placement, page_height: float) -> str:
    payload = placement.payload
    color = payload.get("color", (0, 0, 0))
    width = payload.get("width", 1)
    x2 = float(payload.get("x2", placement.x))
    y2 = float(payload.get("y2", placement.y))
    return (
        f"{_rgb(color, 'RG')} {width} w "
        f"{placement.x:.2f} {page_height - placement.y:.2f} m "
        f"{x2:.2f} {page_height - y2:.2f} l S"
    )


_OPERATORS = {
    "title": _text_op,
    "text": _text_op,
    "circle": _circle_op,
    "line": _line_op,
}


def render_pdf(
    placements: Sequence[Placement],
    *,
    map_image: Optional[bytes] = None,
    page_width: float = PAGE_WIDTH,
    page_height: float = PAGE_HEIGHT,
) -> bytes:
    """Draw ``placements`` into a PDF, with ``map_image`` (JPEG) on its own first page."""

    buffer = BytesIO()
    objects: List[bytes] = []

    def add_object(payload: bytes) -> int:
        objects.append(payload)
        return len(objects)

    pages_index = add_object(b"")
    font_regular_index = add_object(b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica /Name /F1 /Encoding /WinAnsiEncoding >>")
    font_bold_index = add_object(b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica-Bold /Name /F2 /Encoding /WinAnsiEncoding >>")
    fonts = f"/Font << /F1 {font_regular_index} 0 R /F2 {font_bold_index} 0 R >>"

    page_streams: List[Tuple[str, str]] = []

    if map_image is not None:
        width, height, components = jpeg_info(map_image)
        color_space = _COLOR_SPACES.get(components, "/DeviceRGB")
        image_index = add_object(
            (
                f"<< /Type /XObject /Subtype /Image /Width {width} /Height {height} "
                f"/ColorSpace {color_space} /BitsPerComponent 8 /Filter /DCTDecode "
                f"/Length {len(map_image)} >>\nstream\n"
            ).encode("latin-1")
            + map_image
            + b"\nendstream"
        )
        drawn_height = page_width * height / width
        page_streams.append(
            (
                f"q {page_width:.2f} 0 0 {drawn_height:.2f} 0 {page_height - drawn_height:.2f} cm /Im1 Do Q",
                f"<< {fonts} /XObject << /Im1 {image_index} 0 R >> >>",
            )
        )

    has_content = any(placement.kind != "page_break" for placement in placements)
    if has_content or not page_streams:
        grouped: Dict[int, List[str]] = {}
        for placement in placements:
            operator = _OPERATORS.get(placement.kind)
            if operator is None:
                continue
            grouped.setdefault(placement.page, []).append(operator(placement, page_height))
        for page_number in range(1, page_count(placements) + 1):
            page_streams.append(("\n".join(grouped.get(page_number, [])), f"<< {fonts} >>"))

    page_indices: List[int] = []
    for content, resources in page_streams:
        stream = content.encode("cp1252", errors="replace")
        contents_index = add_object(
            f"<< /Length {len(stream)} >>\nstream\n".encode("latin-1") + stream + b"\nendstream"
        )
        page_indices.append(
            add_object(
                (
                    f"<< /Type /Page /Parent {pages_index} 0 R "
                    f"/MediaBox [0 0 {page_width:.2f} {page_height:.2f}] "
                    f"/Contents {contents_index} 0 R /Resources {resources} >>"
                ).encode("latin-1")
            )
        )

    kids = " ".join(f"{index} 0 R" for index in page_indices)
    objects[pages_index - 1] = f"<< /Type /Pages /Count {len(page_indices)} /Kids [{kids}] >>".encode("latin-1")
    catalog_index = add_object(f"<< /Type /Catalog /Pages {pages_index} 0 R >>".encode("latin-1"))

    buffer.write(b"%PDF-1.4\n")
    offsets: List[int] = [0]
    for index, payload in enumerate(objects, start=1):
        offsets.append(buffer.tell())
        buffer.write(f"{index} 0 obj\n".encode("latin-1"))
        buffer.write(payload)
        buffer.write(b"\nendobj\n")
    xref_position = buffer.tell()
    buffer.write(f"xref\n0 {len(objects) + 1}\n".encode("latin-1"))
    buffer.write(b"0000000000 65535 f \n")
    for offset in offsets[1:]:
        buffer.write(f"{offset:010d} 00000 n \n".encode("latin-1"))
    buffer.write(b"trailer\n")
    buffer.write(f"<< /Size {len(objects) + 1} /Root {catalog_index} 0 R >>\n".encode("latin-1"))
    buffer.write(f"startxref\n{xref_position}\n%%EOF".encode("latin-1"))
    return buffer.getvalue()


def day_plan_to_pdf(entries: Sequence[TimelineEntry], *, map_image: Optional[bytes] = None) -> bytes:
    """Lay out the timeline and render it, map snapshot first."""

    return render_pdf(layout(entries) if entries else [], map_image=map_image)


__all__ = ["day_plan_to_pdf", "jpeg_info", "render_pdf"]
