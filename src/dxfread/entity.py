from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

SUPPORTED_ENTITY_TYPES = (
    "LINE",
    "LWPOLYLINE",
    "POLYLINE",
    "CIRCLE",
    "ARC",
    "TEXT",
    "MTEXT",
    "DIMENSION",
    "SOLID",
    "POINT",
    "INSERT",
    "SPLINE",
    "ELLIPSE",
)

MTEXT_ATTACHMENT_POINTS = {
    1: ("top", "left"),
    2: ("top", "center"),
    3: ("top", "right"),
    4: ("middle", "left"),
    5: ("middle", "center"),
    6: ("middle", "right"),
    7: ("bottom", "left"),
    8: ("bottom", "center"),
    9: ("bottom", "right"),
}

_ANCHOR_KEYS = {
    "POINT": "position",
    "TEXT": "start_point",
    "MTEXT": "position",
    "INSERT": "position",
    "CIRCLE": "center",
    "ARC": "center",
    "ELLIPSE": "center",
}


@dataclass(frozen=True)
class Point:
    x: float
    y: float
    z: float | None = None

    @property
    def is_3d(self) -> bool:
        return self.z is not None

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, 0.0 if self.z is None else self.z)


@dataclass(frozen=True)
class Vertex(Point):
    bulge: float | None = None
    start_width: float | None = None
    end_width: float | None = None
    flags: int | None = None

    @property
    def is_arc_start(self) -> bool:
        return bool(self.bulge)


@dataclass(frozen=True)
class Entity:
    dxftype: str
    dxf: dict[str, Any]

    @property
    def handle(self) -> str | None:
        return self.dxf.get("handle")

    @property
    def layer(self) -> str | None:
        return self.dxf.get("layer")

    @property
    def line_type(self) -> str | None:
        return self.dxf.get("line_type")

    @property
    def color(self) -> int | None:
        return self.dxf.get("color")

    @property
    def color_index(self) -> int | None:
        return self.dxf.get("color_index")

    @property
    def closed(self) -> bool:
        return bool(self.dxf.get("closed", False))

    @property
    def dimension_style(self) -> int | None:
        """Low three bits of the DIMENSION type; 0 is a linear (rotated) dimension."""
        dimension_type = self.dxf.get("dimension_type")
        if dimension_type is None:
            return None
        return int(dimension_type) & 7

    @property
    def attachment(self) -> tuple[str, str] | None:
        return MTEXT_ATTACHMENT_POINTS.get(self.dxf.get("attachment_point"))

    def to_points(self) -> list[Point]:
        if self.dxftype in {"LINE", "LWPOLYLINE", "POLYLINE"}:
            points = list(self.dxf.get("vertices", []))
            # A closed polyline repeats its first vertex to close the loop.
            if self.closed and len(points) > 1 and not _same_position(points[0], points[-1]):
                points.append(points[0])
            return points
        if self.dxftype in _ANCHOR_KEYS:
            # Points dropped while parsing leave the anchor out.
            anchor = self.dxf.get(_ANCHOR_KEYS[self.dxftype])
            return [anchor] if anchor is not None else []
        if self.dxftype == "SOLID":
            return list(self.dxf.get("points", []))
        if self.dxftype == "SPLINE":
            return list(self.dxf.get("control_points") or self.dxf.get("fit_points") or [])
        if self.dxftype == "DIMENSION":
            points = [
                self.dxf[key]
                for key in ("linear_or_angular_point1", "linear_or_angular_point2")
                if key in self.dxf
            ]
            if not points and "middle_of_text" in self.dxf:
                points.append(self.dxf["middle_of_text"])
            return points
        raise NotImplementedError(f"to_points is not supported for {self.dxftype}")

    def plain_text(self) -> str:
        """Text content with MTEXT inline formatting codes removed."""
        text = self.dxf.get("text") or ""
        if self.dxftype != "MTEXT":
            return text
        return _decode_mtext_plain_text(text)


def _same_position(a: Point, b: Point) -> bool:
    return a.to_tuple() == b.to_tuple()


def _decode_mtext_plain_text(value: str) -> str:
    return _MTEXT_CODE.sub(_plain_text_for_code, value or "")


# Inline MTEXT codes: escapes, paragraph/space codes, toggles, stacked
# fractions and ;-terminated property codes. Bare braces only group.
_MTEXT_CODE = re.compile(
    r"\\(?:([\\{}])|([PX])|(~)|[LlOoKk]|S([^;]*);?|[ACcFfHhQqTtWwp][^;]*;?|(.))|[{}]",
    re.DOTALL,
)


def _plain_text_for_code(match: re.Match[str]) -> str:
    escaped, newline, space, stacked, other = match.groups()
    if escaped:
        return escaped
    if newline:
        return "\n"
    if space:
        return " "
    if stacked is not None:
        # \S1#2; and \S1^2; are drawn as 1/2.
        return re.sub(r"[#^]", "/", stacked)
    return other or ""
