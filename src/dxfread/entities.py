"""Sub-parsers for the entity records of the ENTITIES and BLOCKS sections.

Every parser is called with the cursor on the record's ``0/<TYPE>`` group
and returns with the cursor on the next code-0 group, which it does not
consume. Parsers never raise for missing or malformed content: a field that
cannot be read completely is left out of ``Entity.dxf``.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable

from .colors import get_acad_color, is_inherited_color_index
from .entity import MTEXT_ATTACHMENT_POINTS, Entity, Point, Vertex
from .scanner import GroupCursor

logger = logging.getLogger(__name__)

EntityParser = Callable[[GroupCursor], Entity]
# Returns True when it consumed the current group.
GroupHandler = Callable[[GroupCursor, dict[str, Any]], bool]

TAU = 2.0 * math.pi

COMMON_PROPERTY_KEYS = {
    5: "handle",
    6: "line_type",
    8: "layer",
    48: "line_type_scale",
    330: "owner_handle",
    370: "lineweight",
}


def parse_point(cursor: GroupCursor) -> Point | None:
    """Read a point whose X is the current group (code N) from N, N+10 and optional N+20.

    Returns None, with the X group consumed, when the Y group is missing.
    """
    code = cursor.code
    x = cursor.value
    group = cursor.advance()
    if group.code != code + 10:
        logger.warning(
            "expected group %d after point group %d but got %s, dropping point",
            code + 10,
            code,
            group,
        )
        return None
    y = group.value

    group = cursor.advance()
    if group.code != code + 20:
        return Point(x, y)
    z = group.value
    cursor.advance()
    return Point(x, y, z)


def apply_common_property(cursor: GroupCursor, dxf: dict[str, Any]) -> None:
    """Store a property shared by all entities; any other group is ignored.

    Always consumes exactly one group.
    """
    code = cursor.code
    value = cursor.value
    key = COMMON_PROPERTY_KEYS.get(code)
    if key is not None:
        dxf[key] = value
    elif code == 62:
        # 0 is BYBLOCK, 256 is BYLAYER.
        dxf["color_index"] = value
        if "true_color" not in dxf and not is_inherited_color_index(abs(value)):
            color = get_acad_color(abs(value))
            if color is not None:
                dxf["color"] = color
    elif code == 420:
        dxf["true_color"] = value
        dxf["color"] = value
    elif code == 60:
        dxf["visible"] = value == 0
    elif code == 67:
        dxf["in_paper_space"] = value == 1
    cursor.advance()


def _read_fields(
    cursor: GroupCursor,
    points: dict[int, str],
    scalars: dict[int, str],
    handler: GroupHandler | None = None,
) -> dict[str, Any]:
    dxf: dict[str, Any] = {}
    cursor.advance()
    while cursor.code != 0:
        code = cursor.code
        if code in points:
            point = parse_point(cursor)
            if point is not None:
                dxf[points[code]] = point
        elif code in scalars:
            dxf[scalars[code]] = cursor.value
            cursor.advance()
        elif handler is not None and handler(cursor, dxf):
            continue
        else:
            apply_common_property(cursor, dxf)
    return dxf


def _as_vertex(point: Point, **kwargs: Any) -> Vertex:
    return Vertex(point.x, point.y, point.z, **kwargs)


def arc_angle_length(start_angle: float, end_angle: float) -> float:
    """Counter-clockwise sweep from start to end, in [0, 2*pi)."""
    return (end_angle - start_angle) % TAU


def parse_line(cursor: GroupCursor) -> Entity:
    dxf = _read_fields(
        cursor,
        {10: "start", 11: "end", 210: "extrusion_direction"},
        {39: "thickness"},
    )
    vertices = [_as_vertex(dxf.pop(key)) for key in ("start", "end") if key in dxf]
    dxf["vertices"] = vertices
    return Entity("LINE", dxf)


def parse_lwpolyline(cursor: GroupCursor) -> Entity:
    dxf: dict[str, Any] = {}
    vertices: list[dict[str, Any]] = []
    current: dict[str, Any] | None = None
    cursor.advance()
    while cursor.code != 0:
        code = cursor.code
        if code == 10:
            point = parse_point(cursor)
            current = None
            if point is not None:
                current = {"x": point.x, "y": point.y, "z": point.z}
                vertices.append(current)
        elif code in (40, 41, 42) and current is not None:
            value = cursor.value
            if code == 40:
                current["start_width"] = value
            elif code == 41:
                current["end_width"] = value
            elif value != 0:
                # Bulge of the segment from this vertex to the next.
                current["bulge"] = value
            cursor.advance()
        elif code == 90:
            dxf["declared_vertex_count"] = cursor.value
            cursor.advance()
        elif code == 70:
            dxf["flags"] = cursor.value
            cursor.advance()
        elif code == 43:
            dxf["constant_width"] = cursor.value
            cursor.advance()
        elif code == 38:
            dxf["elevation"] = cursor.value
            cursor.advance()
        elif code == 39:
            dxf["thickness"] = cursor.value
            cursor.advance()
        elif code == 210:
            point = parse_point(cursor)
            if point is not None:
                dxf["extrusion_direction"] = point
        else:
            apply_common_property(cursor, dxf)

    declared = dxf.get("declared_vertex_count")
    if declared is not None and declared != len(vertices):
        logger.warning(
            "LWPOLYLINE %s declares %d vertices but %d were read",
            dxf.get("handle", "?"),
            declared,
            len(vertices),
        )
    dxf["vertices"] = [Vertex(**vertex) for vertex in vertices]
    dxf["closed"] = bool(dxf.get("flags", 0) & 1)
    return Entity("LWPOLYLINE", dxf)


def polyline_flags_info(flags: int) -> dict[str, bool]:
    value = int(flags)
    return {
        "closed": bool(value & 0x01),
        "curve_fit": bool(value & 0x02),
        "spline_fit": bool(value & 0x04),
        "is_3d_polyline": bool(value & 0x08),
        "is_3d_mesh": bool(value & 0x10),
        "is_closed_mesh": bool(value & 0x20),
        "is_polyface_mesh": bool(value & 0x40),
        "continuous_linetype": bool(value & 0x80),
    }


def parse_polyline(cursor: GroupCursor) -> Entity:
    """POLYLINE header followed by its VERTEX records and SEQEND."""
    dxf = _read_fields(
        cursor,
        {10: "elevation_point", 210: "extrusion_direction"},
        {
            39: "thickness",
            40: "default_start_width",
            41: "default_end_width",
            66: "vertices_follow",
            70: "flags",
            71: "mesh_m_vertex_count",
            72: "mesh_n_vertex_count",
            75: "curve_type",
        },
    )
    dxf.update(polyline_flags_info(dxf.get("flags", 0)))

    vertices: list[Vertex] = []
    while cursor.is_(0, "VERTEX"):
        vertex = _parse_vertex(cursor)
        if vertex is not None:
            vertices.append(vertex)
    if cursor.is_(0, "SEQEND"):
        cursor.skip_record()
    elif dxf.get("vertices_follow"):
        logger.warning("POLYLINE %s is not terminated by SEQEND", dxf.get("handle", "?"))
    dxf["vertices"] = vertices
    return Entity("POLYLINE", dxf)


def _parse_vertex(cursor: GroupCursor) -> Vertex | None:
    point: Point | None = None
    attrs: dict[str, Any] = {}
    cursor.advance()
    while cursor.code != 0:
        code = cursor.code
        if code == 10:
            point = parse_point(cursor)
            continue
        if code == 40:
            attrs["start_width"] = cursor.value
        elif code == 41:
            attrs["end_width"] = cursor.value
        elif code == 42:
            if cursor.value != 0:
                attrs["bulge"] = cursor.value
        elif code == 70:
            attrs["flags"] = cursor.value
        cursor.advance()

    flags = attrs.get("flags", 0)
    if flags & 0x80 and not flags & 0x40:
        # Polyface face record: vertex indices, not a position.
        return None
    if point is None:
        logger.warning("dropping VERTEX without a position")
        return None
    return _as_vertex(point, **attrs)


def parse_circle(cursor: GroupCursor) -> Entity:
    """CIRCLE and ARC. Angles are stored in radians."""
    dxftype = str(cursor.value)
    dxf = _read_fields(
        cursor,
        {10: "center", 210: "extrusion_direction"},
        {39: "thickness", 40: "radius", 50: "start_angle", 51: "end_angle"},
    )
    for key in ("start_angle", "end_angle"):
        if key in dxf:
            dxf[key] = math.radians(dxf[key])
    if "start_angle" in dxf and "end_angle" in dxf:
        dxf["angle_length"] = arc_angle_length(dxf["start_angle"], dxf["end_angle"])
    return Entity(dxftype, dxf)


def parse_text(cursor: GroupCursor) -> Entity:
    dxf = _read_fields(
        cursor,
        # 72/73 alignment only applies when the second alignment point (11) is given.
        {10: "start_point", 11: "end_point", 210: "extrusion_direction"},
        {
            1: "text",
            7: "style",
            39: "thickness",
            40: "text_height",
            41: "x_scale",
            50: "rotation",
            51: "oblique_angle",
            71: "generation_flags",
            72: "halign",
            73: "valign",
        },
    )
    return Entity("TEXT", dxf)


def _collect_mtext_fragment(cursor: GroupCursor, dxf: dict[str, Any]) -> bool:
    if cursor.code not in (1, 3):
        return False
    dxf.setdefault("_fragments", []).append(str(cursor.value))
    cursor.advance()
    return True


def parse_mtext(cursor: GroupCursor) -> Entity:
    dxf = _read_fields(
        cursor,
        {10: "position", 11: "direction_vector", 210: "extrusion_direction"},
        {
            7: "style",
            40: "height",
            41: "width",
            44: "line_spacing_factor",
            50: "rotation",
            71: "attachment_point",
            72: "drawing_direction",
        },
        _collect_mtext_fragment,
    )
    # Code 3 carries 250-character chunks, code 1 the final one.
    dxf["text"] = "".join(dxf.pop("_fragments", []))
    attachment_point = dxf.get("attachment_point")
    if attachment_point is not None and attachment_point not in MTEXT_ATTACHMENT_POINTS:
        logger.warning("MTEXT attachment point %r is out of range, ignoring it", attachment_point)
        del dxf["attachment_point"]
    return Entity("MTEXT", dxf)


def parse_dimension(cursor: GroupCursor) -> Entity:
    dxf = _read_fields(
        cursor,
        {
            10: "anchor_point",
            11: "middle_of_text",
            12: "insertion_point",
            13: "linear_or_angular_point1",
            14: "linear_or_angular_point2",
            15: "diameter_or_radius_point",
            16: "arc_point",
            210: "extrusion_direction",
        },
        {
            1: "text",
            2: "block",
            3: "style_name",
            42: "actual_measurement",
            50: "angle",
            53: "text_rotation",
            70: "dimension_type",
            71: "attachment_point",
        },
    )
    return Entity("DIMENSION", dxf)


def parse_solid(cursor: GroupCursor) -> Entity:
    corner_keys = {10: "corner1", 11: "corner2", 12: "corner3", 13: "corner4"}
    dxf = _read_fields(
        cursor,
        {**corner_keys, 210: "extrusion_direction"},
        {39: "thickness"},
    )
    dxf["points"] = [dxf.pop(key) for key in corner_keys.values() if key in dxf]
    return Entity("SOLID", dxf)


def parse_point_entity(cursor: GroupCursor) -> Entity:
    dxf = _read_fields(
        cursor,
        {10: "position", 210: "extrusion_direction"},
        {39: "thickness", 50: "x_axis_angle"},
    )
    return Entity("POINT", dxf)


def parse_insert(cursor: GroupCursor) -> Entity:
    dxf = _read_fields(
        cursor,
        {10: "position", 210: "extrusion_direction"},
        {
            2: "name",
            41: "x_scale",
            42: "y_scale",
            43: "z_scale",
            44: "column_spacing",
            45: "row_spacing",
            50: "rotation",
            66: "attributes_follow",
            70: "column_count",
            71: "row_count",
        },
    )
    if dxf.get("attributes_follow"):
        skipped = 0
        while cursor.is_(0, "ATTRIB"):
            cursor.skip_record()
            skipped += 1
        if cursor.is_(0, "SEQEND"):
            cursor.skip_record()
        if skipped:
            logger.info("skipped %d ATTRIB records of INSERT %r", skipped, dxf.get("name"))
    return Entity("INSERT", dxf)


def _collect_spline_group(cursor: GroupCursor, dxf: dict[str, Any]) -> bool:
    code = cursor.code
    if code == 10:
        key = "control_points"
    elif code == 11:
        key = "fit_points"
    elif code == 40:
        dxf.setdefault("knot_values", []).append(cursor.value)
        cursor.advance()
        return True
    elif code == 41:
        dxf.setdefault("weights", []).append(cursor.value)
        cursor.advance()
        return True
    else:
        return False
    point = parse_point(cursor)
    if point is not None:
        dxf.setdefault(key, []).append(point)
    return True


def parse_spline(cursor: GroupCursor) -> Entity:
    dxf = _read_fields(
        cursor,
        {12: "start_tangent", 13: "end_tangent", 210: "normal_vector"},
        {
            42: "knot_tolerance",
            43: "control_point_tolerance",
            44: "fit_tolerance",
            70: "flags",
            71: "degree_of_spline_curve",
            72: "number_of_knots",
            73: "number_of_control_points",
            74: "number_of_fit_points",
        },
        _collect_spline_group,
    )
    flags = dxf.get("flags", 0)
    dxf.update(
        {
            "closed": bool(flags & 1),
            "periodic": bool(flags & 2),
            "rational": bool(flags & 4),
            "planar": bool(flags & 8),
            "linear": bool(flags & 16),
        }
    )
    for count_key, list_key in (
        ("number_of_knots", "knot_values"),
        ("number_of_control_points", "control_points"),
        ("number_of_fit_points", "fit_points"),
    ):
        declared = dxf.get(count_key)
        actual = len(dxf.get(list_key, []))
        if declared is not None and declared != actual:
            logger.warning(
                "SPLINE %s declares %d %s but %d were read",
                dxf.get("handle", "?"),
                declared,
                list_key.replace("_", " "),
                actual,
            )
    return Entity("SPLINE", dxf)


def parse_ellipse(cursor: GroupCursor) -> Entity:
    """ELLIPSE; start/end are parameters in radians, not angles."""
    dxf = _read_fields(
        cursor,
        {10: "center", 11: "major_axis_end_point", 210: "extrusion_direction"},
        {40: "axis_ratio", 41: "start_angle", 42: "end_angle"},
    )
    return Entity("ELLIPSE", dxf)


ENTITY_PARSERS: dict[str, EntityParser] = {
    "LINE": parse_line,
    "LWPOLYLINE": parse_lwpolyline,
    "POLYLINE": parse_polyline,
    "CIRCLE": parse_circle,
    "ARC": parse_circle,
    "TEXT": parse_text,
    "MTEXT": parse_mtext,
    "DIMENSION": parse_dimension,
    "SOLID": parse_solid,
    "POINT": parse_point_entity,
    "INSERT": parse_insert,
    "SPLINE": parse_spline,
    "ELLIPSE": parse_ellipse,
}


def parse_entity(cursor: GroupCursor) -> Entity | None:
    """Parse the record at the cursor, or skip it when its type is unsupported."""
    dxftype = cursor.value
    parser = ENTITY_PARSERS.get(dxftype) if isinstance(dxftype, str) else None
    if parser is None:
        logger.warning("unsupported entity %r, skipping", dxftype)
        cursor.skip_record()
        return None
    return parser(cursor)
