from __future__ import annotations

import logging
import math

import pytest

from dxfread import Point, Vertex, parse
from dxfread.colors import ACI_COLORS
from dxfread.entities import arc_angle_length, polyline_flags_info
from tests._dxf_helpers import angle_close, entities_document, line_groups


def _single_entity(*groups):
    doc = parse(entities_document(*groups))
    assert len(doc.entities) == 1
    return doc.entities[0]


def test_line_vertices_and_common_properties() -> None:
    line = _single_entity(
        (0, "LINE"),
        (5, "2A"),
        (8, "WALLS"),
        (6, "DASHED"),
        (62, 1),
        (10, 0.0),
        (20, 0.0),
        (30, 0.0),
        (11, 10.0),
        (21, 5.0),
        (31, 0.0),
    )

    assert line.dxftype == "LINE"
    assert line.handle == "2A"
    assert line.layer == "WALLS"
    assert line.line_type == "DASHED"
    assert line.color_index == 1
    assert line.color == ACI_COLORS[1]
    assert line.dxf["vertices"] == [Vertex(0.0, 0.0, 0.0), Vertex(10.0, 5.0, 0.0)]


def test_true_color_wins_over_color_index() -> None:
    line = _single_entity(*line_groups((0, 0), (1, 1)), (420, 0x123456), (62, 3))

    assert line.color == 0x123456
    assert line.color_index == 3


@pytest.mark.parametrize("index", [0, 256])
def test_inherited_color_index_leaves_color_unset(index: int) -> None:
    line = _single_entity(*line_groups((0, 0), (1, 1)), (62, index))

    assert line.color_index == index
    assert line.color is None


def test_arc_angles_are_radians_with_wrapped_sweep() -> None:
    arc = _single_entity(
        (0, "ARC"),
        (8, "0"),
        (10, 1.0),
        (20, 2.0),
        (40, 3.0),
        (50, 350.0),
        (51, 10.0),
    )

    assert arc.dxftype == "ARC"
    assert arc.dxf["center"] == Point(1.0, 2.0)
    assert arc.dxf["radius"] == 3.0
    assert angle_close(arc.dxf["start_angle"], 350.0)
    assert angle_close(arc.dxf["end_angle"], 10.0)
    assert angle_close(arc.dxf["angle_length"], 20.0)


def test_arc_angle_length_is_never_negative_or_full_turn() -> None:
    assert arc_angle_length(0.0, math.pi) == pytest.approx(math.pi)
    assert arc_angle_length(math.pi, 0.0) == pytest.approx(math.pi)
    assert arc_angle_length(1.0, 1.0) == 0.0
    assert arc_angle_length(0.0, 2.0 * math.pi) == pytest.approx(0.0)


def test_circle_has_no_angles() -> None:
    circle = _single_entity((0, "CIRCLE"), (10, 5.0), (20, 5.0), (30, 0.0), (40, 2.5), (39, 1.0))

    assert circle.dxftype == "CIRCLE"
    assert circle.dxf["center"] == Point(5.0, 5.0, 0.0)
    assert circle.dxf["radius"] == 2.5
    assert circle.dxf["thickness"] == 1.0
    assert "angle_length" not in circle.dxf
    assert circle.to_points() == [Point(5.0, 5.0, 0.0)]


def test_closed_lwpolyline_points_close_the_loop() -> None:
    polyline = _single_entity(
        (0, "LWPOLYLINE"),
        (8, "0"),
        (90, 3),
        (70, 1),
        (10, 0.0),
        (20, 0.0),
        (10, 10.0),
        (20, 0.0),
        (42, 0.5),
        (10, 10.0),
        (20, 10.0),
    )

    assert polyline.closed is True
    vertices = polyline.dxf["vertices"]
    assert len(vertices) == 3
    assert vertices[0].bulge is None
    assert vertices[1].bulge == 0.5
    assert vertices[1].is_arc_start

    points = polyline.to_points()
    assert len(points) == 4
    assert points[0] == points[-1]


def test_closed_lwpolyline_last_bulge_shapes_closing_segment() -> None:
    polyline = _single_entity(
        (0, "LWPOLYLINE"),
        (90, 3),
        (70, 1),
        (10, 0.0),
        (20, 0.0),
        (10, 10.0),
        (20, 0.0),
        (10, 10.0),
        (20, 10.0),
        (42, 1.0),
    )

    vertices = polyline.dxf["vertices"]
    assert len(vertices) == 3
    assert vertices[-1].bulge == 1.0

    points = polyline.to_points()
    assert len(points) == 4
    # The segment from the last vertex back to the first is the bulged one.
    assert points[-2] == Vertex(10.0, 10.0, bulge=1.0)
    assert points[-1] == Vertex(0.0, 0.0)


def test_closed_lwpolyline_already_repeating_first_vertex() -> None:
    polyline = _single_entity(
        (0, "LWPOLYLINE"),
        (70, 1),
        (10, 0.0),
        (20, 0.0),
        (10, 5.0),
        (20, 0.0),
        (10, 0.0),
        (20, 0.0),
    )

    assert len(polyline.to_points()) == 3


def test_open_lwpolyline_is_not_closed() -> None:
    polyline = _single_entity(
        (0, "LWPOLYLINE"),
        (90, 2),
        (70, 0),
        (43, 0.25),
        (10, 0.0),
        (20, 0.0),
        (40, 1.0),
        (41, 2.0),
        (10, 5.0),
        (20, 0.0),
    )

    assert polyline.closed is False
    assert polyline.dxf["constant_width"] == 0.25
    assert polyline.dxf["vertices"][0] == Vertex(0.0, 0.0, start_width=1.0, end_width=2.0)
    assert len(polyline.to_points()) == 2


def test_lwpolyline_vertex_count_mismatch_warns(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="dxfread.entities"):
        polyline = _single_entity(
            (0, "LWPOLYLINE"),
            (90, 3),
            (10, 0.0),
            (20, 0.0),
            (10, 1.0),
            (20, 1.0),
        )

    assert len(polyline.dxf["vertices"]) == 2
    assert "declares 3 vertices but 2 were read" in caplog.text


def test_polyline_reads_vertices_until_seqend() -> None:
    doc = parse(
        entities_document(
            (0, "POLYLINE"),
            (8, "0"),
            (66, 1),
            (10, 0.0),
            (20, 0.0),
            (30, 0.0),
            (70, 9),
            (0, "VERTEX"),
            (10, 1.0),
            (20, 2.0),
            (30, 3.0),
            (0, "VERTEX"),
            (10, 4.0),
            (20, 5.0),
            (30, 6.0),
            (42, -1.0),
            (0, "SEQEND"),
            (8, "0"),
            *line_groups((0, 0), (1, 1)),
        )
    )

    assert [entity.dxftype for entity in doc.entities] == ["POLYLINE", "LINE"]
    polyline = doc.entities[0]
    assert polyline.closed is True
    assert polyline.dxf["is_3d_polyline"] is True
    assert polyline.dxf["vertices"] == [
        Vertex(1.0, 2.0, 3.0),
        Vertex(4.0, 5.0, 6.0, bulge=-1.0),
    ]
    assert polyline.to_points()[-1] == Vertex(1.0, 2.0, 3.0)


def test_polyface_face_records_are_not_vertices() -> None:
    polyline = _single_entity(
        (0, "POLYLINE"),
        (66, 1),
        (70, 64),
        (0, "VERTEX"),
        (10, 0.0),
        (20, 0.0),
        (30, 0.0),
        (70, 192),
        (0, "VERTEX"),
        (10, 0.0),
        (20, 0.0),
        (30, 0.0),
        (70, 128),
        (71, 1),
        (72, 2),
        (73, 3),
        (0, "SEQEND"),
    )

    assert polyline.dxf["is_polyface_mesh"] is True
    assert polyline.dxf["vertices"] == [Vertex(0.0, 0.0, 0.0, flags=192)]


def test_polyline_flags_info() -> None:
    info = polyline_flags_info(0x01 | 0x08)
    assert info["closed"] is True
    assert info["is_3d_polyline"] is True
    assert info["is_polyface_mesh"] is False


def test_unsupported_entity_is_skipped(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="dxfread.entities"):
        doc = parse(
            entities_document(
                *line_groups((0, 0), (1, 0)),
                (0, "HATCH"),
                (8, "0"),
                (10, 0.0),
                (20, 0.0),
                (2, "SOLID"),
                *line_groups((1, 0), (2, 0)),
            )
        )

    assert [entity.dxftype for entity in doc.entities] == ["LINE", "LINE"]
    assert "HATCH" in caplog.text


def test_point_with_thickness() -> None:
    point = _single_entity((0, "POINT"), (10, 1.0), (20, 2.0), (30, 3.0), (39, 4.0))

    assert point.dxf["position"] == Point(1.0, 2.0, 3.0)
    assert point.dxf["position"].is_3d
    assert point.dxf["thickness"] == 4.0
    assert point.to_points() == [Point(1.0, 2.0, 3.0)]


def test_point_missing_y_is_dropped(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="dxfread.entities"):
        point = _single_entity((0, "POINT"), (10, 1.0), (39, 4.0))

    assert "position" not in point.dxf
    assert point.dxf["thickness"] == 4.0
    assert "expected group 20" in caplog.text
    assert point.to_points() == []


@pytest.mark.parametrize(
    "groups",
    [
        [(0, "TEXT"), (10, 1.0), (1, "no y")],
        [(0, "CIRCLE"), (10, 1.0), (40, 1.0)],
        [(0, "INSERT"), (2, "DOOR")],
        [(0, "MTEXT"), (1, "text only")],
        [(0, "DIMENSION"), (2, "*D1"), (70, 0)],
    ],
)
def test_to_points_without_anchor_is_empty(groups) -> None:
    entity = _single_entity(*groups)

    assert entity.to_points() == []


def test_text_entity() -> None:
    text = _single_entity(
        (0, "TEXT"),
        (8, "NOTES"),
        (10, 1.0),
        (20, 1.0),
        (40, 2.5),
        (1, "Hello"),
        (50, 30.0),
        (72, 1),
        (11, 5.0),
        (21, 1.0),
    )

    assert text.dxf["text"] == "Hello"
    assert text.dxf["text_height"] == 2.5
    assert text.dxf["rotation"] == 30.0
    assert text.dxf["halign"] == 1
    assert text.dxf["end_point"] == Point(5.0, 1.0)
    assert text.plain_text() == "Hello"
    assert text.to_points() == [Point(1.0, 1.0)]


def test_mtext_concatenates_chunks_in_order() -> None:
    mtext = _single_entity(
        (0, "MTEXT"),
        (10, 0.0),
        (20, 0.0),
        (40, 2.0),
        (71, 7),
        (3, "first-chunk,"),
        (3, "second-chunk,"),
        (1, "{\\fArial|b0;last}\\Pline"),
    )

    assert mtext.dxf["text"] == "first-chunk,second-chunk,{\\fArial|b0;last}\\Pline"
    assert mtext.plain_text() == "first-chunk,second-chunk,last\nline"
    assert mtext.attachment == ("bottom", "left")


def test_mtext_attachment_point_out_of_range_is_dropped(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="dxfread.entities"):
        mtext = _single_entity((0, "MTEXT"), (10, 0.0), (20, 0.0), (71, 12), (1, "x"))

    assert "attachment_point" not in mtext.dxf
    assert mtext.attachment is None
    assert "out of range" in caplog.text


@pytest.mark.parametrize(
    ("raw", "plain"),
    [
        ("\\{braces\\} and \\\\", "{braces} and \\"),
        ("non\\~breaking", "non breaking"),
        ("\\Lunder\\l\\Oover\\o", "underover"),
        ("\\H2.5x;big\\C1;red", "bigred"),
        ("\\U+00B0 trailing\\", "U+00B0 trailing\\"),
        ("\\S3^4;", "3/4"),
    ],
)
def test_mtext_plain_text_codes(raw: str, plain: str) -> None:
    mtext = _single_entity((0, "MTEXT"), (10, 0.0), (20, 0.0), (1, raw))

    assert mtext.plain_text() == plain


def test_mtext_stacked_fraction_plain_text() -> None:
    mtext = _single_entity((0, "MTEXT"), (10, 0.0), (20, 0.0), (1, "1\\S1#2; in"))

    assert mtext.plain_text() == "11/2 in"


def test_dimension_style_and_block() -> None:
    dimension = _single_entity(
        (0, "DIMENSION"),
        (2, "*D1"),
        (10, 0.0),
        (20, 5.0),
        (11, 5.0),
        (21, 6.0),
        (70, 32 | 1),
        (13, 0.0),
        (23, 0.0),
        (14, 10.0),
        (24, 0.0),
        (42, 10.0),
    )

    assert dimension.dxf["block"] == "*D1"
    assert dimension.dimension_style == 1
    assert dimension.dxf["actual_measurement"] == 10.0
    assert dimension.to_points() == [Point(0.0, 0.0), Point(10.0, 0.0)]


def test_dimension_without_block_warns(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="dxfread.parser"):
        dimension = _single_entity((0, "DIMENSION"), (70, 0), (11, 1.0), (21, 1.0))

    assert dimension.dimension_style == 0
    assert "no block reference" in caplog.text
    assert dimension.to_points() == [Point(1.0, 1.0)]


def test_solid_corners() -> None:
    solid = _single_entity(
        (0, "SOLID"),
        (10, 0.0),
        (20, 0.0),
        (11, 1.0),
        (21, 0.0),
        (12, 0.0),
        (22, 1.0),
        (13, 1.0),
        (23, 1.0),
    )

    assert solid.dxf["points"] == [Point(0.0, 0.0), Point(1.0, 0.0), Point(0.0, 1.0), Point(1.0, 1.0)]
    assert solid.to_points() == solid.dxf["points"]


def test_insert_skips_attributes_and_seqend() -> None:
    doc = parse(
        entities_document(
            (0, "INSERT"),
            (2, "DOOR"),
            (66, 1),
            (10, 3.0),
            (20, 4.0),
            (41, 2.0),
            (50, 90.0),
            (0, "ATTRIB"),
            (1, "D-01"),
            (2, "TAG"),
            (0, "ATTRIB"),
            (1, "oak"),
            (2, "MATERIAL"),
            (0, "SEQEND"),
            *line_groups((0, 0), (1, 1)),
        )
    )

    assert [entity.dxftype for entity in doc.entities] == ["INSERT", "LINE"]
    insert = doc.entities[0]
    assert insert.dxf["name"] == "DOOR"
    assert insert.dxf["position"] == Point(3.0, 4.0)
    assert insert.dxf["x_scale"] == 2.0
    assert insert.dxf["rotation"] == 90.0


def test_spline_collects_lists() -> None:
    spline = _single_entity(
        (0, "SPLINE"),
        (70, 8),
        (71, 3),
        (72, 8),
        (73, 4),
        (74, 0),
        *[(40, knot) for knot in (0.0, 0.0, 0.0, 0.0, 1.0, 1.0, 1.0, 1.0)],
        (10, 0.0),
        (20, 0.0),
        (30, 0.0),
        (10, 1.0),
        (20, 2.0),
        (30, 0.0),
        (10, 3.0),
        (20, 2.0),
        (30, 0.0),
        (10, 4.0),
        (20, 0.0),
        (30, 0.0),
    )

    assert spline.dxf["degree_of_spline_curve"] == 3
    assert len(spline.dxf["knot_values"]) == 8
    assert spline.dxf["control_points"][1] == Point(1.0, 2.0, 0.0)
    assert spline.dxf["planar"] is True
    assert spline.dxf["closed"] is False
    assert "fit_points" not in spline.dxf
    assert len(spline.to_points()) == 4


def test_spline_count_mismatch_warns(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="dxfread.entities"):
        spline = _single_entity((0, "SPLINE"), (73, 2), (10, 0.0), (20, 0.0))

    assert len(spline.dxf["control_points"]) == 1
    assert "declares 2 control points but 1 were read" in caplog.text


def test_ellipse_keeps_parameters() -> None:
    ellipse = _single_entity(
        (0, "ELLIPSE"),
        (10, 0.0),
        (20, 0.0),
        (11, 4.0),
        (21, 0.0),
        (40, 0.5),
        (41, 0.0),
        (42, math.pi),
    )

    assert ellipse.dxf["major_axis_end_point"] == Point(4.0, 0.0)
    assert ellipse.dxf["axis_ratio"] == 0.5
    assert ellipse.dxf["end_angle"] == pytest.approx(math.pi)
