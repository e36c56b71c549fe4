"""Tests for the SVG layout renderer."""

from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from yuml2svg.errors import RenderError
from yuml2svg.ir.document import DocEdge, DocNode, GraphDocument
from yuml2svg.layout import full_layout
from yuml2svg.renderers import svg as svg_module
from yuml2svg.renderers.svg import (
    TextStyle,
    check_render_options,
    fmt,
    layout_document,
    measure_node,
    paint_document,
    render_document,
    xml_text,
)
from yuml2svg.theme import wrap_document
from yuml2svg.types import ArrowKind, Direction, LineStyle, NodeShape

SVG = "{http://www.w3.org/2000/svg}"


def sample_document(direction: Direction = Direction.TB) -> GraphDocument:
    doc = GraphDocument(direction=direction)
    doc.add_node(DocNode("A1", "Customer", NodeShape.Record, fields=["Customer", "name", "login()"]))
    doc.add_node(DocNode("A2", "Order", NodeShape.Record))
    doc.add_node(DocNode("A3", "User", NodeShape.Actor))
    doc.add_edge(DocEdge("A1", "A2", arrow_tail=ArrowKind.Diamond, arrow_head=ArrowKind.Open, head_label="0..*"))
    doc.add_edge(DocEdge("A3", "A1", style=LineStyle.Dashed, label="uses"))
    return wrap_document(doc, is_dark=False)


@pytest.mark.parametrize("value,expected", [(1.0, "1"), (1.5, "1.5"), (1.234, "1.23"), (-0.001, "0"), (0, "0")])
def test_fmt(value: float, expected: str) -> None:
    assert fmt(value) == expected


def test_measure_record_grows_with_compartments() -> None:
    text = TextStyle("Helvetica", 10.0, "#000")
    one = measure_node(DocNode("A", "X", NodeShape.Record), text, Direction.TB)
    three = measure_node(DocNode("A", "X", NodeShape.Record, fields=["X", "a", "b"]), text, Direction.TB)
    assert three[1] > one[1]


def test_bar_turns_with_direction() -> None:
    text = TextStyle("Helvetica", 10.0, "#000")
    bar = DocNode("A", "", NodeShape.Bar)
    width, height = measure_node(bar, text, Direction.TB)
    assert width > height
    width, height = measure_node(bar, text, Direction.LR)
    assert height > width


def test_paint_document_structure() -> None:
    root = ET.fromstring(paint_document(sample_document()))
    assert root.tag == f"{SVG}svg"
    assert root.get("viewBox", "").startswith("0 0 ")
    nodes = root.findall(f".//{SVG}g[@class='node']")
    assert [n.get("id") for n in nodes] == ["A1", "A2", "A3"]
    assert len(root.findall(f".//{SVG}g[@class='edge']")) == 2
    texts = [t.text for t in root.iter(f"{SVG}text")]
    assert {"Customer", "name", "login()", "Order", "User", "uses", "0..*"} <= set(texts)


def test_actor_is_an_image_placeholder() -> None:
    svg = paint_document(sample_document())
    assert 'href="yuml:actor"' in svg


def test_paint_document_is_deterministic() -> None:
    assert paint_document(sample_document()) == paint_document(sample_document())


def test_engine_options_change_spacing() -> None:
    doc = sample_document()
    default = layout_document(doc)
    wide = layout_document(doc, {"v_gap": 200, "h_gap": 100})
    assert wide.height > default.height


def test_check_render_options() -> None:
    check_render_options(None)
    check_render_options({"engine": "dot", "format": "svg"})
    with pytest.raises(RenderError, match="engine"):
        check_render_options({"engine": "neato"})
    with pytest.raises(RenderError, match="format"):
        check_render_options({"format": "png"})


@pytest.mark.asyncio
async def test_render_document_matches_sync_painter() -> None:
    doc = sample_document(Direction.LR)
    assert await render_document(doc) == paint_document(doc)


@pytest.mark.asyncio
async def test_render_document_rejects_bad_options() -> None:
    with pytest.raises(RenderError):
        await render_document(sample_document(), render_options={"format": "pdf"})


def test_xml_text_drops_illegal_characters() -> None:
    assert xml_text("Us\x0ber\x00") == "User"
    assert xml_text("tab\there\nnext é €") == "tab\there\nnext é €"


def test_control_characters_in_labels_stay_well_formed() -> None:
    doc = GraphDocument()
    doc.add_node(DocNode("A1", "Bad\x0bName", NodeShape.Rounded))
    doc.add_node(DocNode("A2", "Other\x1f"))
    doc.add_edge(DocEdge("A1", "A2", label="x\x08y"))
    root = ET.fromstring(paint_document(wrap_document(doc, is_dark=False)))
    assert [t.text for t in root.iter(f"{SVG}title")] == ["A1->A2", "BadName", "Other"]
    assert "xy" in [t.text for t in root.iter(f"{SVG}text")]


def test_layout_document_goes_through_full_layout(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []

    def recording_layout(gir, rank_gap, node_gap):
        calls.append((gir.node_count(), rank_gap, node_gap))
        return full_layout(gir, rank_gap, node_gap)

    monkeypatch.setattr(svg_module, "full_layout", recording_layout)
    layout_document(sample_document(), {"v_gap": 70, "h_gap": 12})
    assert calls == [(3, 70.0, 12.0)]
