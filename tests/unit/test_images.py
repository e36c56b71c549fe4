"""Tests for embedded image post-processing."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from yuml2svg.renderers.images import EmbeddedImageProcessor, Icon, load_image_processor
from yuml2svg.theme import DARK, LIGHT

SVG = "{http://www.w3.org/2000/svg}"

PLACEHOLDER_DOC = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="100pt" height="100pt" viewBox="0 0 100 100">'
    '<g class="node"><image href="yuml:actor" x="10" y="20" width="30" height="40" /></g>'
    "</svg>"
)


@pytest.mark.asyncio
async def test_loads_bundled_icons() -> None:
    processor = await load_image_processor()
    assert "actor" in processor.icons
    assert processor.icons["actor"].width == 30


@pytest.mark.asyncio
async def test_loads_icons_from_directory(tmp_path: Path) -> None:
    (tmp_path / "gear.svg").write_text('<svg xmlns="http://www.w3.org/2000/svg" width="8" height="4"><rect/></svg>')
    processor = await load_image_processor(tmp_path)
    assert list(processor.icons) == ["gear"]
    assert (processor.icons["gear"].width, processor.icons["gear"].height) == (8, 4)


def test_document_without_placeholders_is_untouched() -> None:
    processor = EmbeddedImageProcessor({})
    svg = '<svg xmlns="http://www.w3.org/2000/svg"><rect   width="1"/></svg>'
    assert processor.process(svg, is_dark=True) is svg


@pytest.mark.asyncio
async def test_placeholder_is_inlined() -> None:
    processor = await load_image_processor()
    root = ET.fromstring(processor.process(PLACEHOLDER_DOC, is_dark=False))
    assert root.find(f".//{SVG}image") is None
    group = root.find(f".//{SVG}g[@class='node']/{SVG}g")
    assert group is not None
    assert group.get("transform") == "translate(10,20) scale(1,1)"
    assert group.get("stroke") == LIGHT.ink
    assert group.find(f"{SVG}circle") is not None


@pytest.mark.asyncio
async def test_dark_placeholder_uses_dark_ink() -> None:
    processor = await load_image_processor()
    assert f'stroke="{DARK.ink}"' in processor(PLACEHOLDER_DOC, True)


def test_unknown_icon_is_left_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    processor = EmbeddedImageProcessor({})
    with caplog.at_level(logging.WARNING):
        out = processor.process(PLACEHOLDER_DOC, is_dark=False)
    assert 'href="yuml:actor"' in out
    assert "actor" in caplog.text


def test_icon_parse_without_viewbox() -> None:
    icon = Icon.parse('<svg xmlns="http://www.w3.org/2000/svg" width="12" height="6"><path d="M0 0"/></svg>')
    assert (icon.width, icon.height) == (12.0, 6.0)
    assert len(icon.children) == 1
