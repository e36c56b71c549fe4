"""Embedded-image post-processing.

The SVG renderer marks icons (the use case actor, for instance) with
``<image href="yuml:NAME">`` placeholders. The post-processor swaps each
placeholder for the icon's vector content, scaled into the placeholder box
and stroked in the theme's ink color, so the final document is self-contained.
"""

from __future__ import annotations

import copy
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path

import aiofiles

from yuml2svg.renderers.svg import IMAGE_SCHEME, SVG_NS, fmt
from yuml2svg.theme import palette_for

logger = logging.getLogger(__name__)

ASSETS_DIR = Path(__file__).resolve().parent.parent / "assets"

ET.register_namespace("", SVG_NS)
_IMAGE_TAG = f"{{{SVG_NS}}}image"
_GROUP_TAG = f"{{{SVG_NS}}}g"


@dataclass
class Icon:
    width: float
    height: float
    children: list[ET.Element]

    @classmethod
    def parse(cls, text: str) -> Icon:
        root = ET.fromstring(text)
        view_box = root.get("viewBox")
        if view_box:
            _, _, width, height = (float(v) for v in view_box.split())
        else:
            width = float(root.get("width", "1"))
            height = float(root.get("height", "1"))
        return cls(width=width, height=height, children=list(root))


class EmbeddedImageProcessor:
    """Replaces icon placeholders in rendered SVG with inline vector content."""

    def __init__(self, icons: dict[str, Icon]) -> None:
        self.icons = icons

    def process(self, svg: str, is_dark: bool) -> str:
        if f'href="{IMAGE_SCHEME}' not in svg:
            return svg
        root = ET.fromstring(svg)
        ink = palette_for(is_dark).ink
        parents = {child: parent for parent in root.iter() for child in parent}
        for image in list(root.iter(_IMAGE_TAG)):
            href = image.get("href", "")
            if not href.startswith(IMAGE_SCHEME):
                continue
            name = href[len(IMAGE_SCHEME) :]
            icon = self.icons.get(name)
            if icon is None:
                logger.warning("No embedded image named %r; leaving placeholder", name)
                continue
            parent = parents[image]
            index = list(parent).index(image)
            parent.remove(image)
            parent.insert(index, _inline(icon, image, ink))
        return ET.tostring(root, encoding="unicode")

    __call__ = process


def _inline(icon: Icon, image: ET.Element, ink: str) -> ET.Element:
    x = float(image.get("x", "0"))
    y = float(image.get("y", "0"))
    sx = float(image.get("width", fmt(icon.width))) / icon.width
    sy = float(image.get("height", fmt(icon.height))) / icon.height
    group = ET.Element(
        _GROUP_TAG,
        {
            "transform": f"translate({fmt(x)},{fmt(y)}) scale({fmt(sx)},{fmt(sy)})",
            "fill": "none",
            "stroke": ink,
        },
    )
    group.extend(copy.deepcopy(child) for child in icon.children)
    return group


async def load_image_processor(directory: Path = ASSETS_DIR) -> EmbeddedImageProcessor:
    """Read the icon library from ``directory`` and build a processor."""
    icons: dict[str, Icon] = {}
    for path in sorted(directory.glob("*.svg")):
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            icons[path.stem] = Icon.parse(await f.read())
    logger.debug("Loaded %d embedded images from %s", len(icons), directory)
    return EmbeddedImageProcessor(icons)
