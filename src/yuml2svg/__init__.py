"""yuml2svg: yUML diagram text to SVG."""

from yuml2svg.config import OptionsBuilder, RenderOptions
from yuml2svg.errors import InvalidDiagramType, MissingTypeDirective, RenderError, Yuml2SvgError
from yuml2svg.pipeline import EMPTY_DOCUMENT, render, render_sync
from yuml2svg.types import DiagramType, Direction

__all__ = [
    "EMPTY_DOCUMENT",
    "DiagramType",
    "Direction",
    "InvalidDiagramType",
    "MissingTypeDirective",
    "OptionsBuilder",
    "RenderError",
    "RenderOptions",
    "Yuml2SvgError",
    "render",
    "render_sync",
]
