"""Renderers: SVG painting of laid-out documents and image post-processing."""

from yuml2svg.renderers.images import EmbeddedImageProcessor, load_image_processor
from yuml2svg.renderers.svg import paint_document, render_document

__all__ = ["EmbeddedImageProcessor", "load_image_processor", "paint_document", "render_document"]
