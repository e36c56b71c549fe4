"""Exceptions raised by yuml2svg."""

from __future__ import annotations


class Yuml2SvgError(ValueError):
    """Base class for errors owned by yuml2svg."""


class MissingTypeDirective(Yuml2SvgError):
    """The resolved configuration carries no diagram type at all."""

    def __init__(self) -> None:
        super().__init__("Missing mandatory 'type' directive")


class InvalidDiagramType(Yuml2SvgError):
    """The resolved diagram type is not one of the known variants."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Invalid diagram type: {value!r}")


class RenderError(Yuml2SvgError):
    """The layout renderer was asked for something it cannot produce."""
