"""Centralized configuration for yuml2svg.

Rendering options are accumulated in a mutable :class:`OptionsBuilder` while
the input is scanned (directives may change them) and frozen into an
immutable :class:`RenderOptions` once dispatch begins.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from yuml2svg.errors import InvalidDiagramType, MissingTypeDirective
from yuml2svg.types import DiagramType, Direction

logger = logging.getLogger(__name__)

# Public option names and their snake_case attribute names.
_OPTION_ALIASES: dict[str, str] = {
    "dir": "direction",
    "direction": "direction",
    "type": "diagram_type",
    "diagram_type": "diagram_type",
    "isDark": "is_dark",
    "is_dark": "is_dark",
    "dotHeaderOverrides": "header_overrides",
    "header_overrides": "header_overrides",
    "generate": "generate",
}


@dataclass(frozen=True)
class RenderOptions:
    """Resolved, read-only configuration handed to grammars and renderers."""

    direction: Direction = Direction.TB
    diagram_type: DiagramType = DiagramType.Class
    is_dark: bool = False
    header_overrides: Mapping[str, Any] | None = None
    generate: bool | None = None


@dataclass
class OptionsBuilder:
    """Mutable configuration filled in during the single ingestion pass.

    ``diagram_type`` holds whatever the caller supplied until :meth:`freeze`
    validates it, so an unknown caller type is reported at dispatch time.
    """

    direction: Direction = field(default_factory=Direction.default)
    diagram_type: Any = field(default_factory=DiagramType.default)
    is_dark: bool = False
    header_overrides: Mapping[str, Any] | None = None
    generate: bool | None = None

    @classmethod
    def from_options(cls, options: OptionsLike = None) -> OptionsBuilder:
        """Create a builder seeded with defaults and the caller's options."""
        builder = cls()
        if options is None:
            return builder
        if isinstance(options, RenderOptions):
            return cls(
                direction=options.direction,
                diagram_type=options.diagram_type,
                is_dark=options.is_dark,
                header_overrides=options.header_overrides,
                generate=options.generate,
            )
        for key, value in options.items():
            attr = _OPTION_ALIASES.get(key)
            if attr is None:
                logger.debug("Ignoring unknown option %r", key)
                continue
            builder._apply(attr, value)
        return builder

    def _apply(self, attr: str, value: Any) -> None:
        if attr == "direction":
            if value:
                self.direction = _coerce_direction(value, self.direction)
        elif attr == "diagram_type":
            if isinstance(value, str):
                if value:
                    self.diagram_type = DiagramType.lookup(value) or value
            elif value is not None:
                # Kept as given; freeze() rejects anything but a DiagramType.
                self.diagram_type = value
        elif attr == "is_dark":
            self.is_dark = bool(value)
        elif attr == "header_overrides":
            self.header_overrides = value
        elif attr == "generate":
            self.generate = value

    def resolve_type(self) -> DiagramType:
        """Validate the accumulated diagram type."""
        if self.diagram_type is None:
            raise MissingTypeDirective()
        if isinstance(self.diagram_type, DiagramType):
            return self.diagram_type
        resolved = DiagramType.lookup(self.diagram_type)
        if resolved is None:
            raise InvalidDiagramType(self.diagram_type)
        return resolved

    def freeze(self) -> RenderOptions:
        """Return the immutable options; raises if the type is unusable."""
        return RenderOptions(
            direction=self.direction,
            diagram_type=self.resolve_type(),
            is_dark=self.is_dark,
            header_overrides=self.header_overrides,
            generate=self.generate,
        )


OptionsLike = Union[RenderOptions, Mapping[str, Any], None]


def _coerce_direction(value: Any, current: Direction) -> Direction:
    if isinstance(value, Direction):
        return value
    try:
        return Direction(str(value).upper())
    except ValueError:
        logger.warning(
            "Ignoring unknown direction %r; use one of %s",
            value,
            ", ".join(d.value for d in Direction),
        )
        return current
