"""Directive processing and instruction collection.

A directive is a comment line of the exact form ``// {key:value}``. Recognized
keys are ``type``, ``direction`` and ``generate``; bad values are logged as
warnings and never abort processing. Every other non-blank line is an
instruction for the diagram grammar.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import NamedTuple

from yuml2svg.config import OptionsBuilder
from yuml2svg.types import DiagramType, Direction

logger = logging.getLogger(__name__)

COMMENT_MARKER = "//"
_DIRECTIVE_RE = re.compile(r"^//\s+\{\s*(\w+)\s*:\s*(\w+)\s*\}$")
_BOOLEAN_RE = re.compile(r"^(true|false)$")


class DirectiveMatch(NamedTuple):
    key: str
    value: str


def parse_directive(line: str) -> DirectiveMatch | None:
    """Extract ``(key, value)`` from a trimmed directive line, if it is one."""
    m = _DIRECTIVE_RE.match(line)
    if m is None:
        return None
    return DirectiveMatch(m.group(1), m.group(2))


def apply_directive(directive: DirectiveMatch, options: OptionsBuilder) -> None:
    """Apply one directive to ``options`` in place. Unknown keys are ignored."""
    key, value = directive
    if key == "type":
        diagram_type = DiagramType.lookup(value)
        if diagram_type is None:
            logger.warning("Invalid value for 'type'. Allowed values are: %s", ", ".join(DiagramType.names()))
            return
        options.diagram_type = diagram_type
    elif key == "direction":
        direction = Direction.from_directive(value)
        if direction is None:
            logger.warning(
                "Invalid value for 'direction'. Allowed values are: %s", ", ".join(Direction.directive_names())
            )
            return
        options.direction = direction
    elif key == "generate":
        if not _BOOLEAN_RE.match(value):
            logger.warning("Invalid value for 'generate'. Allowed values are: true, false (default).")
            return
        options.generate = value == "true"
        logger.warning("Generate option is not supported")


@dataclass
class LineCollector:
    """Shared line handler for the ingestion pass.

    Owns the instruction list and mutates the options builder it was given.
    Used as the callback for both the buffered and the streaming adapter.
    """

    options: OptionsBuilder
    instructions: list[str] = field(default_factory=list)

    def __call__(self, line: str) -> None:
        line = line.strip()
        if line.startswith(COMMENT_MARKER):
            directive = parse_directive(line)
            if directive is not None:
                apply_directive(directive, self.options)
        elif line:
            self.instructions.append(line)
