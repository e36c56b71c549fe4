"""Base grammar protocol."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, Union

from yuml2svg.config import RenderOptions
from yuml2svg.ir.document import GraphDocument

# A graph description for the layout renderer, or a finished SVG document.
GrammarResult = Union[GraphDocument, str]


class Grammar(Protocol):
    """Protocol that all diagram grammars must implement."""

    def parse(self, instructions: Sequence[str], options: RenderOptions) -> GrammarResult:
        """Translate instruction lines into a document."""
        ...
