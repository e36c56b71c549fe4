"""Grammar registry: a static dispatch table from diagram type to grammar."""

from __future__ import annotations

from yuml2svg.grammars.activity import ActivityGrammar
from yuml2svg.grammars.base import Grammar, GrammarResult
from yuml2svg.grammars.class_diagram import ClassDiagramGrammar
from yuml2svg.grammars.deployment import DeploymentGrammar
from yuml2svg.grammars.package import PackageGrammar
from yuml2svg.grammars.sequence import SequenceGrammar
from yuml2svg.grammars.state import StateGrammar
from yuml2svg.grammars.usecase import UseCaseGrammar
from yuml2svg.types import DiagramType

GRAMMARS: dict[DiagramType, Grammar] = {
    DiagramType.Class: ClassDiagramGrammar(),
    DiagramType.UseCase: UseCaseGrammar(),
    DiagramType.Activity: ActivityGrammar(),
    DiagramType.State: StateGrammar(),
    DiagramType.Deployment: DeploymentGrammar(),
    DiagramType.Package: PackageGrammar(),
    DiagramType.Sequence: SequenceGrammar(),
}


def get_grammar(diagram_type: DiagramType) -> Grammar:
    """Return the grammar registered for ``diagram_type``."""
    return GRAMMARS[diagram_type]


__all__ = ["GRAMMARS", "Grammar", "GrammarResult", "get_grammar"]
