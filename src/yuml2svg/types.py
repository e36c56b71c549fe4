"""Shared type definitions for yuml2svg.

Enums used across the ingestion pipeline, grammars, layout, and renderers.
"""

from __future__ import annotations

from enum import Enum


class Direction(Enum):
    TB = "TB"  # topDown
    LR = "LR"  # leftToRight
    RL = "RL"  # rightToLeft

    @classmethod
    def default(cls) -> Direction:
        return cls.TB

    @classmethod
    def from_directive(cls, name: str) -> Direction | None:
        """Map a directive value (``topDown`` etc.) to a direction code."""
        return _DIRECTIVE_NAMES.get(name)

    @classmethod
    def directive_names(cls) -> list[str]:
        return list(_DIRECTIVE_NAMES)


_DIRECTIVE_NAMES: dict[str, Direction] = {
    "topDown": Direction.TB,
    "leftToRight": Direction.LR,
    "rightToLeft": Direction.RL,
}


class DiagramType(Enum):
    Class = "class"
    UseCase = "usecase"
    Activity = "activity"
    State = "state"
    Deployment = "deployment"
    Package = "package"
    Sequence = "sequence"

    @classmethod
    def default(cls) -> DiagramType:
        return cls.Class

    @classmethod
    def lookup(cls, value: str) -> DiagramType | None:
        """Return the variant named ``value``, or None when unknown."""
        try:
            return cls(value)
        except ValueError:
            return None

    @classmethod
    def names(cls) -> list[str]:
        return [member.value for member in cls]


class NodeShape(Enum):
    Record = "record"  # [Name|fields|methods]
    Box = "box"
    Rounded = "rounded"  # (Activity), (State)
    Ellipse = "ellipse"  # (Use case)
    Start = "start"  # (start)
    End = "end"  # (end)
    Diamond = "diamond"  # <decision>
    Bar = "bar"  # |fork|
    Note = "note"  # [note: ...]
    Box3D = "box3d"  # deployment node
    Component = "component"
    Tab = "tab"  # package
    Actor = "actor"  # use case actor, drawn as an embedded image

    @classmethod
    def default(cls) -> NodeShape:
        return cls.Box


class LineStyle(Enum):
    Solid = "solid"
    Dashed = "dashed"


class ArrowKind(Enum):
    None_ = "none"
    Open = "vee"  # ->
    Filled = "normal"
    Triangle = "empty"  # ^ inheritance
    Diamond = "odiamond"  # <> aggregation
    FilledDiamond = "diamond"  # ++ composition
