"""Shared yUML tokenizing helpers used by every grammar.

A yUML line alternates node tokens, wrapped in grammar-specific delimiters
such as ``[..]`` or ``(..)``, with free connector text between them::

    [Customer]<>1-orders 0..*>[Order]
    ^^^^^^^^^^ ^^^^^^^^^^^^^^^ ^^^^^^^
       node       connector     node
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from yuml2svg.ir.document import DocNode, GraphDocument
from yuml2svg.types import ArrowKind, LineStyle, NodeShape

_CLOSERS = {"[": "]", "(": ")", "<": ">", "|": "|"}
_STYLE_RE = re.compile(r"\{\s*bg\s*:\s*([#\w]+)\s*\}\s*$")
_NOTE_RE = re.compile(r"^note\s*:\s*(.*)$", re.IGNORECASE | re.DOTALL)


@dataclass
class Token:
    """A node (``opener`` set) or a connector (``opener`` empty)."""

    text: str
    opener: str = ""

    @property
    def is_node(self) -> bool:
        return bool(self.opener)


def split_line(line: str, openers: str) -> list[Token]:
    """Split a line into node and connector tokens.

    ``openers`` lists the characters that start a node token. Inside a node,
    ``{..}`` groups are skipped so style suffixes may contain any character.
    An unterminated node swallows the rest of the line.
    """
    tokens: list[Token] = []
    buf: list[str] = []
    pos = 0
    while pos < len(line):
        ch = line[pos]
        if ch not in openers:
            buf.append(ch)
            pos += 1
            continue
        if buf:
            tokens.append(Token("".join(buf)))
            buf = []
        closer = _CLOSERS[ch]
        end = pos + 1
        depth = 0
        while end < len(line):
            c = line[end]
            if c == "{":
                depth += 1
            elif c == "}" and depth:
                depth -= 1
            elif c == closer and not depth:
                break
            end += 1
        tokens.append(Token(line[pos + 1 : end], opener=ch))
        pos = end + 1
    if buf:
        tokens.append(Token("".join(buf)))
    return tokens


def chain(tokens: list[Token]) -> list[tuple[Token, str | None, Token]]:
    """Pair consecutive nodes with the connector text between them.

    Adjacent nodes with nothing in between yield ``None`` as the connector.
    Connector text with no node on one side is dropped.
    """
    links: list[tuple[Token, str | None, Token]] = []
    prev: Token | None = None
    connector: str | None = None
    for token in tokens:
        if token.is_node:
            if prev is not None:
                links.append((prev, connector, token))
            prev = token
            connector = None
        else:
            connector = token.text
    return links


def extract_style(text: str) -> tuple[str, str | None]:
    """Strip a trailing ``{bg:color}`` and return (text, color)."""
    m = _STYLE_RE.search(text)
    if m is None:
        return text.strip(), None
    return text[: m.start()].strip(), m.group(1)


def note_text(text: str) -> str | None:
    m = _NOTE_RE.match(text.strip())
    return m.group(1).strip() if m else None


@dataclass
class NodeRegistry:
    """Assigns stable ids (``A1``, ``A2``...) to node keys in first-seen order."""

    document: GraphDocument
    nodes: dict[str, DocNode] = field(default_factory=dict)

    def add(self, key: str, build) -> DocNode:
        """Return the node for ``key``, calling ``build(node_id)`` the first time."""
        node = self.nodes.get(key)
        if node is None:
            node = self.document.add_node(build(f"A{len(self.nodes) + 1}"))
            self.nodes[key] = node
        return node


def note_node(node_id: str, text: str, fill: str | None) -> DocNode:
    return DocNode(id=node_id, label=text, shape=NodeShape.Note, fill=fill)


@dataclass
class Connector:
    style: LineStyle = LineStyle.Solid
    arrow_head: ArrowKind = ArrowKind.None_
    arrow_tail: ArrowKind = ArrowKind.None_
    label: str | None = None
    head_label: str | None = None
    tail_label: str | None = None


def parse_simple_connector(text: str | None) -> Connector:
    """Parse ``-``, ``->``, ``<-``, ``<->``, ``-.->`` with an optional middle label."""
    conn = Connector()
    if not text:
        return conn
    body = text.strip()
    if body.startswith("<"):
        conn.arrow_tail = ArrowKind.Open
        body = body[1:]
    if body.endswith(">"):
        conn.arrow_head = ArrowKind.Open
        body = body[:-1]
    if ".-" in body or "-." in body:
        conn.style = LineStyle.Dashed
    label = body.replace("-.-", " ").replace("-.", " ").replace(".-", " ").strip("- ").strip()
    conn.label = _unbracket(label) or None
    return conn


def parse_transition(text: str | None) -> Connector:
    """Parse activity/state transitions: ``->``, ``label->``, ``[guard]->``."""
    conn = Connector(arrow_head=ArrowKind.Open)
    if not text:
        return conn
    body = text.strip()
    if body.endswith(">"):
        body = body[:-1]
    label = body.strip("- ").strip()
    conn.label = _unbracket(label) or None
    return conn


def _unbracket(text: str) -> str:
    text = text.strip()
    if text.startswith("[") and text.endswith("]"):
        return text[1:-1].strip()
    return text
