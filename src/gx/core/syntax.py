"""
Syntax-tree access for handlers that need more than the raw text.

Editors hand us a node-at-cursor query. Hosts with a native binding
implement TreeSource directly; the hook protocol sends a JSON document
that DictTree wraps.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol


class SyntaxNode(Protocol):
    """A node in the host's syntax tree."""

    @property
    def type(self) -> str: ...

    def parent(self) -> SyntaxNode | None: ...

    def named_child(self, index: int) -> SyntaxNode | None: ...

    def field(self, name: str) -> list[SyntaxNode]: ...

    def range(self) -> tuple[int, int, int, int]:
        """(start_line, start_col, end_line, end_col), 0-based, end exclusive."""
        ...


class TreeSource(Protocol):
    """Node-at-cursor query plus node-to-text resolution."""

    def node_at_cursor(self) -> SyntaxNode | None: ...

    def node_text(self, node: SyntaxNode) -> str: ...


@dataclass
class DictNode:
    """SyntaxNode built from a JSON mapping.

    Shape: {"type": str, "range": [sl, sc, el, ec], "text": str?,
    "named_children": [...], "fields": {name: [...]}}. Parents are linked
    when the tree is built, so a document is written root-down.
    """

    type: str
    start: tuple[int, int] = (0, 0)
    end: tuple[int, int] = (0, 0)
    text: str | None = None
    named_children: list[DictNode] = field(default_factory=list)
    fields: dict[str, list[DictNode]] = field(default_factory=dict)
    _parent: DictNode | None = field(default=None, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any], parent: DictNode | None = None) -> DictNode:
        rng = data.get("range") or [0, 0, 0, 0]
        if len(rng) != 4:
            raise ValueError(f"node range must have 4 items, got {len(rng)}")
        node = cls(
            type=str(data.get("type", "")),
            start=(int(rng[0]), int(rng[1])),
            end=(int(rng[2]), int(rng[3])),
            text=data.get("text"),
            _parent=parent,
        )
        node.named_children = [
            cls.from_dict(child, node) for child in data.get("named_children", [])
        ]
        node.fields = {
            name: [cls.from_dict(child, node) for child in children]
            for name, children in data.get("fields", {}).items()
        }
        return node

    def parent(self) -> DictNode | None:
        return self._parent

    def named_child(self, index: int) -> DictNode | None:
        if 0 <= index < len(self.named_children):
            return self.named_children[index]
        return None

    def field(self, name: str) -> list[DictNode]:
        return self.fields.get(name, [])

    def range(self) -> tuple[int, int, int, int]:
        return (*self.start, *self.end)


@dataclass
class DictTree:
    """TreeSource over buffer lines and a cursor path through a DictNode tree.

    The document names the root and the path of named-child indices from the
    root down to the node under the cursor:

        {"lines": [...], "root": {...}, "cursor": [0, 1]}
    """

    lines: list[str]
    root: DictNode | None = None
    cursor: tuple[int, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DictTree:
        root = data.get("root")
        return cls(
            lines=list(data.get("lines", [])),
            root=DictNode.from_dict(root) if root else None,
            cursor=tuple(int(i) for i in data.get("cursor", [])),
        )

    def node_at_cursor(self) -> DictNode | None:
        node = self.root
        for index in self.cursor:
            if node is None:
                return None
            node = node.named_child(index)
        return node

    def node_text(self, node: SyntaxNode) -> str:
        """Text covered by node, from its own text or the buffer lines."""
        text = getattr(node, "text", None)
        if text is not None:
            return text
        start_line, start_col, end_line, end_col = node.range()
        if start_line >= len(self.lines):
            return ""
        if start_line == end_line:
            return self.lines[start_line][start_col:end_col]
        parts = [self.lines[start_line][start_col:]]
        parts.extend(self.lines[start_line + 1 : end_line])
        if end_line < len(self.lines):
            parts.append(self.lines[end_line][:end_col])
        return "\n".join(parts)
