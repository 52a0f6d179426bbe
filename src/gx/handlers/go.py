"""
Go import handler: the import path under the cursor links to pkg.go.dev.

Uses the syntax tree rather than the text, so it works anywhere inside
an import spec, including on the alias.
"""

from __future__ import annotations

from gx.core.syntax import SyntaxNode
from gx.handlers import HandlerContext

FILETYPES = frozenset({"go"})


def _import_spec(node: SyntaxNode | None) -> SyntaxNode | None:
    """Find the import_spec the cursor node belongs to."""
    if node is None or node.type == "import_spec":
        return node
    if node.type == "import_declaration":
        node = node.named_child(0)
    else:
        node = node.parent()
    if node is None or node.type != "import_spec":
        return None
    return node


def resolve(ctx: HandlerContext) -> str | None:
    if ctx.tree is None:
        return None
    spec = _import_spec(ctx.tree.node_at_cursor())
    if spec is None:
        return None
    paths = spec.field("path")
    if not paths:
        return None
    literal = ctx.tree.node_text(paths[0])
    pkg = literal[1:-1]  # strip quotes
    if not pkg:
        return None
    return f"https://pkg.go.dev/{pkg}"
