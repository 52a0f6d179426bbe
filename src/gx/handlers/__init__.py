"""
Built-in URL handlers for gx.

Each handler module is named after its handler and exports either:
- PATTERN: str - regex whose first group is the URL, or
- resolve(ctx: HandlerContext) -> str | None - custom resolution

and optionally:
- FILETYPES: frozenset[str] - file types the handler is scoped to
- FILENAME: str - regex the buffer name must contain
"""

from __future__ import annotations

import importlib
from functools import lru_cache
from pathlib import Path
from types import ModuleType

from gx.core.registry import Handler, Scope
from gx.core.resolvers import CustomResolver, HandlerContext, LiteralPattern

__all__ = ["HandlerContext", "builtin_handlers", "get_handler_module"]


def _discover_handlers() -> list[str]:
    """Discover handler modules, sorted by name."""
    handlers_dir = Path(__file__).parent
    return sorted(
        file.stem
        for file in handlers_dir.glob("*.py")
        if not file.name.startswith("_")
    )


# Build handler name list at import time
KNOWN_HANDLERS = _discover_handlers()


@lru_cache(maxsize=32)
def get_handler_module(name: str) -> ModuleType | None:
    """Load a built-in handler module by name (cached within process)."""
    if name not in KNOWN_HANDLERS:
        return None
    return importlib.import_module(f".{name}", package="gx.handlers")


def _build(name: str, module: ModuleType) -> Handler:
    if hasattr(module, "PATTERN"):
        resolver = LiteralPattern.compile(module.PATTERN)
    else:
        resolver = CustomResolver(module.resolve)
    filetypes = getattr(module, "FILETYPES", None)
    return Handler(
        name=name,
        resolver=resolver,
        scope=Scope(
            file_types=frozenset(filetypes) if filetypes else None,
            file_name=getattr(module, "FILENAME", None),
        ),
    )


def builtin_handlers() -> list[Handler]:
    """Default handlers in name order."""
    return [_build(name, get_handler_module(name)) for name in KNOWN_HANDLERS]
