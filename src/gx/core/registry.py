"""
Handler registry and applicability filter.

The registry is built once per configuration and never mutated; a new
configuration builds a new registry.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from gx.core.resolvers import Resolver


@dataclass(frozen=True)
class Scope:
    """Where a handler applies. Empty scope means everywhere."""

    file_types: frozenset[str] | None = None
    file_name: str | None = None  # regex searched in the buffer name

    @property
    def is_global(self) -> bool:
        return not self.file_types and not self.file_name

    def matches(self, file_type: str, file_name: str) -> bool:
        if self.file_types and file_type in self.file_types:
            return True
        if self.file_name and file_name and re.search(self.file_name, file_name):
            return True
        return False


@dataclass(frozen=True)
class Handler:
    """A named rule that extracts a URL from text."""

    name: str
    resolver: Resolver
    scope: Scope = Scope()
    disabled: bool = False

    def is_eligible(self, file_type: str, file_name: str) -> bool:
        if self.disabled:
            return False
        if self.scope.is_global:
            return True
        return self.scope.matches(file_type, file_name)


class Registry:
    """Ordered, read-only collection of handlers keyed by name."""

    def __init__(self, handlers: Iterable[Handler] = ()):
        by_name: dict[str, Handler] = {}
        for handler in handlers:
            by_name[handler.name] = handler
        self._handlers = tuple(by_name.values())
        self._by_name: Mapping[str, Handler] = MappingProxyType(by_name)

    def __iter__(self) -> Iterator[Handler]:
        return iter(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __getitem__(self, name: str) -> Handler:
        return self._by_name[name]

    def get(self, name: str) -> Handler | None:
        return self._by_name.get(name)

    @property
    def names(self) -> list[str]:
        return [h.name for h in self._handlers]

    def eligible(self, file_type: str = "", file_name: str = "") -> list[Handler]:
        """Handlers that apply to a buffer, in registry order."""
        return [h for h in self._handlers if h.is_eligible(file_type, file_name)]
