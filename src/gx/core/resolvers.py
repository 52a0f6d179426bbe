"""
Resolver variants: how a handler turns text into at most one URL.

A handler either carries a literal regular expression (LiteralPattern) or a
callable (CustomResolver). Both answer try_resolve(ctx).
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from gx.core.config import Options
    from gx.core.context import RemoteResolver
    from gx.core.syntax import TreeSource


@dataclass(frozen=True)
class HandlerContext:
    """Everything a resolver may look at for one invocation."""

    mode: str
    text: str
    options: Options
    file_name: str = ""
    file_type: str = ""
    remotes: RemoteResolver | None = None
    tree: TreeSource | None = None

    def repo_url(self, owner: str = "", repo: str = "") -> str | None:
        """Base URL of the current repository, or None without a remote."""
        if self.remotes is None:
            return None
        remotes = self.options.git_remotes
        if callable(remotes):
            remotes = remotes(self.file_name)
        push = self.options.git_remote_push
        if callable(push):
            push = push(self.file_name)
        return self.remotes.remote_url(list(remotes or []), bool(push), owner, repo)


class Resolver(Protocol):
    def try_resolve(self, ctx: HandlerContext) -> str | None: ...


@dataclass(frozen=True)
class LiteralPattern:
    """A regular expression searched in the text.

    Returns the first capture group, or the whole match for patterns
    without groups.
    """

    pattern: re.Pattern

    @classmethod
    def compile(cls, pattern: str) -> LiteralPattern:
        """Compile a pattern string. Raises re.error on invalid syntax."""
        return cls(re.compile(pattern))

    def try_resolve(self, ctx: HandlerContext) -> str | None:
        match = self.pattern.search(ctx.text)
        if not match:
            return None
        return match.group(1) if self.pattern.groups else match.group(0)


@dataclass(frozen=True)
class CustomResolver:
    """A callable resolver.

    Built-in handlers take the whole HandlerContext. User callables follow
    the simpler (mode, text) signature; wrap those with from_user().
    """

    func: Callable[[HandlerContext], str | None]

    @classmethod
    def from_user(cls, func: Callable[[str, str], str | None]) -> CustomResolver:
        return cls(lambda ctx: func(ctx.mode, ctx.text))

    def try_resolve(self, ctx: HandlerContext) -> str | None:
        return self.func(ctx)
