"""
Host capabilities consumed by the dispatcher.

The editor is never imported: everything gx needs from it arrives through
these protocols, so tests and the JSON hook can supply plain objects.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

NORMAL_MODES = frozenset({"n", "nt"})
VISUAL_MODES = frozenset({"v", "V", "\x16"})  # \x16 is blockwise visual (CTRL-V)


class TextSource(Protocol):
    """Current editor state, queried lazily."""

    mode: str
    file_type: str
    file_name: str

    def word_under_cursor(self) -> str | None: ...

    def selection(self) -> list[str]: ...


class RemoteResolver(Protocol):
    """Turns configured remote names into a repository base URL."""

    def remote_url(
        self,
        remotes: Sequence[str],
        push: bool,
        owner: str = "",
        repo: str = "",
    ) -> str | None: ...


Opener = Callable[[str], object]


@dataclass
class EditorState:
    """A TextSource snapshot, as sent by the editor hook."""

    mode: str = "n"
    file_type: str = ""
    file_name: str = ""
    word: str | None = None
    selected: list[str] = field(default_factory=list)

    def word_under_cursor(self) -> str | None:
        return self.word

    def selection(self) -> list[str]:
        return list(self.selected)


def get_text(source: TextSource, mode: str | None = None) -> str | None:
    """Derive the primary text for a mode.

    Normal mode uses the word under the cursor. Visual modes join the
    selection with newlines stripped. Anything else has no text.
    """
    mode = mode or source.mode
    if mode in NORMAL_MODES:
        return source.word_under_cursor()
    if mode in VISUAL_MODES:
        return "".join(source.selection()).replace("\n", "")
    return None
