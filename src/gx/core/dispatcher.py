"""
Dispatch engine for gx.

Runs every eligible handler against the same text, collects distinct URLs
in handler order, then applies the resolution policy:
url_scheme short-circuits, search is demoted, and the rest is either a
single URL, a choice, or nothing.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass

import structlog

from gx.core.config import Options
from gx.core.context import Opener, RemoteResolver
from gx.core.registry import Handler
from gx.core.resolvers import HandlerContext
from gx.core.syntax import TreeSource

log = structlog.get_logger()

# Handler names with special meaning to the resolution policy
SCHEME_HANDLER = "url_scheme"
SEARCH_HANDLER = "search"

SELECT_PROMPT = "Multiple patterns match. Select:"
# Labels are padded to the longest built-in handler name
LABEL_WIDTH = len("package_json")


@dataclass(frozen=True)
class Candidate:
    """A URL produced by one handler."""

    handler: str
    url: str


class CandidateSet:
    """Ordered candidates, unique by URL.

    Kept as three structures: the ordered list, the URLs already seen, and
    the ordinal of each handler's candidate.
    """

    def __init__(self) -> None:
        self._candidates: list[Candidate] = []
        self._seen: set[str] = set()
        self._by_handler: dict[str, int] = {}

    def add(self, handler: str, url: str | None) -> bool:
        """Append a candidate unless the URL is empty or already present."""
        if not url or url in self._seen:
            return False
        self._by_handler[handler] = len(self._candidates)
        self._candidates.append(Candidate(handler, url))
        self._seen.add(url)
        return True

    def remove(self, handler: str) -> Candidate | None:
        """Drop a handler's candidate, keeping the others in order."""
        index = self._by_handler.pop(handler, None)
        if index is None:
            return None
        removed = self._candidates.pop(index)
        self._seen.discard(removed.url)
        self._by_handler = {c.handler: i for i, c in enumerate(self._candidates)}
        return removed

    def by_handler(self, handler: str) -> Candidate | None:
        index = self._by_handler.get(handler)
        return None if index is None else self._candidates[index]

    @property
    def scheme_literal(self) -> Candidate | None:
        return self.by_handler(SCHEME_HANDLER)

    def __getitem__(self, index: int) -> Candidate:
        return self._candidates[index]

    def __len__(self) -> int:
        return len(self._candidates)

    def __iter__(self) -> Iterator[Candidate]:
        return iter(self._candidates)

    def __contains__(self, url: object) -> bool:
        return url in self._seen


# === Outcomes ===


@dataclass(frozen=True)
class NoMatch:
    pass


@dataclass(frozen=True)
class SingleMatch:
    url: str
    handler: str | None = None


@dataclass(frozen=True)
class MultipleMatches:
    candidates: tuple[Candidate, ...]


Outcome = NoMatch | SingleMatch | MultipleMatches


# === Dispatch ===


def _try_handler(handler: Handler, ctx: HandlerContext) -> str | None:
    """Run one handler. A failing resolver counts as no match."""
    try:
        url = handler.resolver.try_resolve(ctx)
    except Exception as e:
        log.warning("resolver_failed", handler=handler.name, error=repr(e))
        return None
    if url is not None and not isinstance(url, str):
        log.warning("resolver_bad_result", handler=handler.name, result_type=type(url).__name__)
        return None
    return url


def collect(ctx: HandlerContext, handlers: Sequence[Handler]) -> CandidateSet:
    """Run handlers in order against ctx.text and aggregate their URLs."""
    candidates = CandidateSet()
    for handler in handlers:
        url = _try_handler(handler, ctx)
        if not url:
            continue
        if candidates.add(handler.name, url):
            log.debug("handler_matched", handler=handler.name, url=url)
        else:
            log.debug("duplicate_url_dropped", handler=handler.name, url=url)
    return candidates


def resolve(candidates: CandidateSet) -> Outcome:
    """Turn aggregated candidates into a single decision."""
    scheme = candidates.scheme_literal
    if scheme is not None:
        return SingleMatch(scheme.url, scheme.handler)

    if len(candidates) >= 2:
        candidates.remove(SEARCH_HANDLER)

    if len(candidates) == 0:
        return NoMatch()
    if len(candidates) == 1:
        return SingleMatch(candidates[0].url, candidates[0].handler)
    return MultipleMatches(tuple(candidates))


def dispatch(
    text: str,
    options: Options,
    mode: str = "n",
    file_type: str = "",
    file_name: str = "",
    remotes: RemoteResolver | None = None,
    tree: TreeSource | None = None,
) -> Outcome:
    """Resolve text to an outcome using the handlers that apply to the buffer."""
    ctx = HandlerContext(
        mode=mode,
        text=text,
        options=options,
        file_name=file_name,
        file_type=file_type,
        remotes=remotes,
        tree=tree,
    )
    handlers = options.handlers.eligible(file_type, file_name)
    outcome = resolve(collect(ctx, handlers))
    log.debug(
        "resolved",
        outcome=type(outcome).__name__,
        handlers=[h.name for h in handlers],
        file_type=file_type,
    )
    return outcome


# === Acting on outcomes ===


def format_item(candidate: Candidate) -> str:
    """Label for the choice prompt: '(name)<padding> url'."""
    pad = " " * max(0, LABEL_WIDTH - len(candidate.handler))
    return f"({candidate.handler}){pad} {candidate.url}"


Chooser = Callable[
    [Sequence[Candidate], str, Callable[[Candidate], str], Callable[[Candidate | None], None]],
    None,
]


def act(outcome: Outcome, opener: Opener, chooser: Chooser | None) -> None:
    """Open a single match, or hand multiple matches to the chooser.

    The chooser calls back with the selection, or None when cancelled.
    NoMatch and a cancelled choice do nothing.
    """
    if isinstance(outcome, SingleMatch):
        opener(outcome.url)
    elif isinstance(outcome, MultipleMatches):
        if chooser is None:
            return

        def on_choice(selected: Candidate | None) -> None:
            if selected is None:
                log.debug("choice_cancelled")
                return
            opener(selected.url)

        chooser(outcome.candidates, SELECT_PROMPT, format_item, on_choice)
