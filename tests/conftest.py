"""
Shared test fixtures for gx tests.
"""

from collections.abc import Sequence

import pytest

from gx.core.config import Options, build_options
from gx.core.dispatcher import dispatch
from gx.core.git import normalize_remote_url
from gx.core.resolvers import HandlerContext


class FakeRemotes:
    """RemoteResolver that normalizes a fixed remote URL and records calls."""

    def __init__(self, url: str | None = "git@github.com:me/proj.git"):
        self.url = url
        self.calls: list[tuple[list[str], bool, str, str]] = []

    def remote_url(self, remotes: Sequence[str], push: bool, owner: str = "", repo: str = "") -> str | None:
        self.calls.append((list(remotes), push, owner, repo))
        if self.url is None:
            return None
        return normalize_remote_url(self.url, owner, repo)


def only(*names: str, **opts) -> Options:
    """Options with every built-in handler disabled except names."""
    from gx.handlers import KNOWN_HANDLERS

    handlers = {name: {"disable": True} for name in KNOWN_HANDLERS if name not in names}
    return build_options({**opts, "handlers": handlers})


@pytest.fixture
def remotes():
    return FakeRemotes()


@pytest.fixture
def no_remotes():
    return FakeRemotes(url=None)


@pytest.fixture
def options():
    return build_options()


@pytest.fixture
def run(options, no_remotes):
    """Return a dispatch wrapper with default options and no git remote."""

    def _run(text: str, file_type: str = "", file_name: str = "", **kwargs):
        kwargs.setdefault("options", options)
        kwargs.setdefault("remotes", no_remotes)
        opts = kwargs.pop("options")
        return dispatch(text, opts, file_type=file_type, file_name=file_name, **kwargs)

    return _run


@pytest.fixture
def ctx(options, remotes):
    """Factory for HandlerContext with default options and a fake remote."""

    def _make(text: str, **kwargs) -> HandlerContext:
        kwargs.setdefault("options", options)
        kwargs.setdefault("remotes", remotes)
        return HandlerContext(mode=kwargs.pop("mode", "n"), text=text, **kwargs)

    return _make
