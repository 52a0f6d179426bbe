"""
Git remote resolution for gx.

Handlers that link into the hosting site (commit, github) need the base URL
of the current repository. GitRemotes asks the git executable for the URL of
the first configured remote that exists and normalizes it to
https://host/owner/repo.
"""

from __future__ import annotations

import re
import subprocess
from collections.abc import Sequence
from pathlib import Path

import structlog

log = structlog.get_logger()

GIT_TIMEOUT = 2.0

# git@github.com:owner/repo.git
_SCP_LIKE = re.compile(r"^(?:[^@/]+@)?(?P<host>[^:/]+):(?!//)(?P<path>.+)$")
# https://user@host/owner/repo.git, ssh://git@host:22/owner/repo, git://host/owner/repo
_URL_LIKE = re.compile(
    r"^(?:https?|ssh|git|git\+ssh)://(?:[^@/]+@)?(?P<host>[^/:]+)(?::\d+)?/(?P<path>.+)$"
)


def split_remote_url(url: str) -> tuple[str, str] | None:
    """Split a remote URL into (host, repository path). None for local remotes."""
    url = url.strip()
    match = _URL_LIKE.match(url) or _SCP_LIKE.match(url)
    if not match:
        return None
    path = match.group("path").rstrip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]
    if not path:
        return None
    return match.group("host"), path


def normalize_remote_url(url: str, owner: str = "", repo: str = "") -> str | None:
    """Return the https base URL of a remote, optionally pointing at another repo.

    With both owner and repo, the repository path is replaced. With only a
    repo, the last path component is replaced and the owner is kept.
    """
    parts = split_remote_url(url)
    if parts is None:
        return None
    host, path = parts
    if owner and repo:
        path = f"{owner}/{repo}"
    elif repo:
        head, _, _ = path.rpartition("/")
        path = f"{head}/{repo}" if head else repo
    return f"https://{host}/{path}"


def _matches_hint(url: str, owner: str, repo: str) -> bool:
    parts = split_remote_url(url)
    if parts is None:
        return False
    _, path = parts
    if owner and repo:
        return path.lower() == f"{owner}/{repo}".lower()
    return path.lower().rpartition("/")[2] == repo.lower()


class GitRemotes:
    """RemoteResolver backed by `git remote get-url`."""

    def __init__(self, cwd: Path | None = None, timeout: float = GIT_TIMEOUT):
        self.cwd = cwd
        self.timeout = timeout

    def get_url(self, name: str, push: bool = False) -> str | None:
        """URL of one remote, or None if git or the remote is unavailable."""
        cmd = ["git", "remote", "get-url"]
        if push:
            cmd.append("--push")
        cmd.append(name)
        try:
            result = subprocess.run(
                cmd,
                cwd=self.cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.SubprocessError) as e:
            log.debug("git_failed", remote=name, error=str(e))
            return None
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def remote_url(
        self,
        remotes: Sequence[str],
        push: bool,
        owner: str = "",
        repo: str = "",
    ) -> str | None:
        """Base URL from the first remote that exists.

        When an owner/repo hint is given and some configured remote already
        points at that repository, that remote is used instead, so every
        remote is looked up. Without a hint the lookup stops at the first.
        """
        if not repo:
            for name in remotes:
                url = self.get_url(name, push)
                if url:
                    return normalize_remote_url(url, owner, repo)
            return None
        urls = [u for u in (self.get_url(name, push) for name in remotes) if u]
        if not urls:
            return None
        for url in urls:
            if _matches_hint(url, owner, repo):
                return normalize_remote_url(url)
        return normalize_remote_url(urls[0], owner, repo)
