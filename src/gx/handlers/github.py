"""
Issue reference handler: owner/repo#N, repo#N and #N link to the issue page.

References without an owner or repo resolve against the current
repository's remote.
"""

from __future__ import annotations

import re

from gx.handlers import HandlerContext

# Tried in order; the first that matches anywhere in the text wins.
# Names and numbers are ASCII only.
REFERENCES = (
    re.compile(r"(?<!\w)(?P<owner>[A-Za-z0-9_.-]+)/(?P<repo>[A-Za-z0-9_.-]+)#(?P<issue>[0-9]+)"),
    re.compile(r"(?<!\w)(?P<repo>[A-Za-z0-9_.-]+)#(?P<issue>[0-9]+)"),
    re.compile(r"#(?P<issue>[0-9]+)"),
)


def parse_reference(text: str) -> tuple[str, str, str] | None:
    """Return (owner, repo, issue) for the first matching form."""
    for pattern in REFERENCES:
        match = pattern.search(text)
        if match:
            groups = match.groupdict()
            return groups.get("owner") or "", groups.get("repo") or "", groups["issue"]
    return None


def resolve(ctx: HandlerContext) -> str | None:
    reference = parse_reference(ctx.text)
    if reference is None:
        return None
    owner, repo, issue = reference
    base = ctx.repo_url(owner, repo)
    if not base:
        return None
    return f"{base}/issues/{issue}"
