"""
Commit handler: abbreviated or full hashes link to the repository's commit page.
"""

from __future__ import annotations

import re

from gx.handlers import HandlerContext

HASH = re.compile(r"([0-9a-fA-F]{7,})")

# Full SHA-1 length; anything longer is not a commit hash
MAX_HASH_LENGTH = 40


def resolve(ctx: HandlerContext) -> str | None:
    match = HASH.search(ctx.text)
    if not match or len(match.group(1)) > MAX_HASH_LENGTH:
        return None
    base = ctx.repo_url()
    if not base:
        return None
    return f"{base}/commit/{match.group(1)}"
