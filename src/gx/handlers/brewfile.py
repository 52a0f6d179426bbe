"""
Brewfile handler: brew/cask entries link to formulae.brew.sh.
"""

from __future__ import annotations

import re

from gx.handlers import HandlerContext

FILENAME = "Brewfile"

BREW = re.compile(r'brew "(\S*)"')
CASK = re.compile(r'cask "(\S*)"')


def resolve(ctx: HandlerContext) -> str | None:
    # brew wins when a line somehow has both
    brew = BREW.search(ctx.text)
    if brew:
        return f"https://formulae.brew.sh/formula/{brew.group(1)}"
    cask = CASK.search(ctx.text)
    if cask:
        return f"https://formulae.brew.sh/cask/{cask.group(1)}"
    return None
