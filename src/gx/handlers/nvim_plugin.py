"""
Editor plugin handler: quoted "owner/repo" specs in lua and vim files.
"""

from __future__ import annotations

import re

from gx.handlers import HandlerContext

FILETYPES = frozenset({"lua", "vim"})

# "folke/lazy.nvim" or 'tpope/vim-fugitive'; no ~ so paths don't match
PLUGIN = re.compile(r"[\"']([^\s~/]*/[^\s~/]*)[\"']")


def resolve(ctx: HandlerContext) -> str | None:
    match = PLUGIN.search(ctx.text)
    if match:
        return f"https://github.com/{match.group(1)}"
    return None
