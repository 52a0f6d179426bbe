"""
package.json handler: dependency keys link to npmjs.com.
"""

from __future__ import annotations

import re

from gx.handlers import HandlerContext

FILETYPES = frozenset({"json"})
FILENAME = "package.json"

PACKAGE = re.compile(r'"(\S*)":')


def resolve(ctx: HandlerContext) -> str | None:
    match = PACKAGE.search(ctx.text)
    if not match:
        return None
    return f"https://www.npmjs.com/package/{match.group(1)}"
