"""
Search handler: fallback web search for any text.

Demoted by the resolution policy whenever another handler matched.
"""

from __future__ import annotations

from gx.core.patterns import lookup_template, urlencode
from gx.handlers import HandlerContext


def resolve(ctx: HandlerContext) -> str | None:
    if not ctx.text:
        return None
    return lookup_template(ctx.options.search_engine) + urlencode(ctx.text)
