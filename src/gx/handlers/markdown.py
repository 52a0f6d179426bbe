"""
Markdown handler: the target of an inline [label](url) link.
"""

from gx.core.patterns import MARKDOWN_LINK

FILETYPES = frozenset({"markdown"})

PATTERN = MARKDOWN_LINK
