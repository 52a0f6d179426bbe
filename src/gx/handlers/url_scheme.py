"""
URL scheme handler: text that already contains an http(s) URL.

A match here short-circuits every other handler.
"""

from gx.core.patterns import URL_SCHEME

PATTERN = URL_SCHEME
