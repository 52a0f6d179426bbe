"""
Shared URL patterns and search-engine templates for gx.
"""

from __future__ import annotations


# === Search Engines ===
# Query templates; the encoded text is appended as-is.

SEARCH_ENGINES = {
    "google": "https://www.google.com/search?q=",
    "bing": "https://www.bing.com/search?q=",
    "duckduckgo": "https://duckduckgo.com/?q=",
    "ecosia": "https://www.ecosia.org/search?q=",
    "yandex": "https://ya.ru/search?text=",
}


def lookup_template(key: str) -> str:
    """Return the query template for a search engine.

    Unknown keys are taken to be a template themselves, so users can set
    search_engine = "https://search.example/?q=".
    """
    return SEARCH_ENGINES.get(key, key)


# Bytes that pass through urlencode unchanged (space is handled afterwards)
_UNRESERVED = frozenset(
    b"abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789 _%.~-"
)


def urlencode(text: str) -> str:
    """Encode text for a search query string.

    Newlines become CRLF, every byte outside [A-Za-z0-9 _%.~-] is
    percent-encoded, then spaces become '+'.
    """
    text = text.replace("\n", "\r\n")
    out = []
    for byte in text.encode("utf-8"):
        if byte in _UNRESERVED:
            out.append(chr(byte))
        else:
            out.append(f"%{byte:02X}")
    return "".join(out).replace(" ", "+")


# === Literal Patterns ===
# Character classes shared by the literal built-in handlers.

# http(s) URL run; the en-dash is literal, common in pasted wiki links
URL_SCHEME = r"(https?://[a-zA-Z0-9_/%\-.~@\\+#=?&:–]+)"

# [label](http(s)://...)
MARKDOWN_LINK = (
    r"\[[a-zA-Z0-9\s.,?!:;@_{}~]*\]"
    r"\((https?://[a-zA-Z0-9_/\-.~@\\+#=?&]+)\)"
)

