"""
Cargo.toml handler: dependency keys link to crates.io.
"""

from __future__ import annotations

import re

from gx.handlers import HandlerContext

FILENAME = "Cargo.toml"

# serde = "1.0", tokio = { version = "1" }
# Names are ASCII and must not continue a longer word
CRATE = re.compile(r"(?<!\w)([A-Za-z0-9_-]+)\s*=\s")


def resolve(ctx: HandlerContext) -> str | None:
    match = CRATE.search(ctx.text)
    if match:
        return f"https://crates.io/crates/{match.group(1)}"
    return None
