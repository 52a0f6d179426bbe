"""
CVE handler: CVE identifiers link to the NVD entry.
"""

from __future__ import annotations

import re

from gx.handlers import HandlerContext

# ASCII digits only, ending on a digit
CVE_ID = re.compile(r"(CVE[0-9-]*[0-9])")

MAX_ID_LENGTH = 20


def resolve(ctx: HandlerContext) -> str | None:
    match = CVE_ID.search(ctx.text)
    if not match or len(match.group(1)) > MAX_ID_LENGTH:
        return None
    return f"https://nvd.nist.gov/vuln/detail/{match.group(1)}"
