"""
gx - Open the URL, package, commit or issue under the cursor.

Finds every handler that recognizes the text and opens the one answer,
or asks when several handlers disagree.
"""

from __future__ import annotations

__version__ = "0.1.0"

from gx.core.config import setup
from gx.core.dispatcher import dispatch
from gx.gx import browse

__all__ = ["browse", "dispatch", "setup", "__version__"]
