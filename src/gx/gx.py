"""Editor hook and Python API for opening the target under the cursor.

The editor sends its state as JSON on stdin; gx finds every handler that
recognizes the text and answers with a single decision on stdout:

┌──────────┬──────────────────────────────────────────────────────────────┐
│ action   │ Editor behavior                                              │
├──────────┼──────────────────────────────────────────────────────────────┤
│ "open"   │ Open "url" with the platform opener.                         │
│ "select" │ Show "items" with "prompt"; open the chosen item's "url".    │
│ "none"   │ Nothing matched. Do nothing, show nothing.                   │
└──────────┴──────────────────────────────────────────────────────────────┘

Every response carries "leave_visual": whether the editor should exit visual
mode before acting. Input keys (all optional):

    text       explicit text, skips word/selection lookup
    mode       editor mode ("n", "v", "V", "\\x16", ...)
    filetype   buffer file type
    filename   buffer path
    word       word under the cursor (normal mode)
    selection  selected lines (visual modes)
    cwd        directory for config lookup and git
    syntax     syntax tree document, see gx.core.syntax.DictTree

The exit code is always 0. Decisions are logged as JSON lines.
"""

from __future__ import annotations

import json
import logging
import sys
import webbrowser
from collections.abc import Callable
from pathlib import Path
from typing import Any

import structlog

from gx.core.config import (
    DEFAULT_LOG,
    ConfigError,
    Options,
    build_options,
    get_options,
    load_config,
)
from gx.core.context import VISUAL_MODES, EditorState, Opener, RemoteResolver, TextSource, get_text
from gx.core.dispatcher import (
    SELECT_PROMPT,
    Chooser,
    MultipleMatches,
    NoMatch,
    Outcome,
    SingleMatch,
    act,
    dispatch,
    format_item,
)
from gx.core.git import GitRemotes
from gx.core.syntax import DictTree, TreeSource

log = structlog.get_logger()


def setup_logging(path: Path = DEFAULT_LOG, verbose: bool = False) -> None:
    """Configure structlog to write JSON lines to path.

    Falls back to warnings on stderr if the log file is unavailable; stdout
    is reserved for the hook response.
    """
    level = logging.DEBUG if verbose else logging.INFO
    processors = [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.JSONRenderer(),
    ]
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        stream = open(path, "a", encoding="utf-8")
    except OSError:
        structlog.configure(
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
            logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        )
        return
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=stream),
    )


def _default_remotes(file_name: str, cwd: Path | None = None) -> GitRemotes:
    if file_name:
        parent = Path(file_name).expanduser().parent
        if parent.is_dir():
            return GitRemotes(cwd=parent)
    return GitRemotes(cwd=cwd)


def browse(
    text: str | None = None,
    source: TextSource | None = None,
    options: Options | None = None,
    remotes: RemoteResolver | None = None,
    tree: TreeSource | None = None,
    opener: Opener = webbrowser.open,
    chooser: Chooser | None = None,
    leave_visual: Callable[[], object] | None = None,
) -> Outcome:
    """Resolve text (or the editor's current text) and act on it.

    Returns the outcome so callers can tell what happened; the opener and
    chooser have already been called by then.
    """
    options = options or get_options()
    mode = source.mode if source is not None else "n"
    file_type = source.file_type if source is not None else ""
    file_name = source.file_name if source is not None else ""

    if text is None and source is not None:
        text = get_text(source, mode)
    if not text:
        return NoMatch()

    if remotes is None:
        remotes = _default_remotes(file_name)

    outcome = dispatch(
        text,
        options,
        mode=mode,
        file_type=file_type,
        file_name=file_name,
        remotes=remotes,
        tree=tree,
    )
    if leave_visual is not None and options.leave_visual and mode in VISUAL_MODES:
        leave_visual()
    act(outcome, opener, chooser)
    return outcome


def _str_field(input_data: dict[str, Any], key: str) -> str | None:
    """A string field of the request; other JSON types count as absent."""
    value = input_data.get(key)
    return value if isinstance(value, str) else None


def _editor_state(input_data: dict[str, Any]) -> EditorState:
    selection = input_data.get("selection")
    if isinstance(selection, str):
        selection = selection.split("\n")
    elif not isinstance(selection, list):
        selection = []
    return EditorState(
        mode=_str_field(input_data, "mode") or "n",
        file_type=_str_field(input_data, "filetype") or "",
        file_name=_str_field(input_data, "filename") or "",
        word=_str_field(input_data, "word"),
        selected=[str(line) for line in selection],
    )


def handle_hook(input_data: dict[str, Any], options: Options, remotes: RemoteResolver | None = None) -> dict[str, Any]:
    """Turn one hook request into a JSON-ready response."""
    state = _editor_state(input_data)
    leave_visual = options.leave_visual and state.mode in VISUAL_MODES

    text = _str_field(input_data, "text")
    if text is None:
        text = get_text(state)
    if not text:
        log.info("no_match", reason="no_text", mode=state.mode)
        return {"action": "none", "leave_visual": leave_visual}

    tree = None
    syntax = input_data.get("syntax")
    if syntax:
        try:
            tree = DictTree.from_dict(syntax)
        except (TypeError, ValueError, AttributeError) as e:
            log.info("syntax_ignored", error=str(e))

    if remotes is None:
        cwd = _str_field(input_data, "cwd")
        remotes = _default_remotes(state.file_name, Path(cwd) if cwd else None)

    outcome = dispatch(
        text,
        options,
        mode=state.mode,
        file_type=state.file_type,
        file_name=state.file_name,
        remotes=remotes,
        tree=tree,
    )

    if isinstance(outcome, SingleMatch):
        log.info("open", text=text, url=outcome.url, handler=outcome.handler)
        return {
            "action": "open",
            "url": outcome.url,
            "handler": outcome.handler,
            "leave_visual": leave_visual,
        }
    if isinstance(outcome, MultipleMatches):
        log.info("select", text=text, handlers=[c.handler for c in outcome.candidates])
        return {
            "action": "select",
            "prompt": SELECT_PROMPT,
            "items": [
                {"name": c.handler, "url": c.url, "label": format_item(c)}
                for c in outcome.candidates
            ],
            "leave_visual": leave_visual,
        }
    log.info("no_match", reason="no_handler", text=text)
    return {"action": "none", "leave_visual": leave_visual}


def _read_input(raw: str) -> dict[str, Any] | None:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def main() -> None:
    input_data = _read_input(sys.stdin.read())

    cwd = Path.cwd()
    request_cwd = _str_field(input_data, "cwd") if input_data else None
    if request_cwd:
        cwd = Path(request_cwd).expanduser()

    try:
        options = build_options(load_config(cwd))
    except ConfigError as e:
        print(f"Warning: {e}", file=sys.stderr)
        options = build_options()

    setup_logging(options.log or DEFAULT_LOG, options.verbose)

    if input_data is None:
        log.info("no_match", reason="bad_input")
        response = {"action": "none", "leave_visual": False}
    else:
        response = handle_hook(input_data, options)

    print(json.dumps(response))
    sys.exit(0)


if __name__ == "__main__":
    main()
