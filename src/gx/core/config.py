"""gx configuration: options, defaults, file loading and merging."""

from __future__ import annotations

import os
import re
import tomllib
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from gx.core.registry import Handler, Registry, Scope
from gx.core.resolvers import CustomResolver, LiteralPattern, Resolver

USER_CONFIG = Path.home() / ".config" / "gx" / "config.toml"
PROJECT_CONFIG_NAME = ".gx.toml"
ENV_CONFIG = "GX_CONFIG"
DEFAULT_LOG = Path.home() / ".local" / "state" / "gx" / "gx.log"

# Config scopes in priority order (lowest to highest)
SCOPE_USER = "user"
SCOPE_PROJECT = "project"
SCOPE_ENV = "env"

SEARCH_ENGINE_DEFAULT = "google"
HANDLER_KEYS = frozenset({"filetype", "filename", "disable", "handle"})


class ConfigError(ValueError):
    """Invalid configuration. The message names the offending key."""


@dataclass(frozen=True)
class Options:
    """Resolved configuration snapshot. Read-only during a dispatch."""

    git_remote_push: bool | Callable[[str], bool] = False
    git_remotes: Sequence[str] | Callable[[str], Sequence[str]] = ("upstream", "origin")
    leave_visual: bool = True
    search_engine: str = SEARCH_ENGINE_DEFAULT
    handlers: Registry = field(default_factory=lambda: build_registry(default_handler_specs()))
    log: Path | None = None  # None = DEFAULT_LOG
    verbose: bool = False


# === Defaults ===


def default_handler_specs() -> dict[str, dict[str, Any]]:
    """Built-in handlers as raw specs, the shape users override."""
    from gx.handlers import builtin_handlers

    specs = {}
    for handler in builtin_handlers():
        spec: dict[str, Any] = {"handle": handler.resolver}
        if handler.scope.file_types:
            spec["filetype"] = sorted(handler.scope.file_types)
        if handler.scope.file_name:
            spec["filename"] = handler.scope.file_name
        specs[handler.name] = spec
    return specs


def defaults() -> dict[str, Any]:
    """Raw default options, before any user configuration."""
    return {
        "git_remote_push": False,
        "git_remotes": ["upstream", "origin"],
        "leave_visual": True,
        "search_engine": SEARCH_ENGINE_DEFAULT,
        "handlers": default_handler_specs(),
    }


# === Merging ===


def deep_merge(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> dict[str, Any]:
    """Merge overlay into base. Nested tables merge, every other value is replaced."""
    result = dict(base)
    for key, value in overlay.items():
        if isinstance(value, Mapping) and isinstance(result.get(key), Mapping):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


# === Building ===


def _build_resolver(name: str, handle: Any) -> Resolver:
    if isinstance(handle, str):
        try:
            return LiteralPattern.compile(handle)
        except re.error as e:
            raise ConfigError(f"handlers.{name}.handle: invalid pattern: {e}") from None
    if hasattr(handle, "try_resolve"):
        return handle
    if callable(handle):
        return CustomResolver.from_user(handle)
    raise ConfigError(f"handlers.{name}.handle: expected a pattern or a function")


def build_handler(name: str, spec: Mapping[str, Any]) -> Handler:
    """Build one Handler from its raw spec. Raises ConfigError."""
    if not isinstance(spec, Mapping):
        raise ConfigError(f"handlers.{name}: expected a table")
    unknown = set(spec) - HANDLER_KEYS
    if unknown:
        raise ConfigError(f"handlers.{name}: unknown option '{sorted(unknown)[0]}'")
    if "handle" not in spec:
        raise ConfigError(f"handlers.{name}: 'handle' is required")

    filetype = spec.get("filetype") or None
    if isinstance(filetype, str):
        filetype = [filetype]
    if filetype is not None and not all(isinstance(t, str) for t in filetype):
        raise ConfigError(f"handlers.{name}.filetype: expected a string or list of strings")

    filename = spec.get("filename") or None
    if filename is not None:
        if not isinstance(filename, str):
            raise ConfigError(f"handlers.{name}.filename: expected a string")
        try:
            re.compile(filename)
        except re.error as e:
            raise ConfigError(f"handlers.{name}.filename: invalid pattern: {e}") from None

    disable = spec.get("disable", False)
    if not isinstance(disable, bool):
        raise ConfigError(f"handlers.{name}.disable: expected true or false")

    return Handler(
        name=name,
        resolver=_build_resolver(name, spec["handle"]),
        scope=Scope(
            file_types=frozenset(filetype) if filetype else None,
            file_name=filename,
        ),
        disabled=disable,
    )


def build_registry(specs: Mapping[str, Mapping[str, Any]]) -> Registry:
    """Build a registry from raw specs, keeping their order."""
    return Registry(build_handler(name, spec) for name, spec in specs.items())


def _check_bool_or_callable(key: str, value: Any) -> None:
    if not isinstance(value, bool) and not callable(value):
        raise ConfigError(f"{key}: expected true, false or a function")


def build_options(raw: Mapping[str, Any] | None = None) -> Options:
    """Merge raw user options over the defaults and validate. Raises ConfigError."""
    merged = deep_merge(defaults(), raw or {})

    known = {"git_remote_push", "git_remotes", "leave_visual", "search_engine", "handlers", "log", "verbose"}
    unknown = set(merged) - known
    if unknown:
        raise ConfigError(f"unknown option '{sorted(unknown)[0]}'")

    _check_bool_or_callable("git_remote_push", merged["git_remote_push"])

    remotes = merged["git_remotes"]
    if isinstance(remotes, str):
        remotes = [remotes]
    if not callable(remotes):
        if not isinstance(remotes, Sequence) or not all(isinstance(r, str) for r in remotes):
            raise ConfigError("git_remotes: expected a list of remote names or a function")
        remotes = tuple(remotes)

    if not isinstance(merged["leave_visual"], bool):
        raise ConfigError("leave_visual: expected true or false")
    if not isinstance(merged["search_engine"], str) or not merged["search_engine"]:
        raise ConfigError("search_engine: expected an engine name or a URL template")
    if not isinstance(merged["handlers"], Mapping):
        raise ConfigError("handlers: expected a table")
    if not isinstance(merged.get("verbose", False), bool):
        raise ConfigError("verbose: expected true or false")

    log = merged.get("log")
    if log is not None:
        if not isinstance(log, (str, Path)):
            raise ConfigError("log: expected a path")
        log = Path(log).expanduser()

    return Options(
        git_remote_push=merged["git_remote_push"],
        git_remotes=remotes,
        leave_visual=merged["leave_visual"],
        search_engine=merged["search_engine"],
        handlers=build_registry(merged["handlers"]),
        log=log,
        verbose=merged.get("verbose", False),
    )


# === Config Loading ===


def _find_project_config(cwd: Path) -> Path | None:
    """Walk up from cwd to find .gx.toml."""
    current = cwd.resolve()
    while True:
        candidate = current / PROJECT_CONFIG_NAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:  # reached root
            return None
        current = parent


def load_config_file(config_path: Path) -> dict[str, Any]:
    """Parse one TOML config file. Raises ConfigError on syntax errors."""
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{config_path}: {e}") from None


def config_paths(cwd: Path) -> list[tuple[str, Path]]:
    """Existing config files as (scope, path), lowest priority first."""
    paths = []
    if USER_CONFIG.is_file():
        paths.append((SCOPE_USER, USER_CONFIG))
    project_path = _find_project_config(cwd)
    if project_path is not None:
        paths.append((SCOPE_PROJECT, project_path))
    env_path = os.environ.get(ENV_CONFIG)
    if env_path:
        env_config_path = Path(env_path).expanduser()
        if env_config_path.is_file():
            paths.append((SCOPE_ENV, env_config_path))
    return paths


def load_config(cwd: Path) -> dict[str, Any]:
    """Load and merge ~/.config/gx/config.toml, .gx.toml and $GX_CONFIG. Later wins."""
    raw: dict[str, Any] = {}
    for _scope, path in config_paths(cwd):
        raw = deep_merge(raw, load_config_file(path))
    return raw


# === Process-wide options ===

_options: Options | None = None


def setup(opts: Mapping[str, Any] | None = None) -> Options:
    """Rebuild the process default options. Never call during a dispatch."""
    global _options
    _options = build_options(opts)
    return _options


def get_options() -> Options:
    """Current process default options, built from defaults on first use."""
    global _options
    if _options is None:
        _options = build_options()
    return _options
