"""Persistent JSON config helpers.

Stores the collection strategy, exclusion pattern, compression flag, idle
interval, listing command, indent marker, and theme name. All access is
defensive: malformed or missing config falls back to defaults.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, replace
from pathlib import Path

from platformdirs import user_config_dir

from .errors import ConfigurationError
from .file_tree_model.fs import DEFAULT_EXCLUDE_PATTERN
from .file_tree_model.process import DEFAULT_LISTING_COMMAND
from .runtime.scheduler import DEFAULT_IDLE_INTERVAL_SECONDS
from .tree_text.codec import INDENT_MARKER

APP_NAME = "foldtree"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

STRATEGY_WALK = "walk"
STRATEGY_PROCESS = "process"
STRATEGY_INCREMENTAL = "incremental"
STRATEGIES = (STRATEGY_WALK, STRATEGY_PROCESS, STRATEGY_INCREMENTAL)
MAX_IDLE_INTERVAL_SECONDS = 5.0


@dataclass(frozen=True)
class TreeViewConfig:
    """Effective settings for one tree view."""

    strategy: str = STRATEGY_WALK
    exclude_pattern: str | None = DEFAULT_EXCLUDE_PATTERN
    compress: bool = True
    idle_interval_seconds: float = DEFAULT_IDLE_INTERVAL_SECONDS
    listing_command: tuple[str, ...] = DEFAULT_LISTING_COMMAND
    indent_marker: str = INDENT_MARKER
    theme: str | None = None

    def with_overrides(self, **overrides: object) -> TreeViewConfig:
        """Return a copy with non-``None`` overrides applied and validated."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        updated = replace(self, **changes)
        validate_config(updated)
        return updated


def validate_config(config: TreeViewConfig) -> None:
    """Raise ``ConfigurationError`` for settings a view cannot run with."""
    if config.strategy not in STRATEGIES:
        raise ConfigurationError(
            f"unknown collection strategy {config.strategy!r} (expected one of {', '.join(STRATEGIES)})"
        )
    if config.exclude_pattern:
        try:
            re.compile(config.exclude_pattern)
        except re.error as exc:
            raise ConfigurationError(f"invalid exclude pattern {config.exclude_pattern!r}: {exc}") from exc
    if not config.indent_marker or config.indent_marker.strip():
        raise ConfigurationError("indent marker must be non-empty whitespace")
    if not config.listing_command:
        raise ConfigurationError("listing command must not be empty")


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are ignored to keep runtime behavior non-fatal when
    config cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError:
        pass


def _coerce_strategy(value: object) -> str:
    if isinstance(value, str) and value.strip().lower() in STRATEGIES:
        return value.strip().lower()
    return STRATEGY_WALK


def _coerce_exclude_pattern(value: object) -> str | None:
    """Accept a compilable regex string; ``""`` disables exclusion."""
    if value is None or not isinstance(value, str):
        return DEFAULT_EXCLUDE_PATTERN
    if not value:
        return None
    try:
        re.compile(value)
    except re.error:
        return DEFAULT_EXCLUDE_PATTERN
    return value


def _coerce_interval(value: object) -> float:
    """Booleans and non-numbers fall back; others clamp to ``[0, 5]`` seconds."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_IDLE_INTERVAL_SECONDS
    return max(0.0, min(MAX_IDLE_INTERVAL_SECONDS, float(value)))


def _coerce_command(value: object) -> tuple[str, ...]:
    if not isinstance(value, list) or not value:
        return DEFAULT_LISTING_COMMAND
    if not all(isinstance(part, str) and part for part in value):
        return DEFAULT_LISTING_COMMAND
    return tuple(value)


def _coerce_indent(value: object) -> str:
    if isinstance(value, str) and value and not value.strip():
        return value
    return INDENT_MARKER


def load_tree_view_config() -> TreeViewConfig:
    """Build a ``TreeViewConfig`` from persisted data, sanitizing each key."""
    data = load_config()
    compress = data.get("compress")
    theme = data.get("theme")
    theme_name = theme.strip() if isinstance(theme, str) else ""
    return TreeViewConfig(
        strategy=_coerce_strategy(data.get("strategy")),
        exclude_pattern=_coerce_exclude_pattern(data.get("exclude_pattern")),
        compress=compress if isinstance(compress, bool) else True,
        idle_interval_seconds=_coerce_interval(data.get("idle_interval_seconds")),
        listing_command=_coerce_command(data.get("listing_command")),
        indent_marker=_coerce_indent(data.get("indent_marker")),
        theme=theme_name or None,
    )


def save_strategy(strategy: str) -> None:
    """Persist the preferred collection strategy."""
    if strategy not in STRATEGIES:
        raise ConfigurationError(f"unknown collection strategy {strategy!r}")
    config = load_config()
    config["strategy"] = strategy
    save_config(config)


def save_theme_name(theme_name: str) -> None:
    """Persist selected UI theme name."""
    stripped = str(theme_name).strip()
    if not stripped:
        return
    config = load_config()
    config["theme"] = stripped
    save_config(config)


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "STRATEGY_WALK",
    "STRATEGY_PROCESS",
    "STRATEGY_INCREMENTAL",
    "STRATEGIES",
    "TreeViewConfig",
    "validate_config",
    "load_config",
    "save_config",
    "load_tree_view_config",
    "save_strategy",
    "save_theme_name",
]
