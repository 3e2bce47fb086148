"""UI theme definitions and selection helpers.

Themes are ANSI palettes for printed tree documents: directory rows, file
rows, and the placeholder shown after a collapsed directory.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by document formatters."""

    name: str
    reset: str
    tree_dir: str
    tree_file_python: str
    tree_file_default: str
    tree_fold_placeholder: str
    tree_title: str
    status_error: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    tree_dir="\033[1;34m",
    tree_file_python="\033[38;5;110m",
    tree_file_default="\033[38;5;252m",
    tree_fold_placeholder="\033[38;5;44m",
    tree_title="\033[1;38;5;81m",
    status_error="\033[1;31m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    tree_dir="\033[1;38;5;45m",
    tree_file_python="\033[38;5;117m",
    tree_file_default="\033[38;5;252m",
    tree_fold_placeholder="\033[38;5;39m",
    tree_title="\033[1;38;5;45m",
    status_error="\033[1;38;5;203m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    tree_dir="",
    tree_file_python="",
    tree_file_default="",
    tree_fold_placeholder="",
    tree_title="",
    status_error="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
    PLAIN_THEME.name: PLAIN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
