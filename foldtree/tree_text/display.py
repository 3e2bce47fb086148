"""ANSI formatting of visible document rows."""

from __future__ import annotations

from collections.abc import Iterable

from ..folding.manager import FOLD_PLACEHOLDER
from ..ui_theme import DEFAULT_THEME, UITheme
from .codec import INDENT_MARKER, SEPARATOR, line_depth


def file_color_for(name: str, theme: UITheme | None = None) -> str:
    """Return ANSI color used for file names based on suffix."""
    active_theme = theme or DEFAULT_THEME
    if name.lower().endswith((".py", ".pyi", ".pyw")):
        return active_theme.tree_file_python
    return active_theme.tree_file_default


def format_row(
    text: str,
    indent: str = INDENT_MARKER,
    theme: UITheme | None = None,
    placeholder: str = FOLD_PLACEHOLDER,
) -> str:
    """Color one visible row; a trailing fold placeholder is styled separately."""
    active_theme = theme or DEFAULT_THEME
    reset = active_theme.reset
    folded = bool(placeholder) and text.endswith(SEPARATOR + placeholder)
    if folded:
        text = text[: -len(placeholder)]
    depth = line_depth(text, indent)
    prefix = text[: depth * len(indent)]
    label = text[len(prefix):]
    if label.endswith(SEPARATOR):
        row = f"{prefix}{active_theme.tree_dir}{label}{reset}"
    else:
        row = f"{prefix}{file_color_for(label, active_theme)}{label}{reset}"
    if folded:
        row += f"{active_theme.tree_fold_placeholder}{placeholder}{reset}"
    return row


def format_document(
    title: str,
    rows: Iterable[tuple[int, str]],
    indent: str = INDENT_MARKER,
    theme: UITheme | None = None,
) -> str:
    """Render a title line plus visible rows as newline-terminated text."""
    active_theme = theme or DEFAULT_THEME
    out = [f"{active_theme.tree_title}{title}{SEPARATOR}{active_theme.reset}\n"]
    for _idx, text in rows:
        out.append(format_row(text, indent, active_theme) + "\n")
    return "".join(out)


__all__ = [
    "file_color_for",
    "format_row",
    "format_document",
]
