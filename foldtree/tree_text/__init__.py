"""Indentation-text codec for collected trees.

Rendering, row -> path resolution by backward depth scan, and path -> row
navigation. ANSI formatting lives in ``display``.
"""

from __future__ import annotations

from .codec import (
    INDENT_MARKER,
    SEPARATOR,
    FoldSpan,
    RenderedDocument,
    ancestor_lines,
    line_depth,
    local_name,
    parent_line,
    render_tree,
    resolve_path,
    subtree_end,
)
from .navigation import NavigationResult, navigate_to, target_segments

__all__ = [
    "INDENT_MARKER",
    "SEPARATOR",
    "FoldSpan",
    "RenderedDocument",
    "ancestor_lines",
    "line_depth",
    "local_name",
    "parent_line",
    "render_tree",
    "resolve_path",
    "subtree_end",
    "NavigationResult",
    "navigate_to",
    "target_segments",
]
