"""Path -> row navigation over a rendered document."""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass

from .codec import SEPARATOR, RenderedDocument, subtree_end


@dataclass(frozen=True)
class NavigationResult:
    """Row reached by navigation; ``exact`` is false for a closest-ancestor hit."""

    line: int
    exact: bool


def target_segments(document: RenderedDocument, path: str | os.PathLike[str]) -> list[str] | None:
    """Split ``path`` into segments relative to ``document.root``.

    Absolute paths outside the root return ``None``; relative paths are taken
    as already relative to the root.
    """
    text = os.fspath(path)
    if text.startswith(SEPARATOR):
        root = document.root
        if text.rstrip(SEPARATOR) + SEPARATOR == root:
            return []
        if not text.startswith(root):
            return None
        text = text[len(root):]
    return [segment for segment in text.split(SEPARATOR) if segment and segment != "."]


def _consumed_segments(document: RenderedDocument, line: int, segments: list[str], position: int) -> int:
    """Return how many target segments ``line``'s label covers, or 0.

    Compressed rows (``a/b``) cover several segments at once.
    """
    label_parts = document.name(line).split(SEPARATOR)
    end = position + len(label_parts)
    if segments[position:end] != label_parts:
        return 0
    if end < len(segments) and not document.is_directory(line):
        return 0
    return len(label_parts)


def _search(
    document: RenderedDocument,
    segments: list[str],
    position: int,
    depth: int,
    lo: int,
    hi: int,
) -> tuple[int, int] | None:
    """Bounded forward search for a row of exactly ``depth`` matching next segments."""
    for idx in range(lo, hi):
        if document.depth(idx) != depth:
            continue
        consumed = _consumed_segments(document, idx, segments, position)
        if consumed:
            return idx, consumed
    return None


def navigate_to(
    document: RenderedDocument,
    path: str | os.PathLike[str],
    cursor: int | None = None,
    is_collapsed: Callable[[int], bool] | None = None,
) -> NavigationResult | None:
    """Locate the row for ``path``.

    Each level first checks whether ``cursor`` already sits on the matching
    header (cheap after a rebuild), then searches forward no further than the
    current match's own subtree so a same-named cousin is never picked. The
    deepest row matched is returned with ``exact=False`` when the full path is
    missing, or when descent stops at a header ``is_collapsed`` reports as
    folded. ``None`` means not even the first segment matched.
    """
    segments = target_segments(document, path)
    if not segments:
        return None

    lo, hi = 0, len(document)
    depth = 0
    position = 0
    best: int | None = None
    while position < len(segments):
        matched: tuple[int, int] | None = None
        if (
            cursor is not None
            and lo <= cursor < hi
            and document.depth(cursor) == depth
            and document.is_directory(cursor)
        ):
            consumed = _consumed_segments(document, cursor, segments, position)
            if consumed:
                matched = (cursor, consumed)
        if matched is None:
            matched = _search(document, segments, position, depth, lo, hi)
        if matched is None:
            break

        line, consumed = matched
        best = line
        position += consumed
        if position >= len(segments):
            return NavigationResult(line, True)
        if is_collapsed is not None and is_collapsed(line):
            break
        lo, hi = line + 1, subtree_end(document, line)
        depth += 1

    if best is None:
        return None
    return NavigationResult(best, False)


__all__ = [
    "NavigationResult",
    "target_segments",
    "navigate_to",
]
