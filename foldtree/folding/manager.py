"""Fold/unfold operations over a rendered document plus remembered open paths.

The document starts fully expanded; annotations exist only where the user
collapsed something. ``FoldSet`` is kept alongside so expansion depth can be
replayed after a rebuild.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator

from loguru import logger

from ..tree_text.codec import RenderedDocument, ancestor_lines, parent_line, resolve_path
from ..tree_text.navigation import navigate_to
from .annotations import FoldAnnotation, FoldAnnotationStore
from .fold_set import FoldSet

FOLD_PLACEHOLDER = " ..."


class FoldManager:
    """Collapsed ranges for one document and the view's remembered open paths."""

    def __init__(self, document: RenderedDocument, fold_set: FoldSet | None = None) -> None:
        self.document = document
        self.fold_set = fold_set if fold_set is not None else FoldSet()
        self.annotations = FoldAnnotationStore()

    def _locate(self, path: str | os.PathLike[str]) -> int | None:
        """Return the row for ``path`` ignoring folds, or ``None`` if absent."""
        result = navigate_to(self.document, path)
        if result is None or not result.exact:
            return None
        return result.line

    def _attach(self, line: int) -> bool:
        span = self.document.children_span(line)
        if span is None or self.annotations.at_header(line) is not None:
            return False
        self.annotations.add(
            FoldAnnotation(
                path=resolve_path(self.document, line),
                header=line,
                start=span.start,
                end=span.end,
                priority=span.priority,
            )
        )
        return True

    def is_collapsed_line(self, line: int) -> bool:
        return self.annotations.at_header(line) is not None

    def is_hidden_line(self, line: int) -> bool:
        return self.annotations.covering(line) is not None

    def is_folded(self, path: str | os.PathLike[str]) -> bool:
        line = self._locate(path)
        return line is not None and self.is_collapsed_line(line)

    def fold(self, path: str | os.PathLike[str]) -> bool:
        """Collapse ``path``; return ``False`` for leaves, folded or unknown rows.

        Paths remembered below ``path`` are collapsed as well, so opening
        ``path`` again later does not expand everything beneath it.
        """
        line = self._locate(path)
        if line is None or self.document.children_span(line) is None:
            return False
        if self.is_collapsed_line(line):
            return False

        key = resolve_path(self.document, line)
        parent = parent_line(self.document, line)
        parent_key = resolve_path(self.document, parent) if parent is not None else None
        reopened = self.fold_set.close(key, parent_key)
        self._attach(line)
        for reopened_path in sorted(reopened):
            if reopened_path == key:
                continue
            inner = self._locate(reopened_path)
            if inner is not None:
                self._attach(inner)
        logger.debug("Folded {} ({} nested paths kept collapsed)", key, len(reopened - {key}))
        return True

    def unfold(self, path: str | os.PathLike[str], recursive: bool = False) -> bool:
        """Expand ``path``; ``recursive`` also expands every fold inside it."""
        line = self._locate(path)
        if line is None or not self.document.is_directory(line):
            return False
        key = resolve_path(self.document, line)
        self.annotations.remove(key)
        span = self.document.children_span(line)
        if recursive and span is not None:
            for annotation in self.annotations.nested_within(span.start, span.end):
                self.annotations.remove(annotation.path)
        self.fold_set.open(key)
        return True

    def reveal(self, path: str | os.PathLike[str]) -> bool:
        """Expand ``path`` and every ancestor header without touching ``FoldSet``."""
        result = navigate_to(self.document, path)
        if result is None:
            return False
        for header in (result.line, *ancestor_lines(self.document, result.line)):
            annotation = self.annotations.at_header(header)
            if annotation is not None:
                self.annotations.remove(annotation.path)
        return True

    def restore_after_rebuild(self, previous_folds: Iterable[str] = ()) -> None:
        """Replay collapse state onto a freshly rendered document.

        Previously collapsed paths that still exist are collapsed again, then
        every remembered open path is revealed.
        """
        for path in previous_folds:
            line = self._locate(path)
            if line is not None:
                self._attach(line)
        for path in list(self.fold_set):
            self.reveal(path)

    def visible_lines(self, placeholder: str = FOLD_PLACEHOLDER) -> Iterator[tuple[int, str]]:
        """Yield ``(row, text)`` for rows not hidden under a collapsed header."""
        for idx, line in enumerate(self.document.lines):
            if self.is_hidden_line(idx):
                continue
            if self.is_collapsed_line(idx):
                yield idx, f"{line}{placeholder}"
            else:
                yield idx, line


__all__ = [
    "FOLD_PLACEHOLDER",
    "FoldManager",
]
