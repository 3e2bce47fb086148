"""Per-view state: root, document, fold memory, cursor, and the rebuild guard.

A ``TreeView`` is the surface a host shell drives. All of its state is
private to the instance; collectors deliver results through the view's
scheduler so mutations stay on one logical thread.
"""

from __future__ import annotations

import enum
import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from ..config import STRATEGY_INCREMENTAL, STRATEGY_PROCESS, TreeViewConfig, validate_config
from ..errors import FoldtreeError, NoDocumentError
from ..file_tree_model.fs import ExclusionFilter, FileSystemAccess, LocalFileSystem, walk_tree
from ..file_tree_model.incremental import IncrementalCollector
from ..file_tree_model.normalize import normalize_tree
from ..file_tree_model.process import ProcessCollector
from ..file_tree_model.types import CollectionResult, DirectoryNode
from ..folding.fold_set import FoldSet
from ..folding.manager import FOLD_PLACEHOLDER, FoldManager
from ..tree_text.codec import RenderedDocument, render_tree, resolve_path
from ..tree_text.navigation import NavigationResult, navigate_to
from .scheduler import CancellationToken, IdleScheduler


class RebuildStatus(enum.Enum):
    COMPLETED = "completed"
    STARTED = "started"
    IN_PROGRESS = "in_progress"
    FAILED = "failed"


@dataclass(frozen=True)
class RebuildOutcome:
    """What a finished (or failed) build reports to its caller."""

    status: RebuildStatus
    document: RenderedDocument | None = None
    error: str | None = None


class TreeView:
    """One foldable tree view over a root directory."""

    def __init__(
        self,
        config: TreeViewConfig | None = None,
        scheduler: IdleScheduler | None = None,
        fs: FileSystemAccess | None = None,
    ) -> None:
        self.config = config or TreeViewConfig()
        validate_config(self.config)
        self.scheduler = scheduler or IdleScheduler()
        self.fs = fs or LocalFileSystem()
        self.exclude = ExclusionFilter(self.config.exclude_pattern)
        self.token = CancellationToken()
        self.fold_set = FoldSet()
        self.root: Path | None = None
        self.document: RenderedDocument | None = None
        self.folds: FoldManager | None = None
        self.cursor = 0
        self.last_error: str | None = None
        self._rebuilding = False

    @property
    def rebuilding(self) -> bool:
        return self._rebuilding

    @property
    def closed(self) -> bool:
        return self.token.cancelled

    def close(self) -> None:
        """Destroy the view; in-flight collection steps become no-ops."""
        self.token.cancel()
        logger.debug("Closed tree view for {}", self.root)

    def _require_document(self) -> tuple[RenderedDocument, FoldManager]:
        if self.document is None or self.folds is None:
            raise NoDocumentError("tree view has no document yet")
        return self.document, self.folds

    def build_document(
        self,
        root: str | os.PathLike[str],
        on_done: Callable[[RebuildOutcome], None] | None = None,
    ) -> RenderedDocument | None:
        """Build the document for ``root``.

        Returns the document right away for the synchronous strategy and
        ``None`` when the result will arrive through ``on_done``.
        """
        status = self.rebuild(root, on_done)
        if status is RebuildStatus.COMPLETED:
            return self.document
        return None

    def rebuild(
        self,
        root: str | os.PathLike[str] | None = None,
        on_done: Callable[[RebuildOutcome], None] | None = None,
    ) -> RebuildStatus:
        """Collect ``root`` (default: current root) and replace the document.

        A request made while another build is running is rejected with
        ``IN_PROGRESS``; it is neither queued nor allowed to cancel the
        running build.
        """
        if self.closed:
            raise FoldtreeError("tree view is closed")
        if self._rebuilding:
            logger.info("Rebuild of {} rejected: a rebuild is already running", root or self.root)
            return RebuildStatus.IN_PROGRESS
        target = Path(root).resolve() if root is not None else self.root
        if target is None:
            raise NoDocumentError("no root directory to rebuild")

        self._rebuilding = True
        strategy = self.config.strategy
        logger.debug("Rebuilding {} with {} strategy", target, strategy)
        if strategy == STRATEGY_PROCESS:
            ProcessCollector(
                self.scheduler,
                command=self.config.listing_command,
                exclude=self.exclude,
                token=self.token,
            ).collect(target, lambda result: self._finish(result, on_done))
            return RebuildStatus.STARTED
        if strategy == STRATEGY_INCREMENTAL:
            IncrementalCollector(
                self.scheduler,
                fs=self.fs,
                exclude=self.exclude,
                idle_interval=self.config.idle_interval_seconds,
                token=self.token,
            ).collect(target, lambda result: self._finish(result, on_done))
            return RebuildStatus.STARTED

        try:
            tree = walk_tree(target, self.fs, self.exclude)
        finally:
            self._rebuilding = False
        outcome = self._install(target, tree)
        if on_done is not None:
            on_done(outcome)
        return RebuildStatus.COMPLETED

    def _finish(
        self,
        result: CollectionResult,
        on_done: Callable[[RebuildOutcome], None] | None,
    ) -> None:
        self._rebuilding = False
        if result.ok:
            assert result.tree is not None
            outcome = self._install(result.root, result.tree)
        else:
            self.last_error = result.error
            logger.warning("Collection of {} failed: {}", result.root, result.error)
            outcome = RebuildOutcome(RebuildStatus.FAILED, self.document, result.error)
        if on_done is not None:
            on_done(outcome)

    def _install(self, root: Path, tree: DirectoryNode) -> RebuildOutcome:
        """Normalize, render, and replay remembered fold state."""
        same_root = self.root == root and self.document is not None and self.folds is not None
        previous_folds: list[str] = []
        previous_cursor_path: str | None = None
        if same_root:
            assert self.document is not None and self.folds is not None
            previous_folds = self.folds.annotations.paths()
            if 0 <= self.cursor < len(self.document):
                previous_cursor_path = resolve_path(self.document, self.cursor)
        else:
            self.fold_set.clear()

        document = render_tree(
            normalize_tree(tree, compress=self.config.compress),
            root,
            indent=self.config.indent_marker,
        )
        self.root = root
        self.document = document
        self.folds = FoldManager(document, self.fold_set)
        self.last_error = None
        if same_root:
            self.folds.restore_after_rebuild(previous_folds)

        cursor = 0
        if previous_cursor_path is not None:
            found = navigate_to(
                document,
                previous_cursor_path,
                cursor=self.cursor,
                is_collapsed=self.folds.is_collapsed_line,
            )
            if found is not None:
                cursor = found.line
        self.cursor = cursor
        logger.debug("Installed document for {} with {} rows", root, len(document))
        return RebuildOutcome(RebuildStatus.COMPLETED, document)

    def wait(self, timeout: float = 10.0) -> bool:
        """Drive the scheduler until no build is running."""
        return self.scheduler.run_until(lambda: not self._rebuilding, timeout=timeout)

    def resolve_path(self, line: int | None = None) -> str:
        """Return the absolute path for ``line`` (default: the cursor row)."""
        document, _folds = self._require_document()
        return resolve_path(document, self.cursor if line is None else line, self.fs)

    def navigate_to(self, path: str | os.PathLike[str]) -> NavigationResult | None:
        """Move the cursor to ``path`` or its closest visible ancestor.

        ``None`` leaves the cursor where it was.
        """
        if self.document is None or self.folds is None:
            return None
        result = navigate_to(
            self.document,
            path,
            cursor=self.cursor,
            is_collapsed=self.folds.is_collapsed_line,
        )
        if result is not None:
            self.cursor = result.line
        return result

    def fold(self, path: str | os.PathLike[str]) -> bool:
        _document, folds = self._require_document()
        changed = folds.fold(path)
        if changed and folds.is_hidden_line(self.cursor):
            covering = folds.annotations.covering(self.cursor)
            assert covering is not None
            self.cursor = covering.header
        return changed

    def unfold(self, path: str | os.PathLike[str], recursive: bool = False) -> bool:
        _document, folds = self._require_document()
        return folds.unfold(path, recursive=recursive)

    def is_folded(self, path: str | os.PathLike[str]) -> bool:
        _document, folds = self._require_document()
        return folds.is_folded(path)

    def visible_lines(self, placeholder: str = FOLD_PLACEHOLDER) -> list[tuple[int, str]]:
        _document, folds = self._require_document()
        return list(folds.visible_lines(placeholder))


__all__ = [
    "RebuildStatus",
    "RebuildOutcome",
    "TreeView",
]
