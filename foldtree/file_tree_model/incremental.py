"""Cooperative, level-by-level directory collector.

Each directory level is listed in one idle step. Subdirectories are left as
integer placeholders in their parent's ``children`` and queued as
``PendingWork``; one queued continuation runs per idle interval, in FIFO
order, and patches its placeholder in place. When the queue runs dry the
completion callback is scheduled after one more interval.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from ..runtime.scheduler import DEFAULT_IDLE_INTERVAL_SECONDS, CancellationToken, IdleScheduler
from .fs import ExclusionFilter, FileSystemAccess, LocalFileSystem
from .types import CollectionResult, DirectoryNode, FileNode, TreeNode


@dataclass(frozen=True)
class PendingWork:
    """Deferred listing of ``directory`` to be patched into ``parent``."""

    directory: Path
    parent: DirectoryNode
    placeholder_index: int


class IncrementalCollector:
    """Collect a tree across idle intervals without blocking the caller."""

    def __init__(
        self,
        scheduler: IdleScheduler,
        fs: FileSystemAccess | None = None,
        exclude: ExclusionFilter | None = None,
        idle_interval: float = DEFAULT_IDLE_INTERVAL_SECONDS,
        token: CancellationToken | None = None,
    ) -> None:
        self.scheduler = scheduler
        self.fs = fs or LocalFileSystem()
        self.exclude = exclude or ExclusionFilter()
        self.idle_interval = idle_interval
        self.token = token or CancellationToken()

    def _build_level(self, directory: Path, queue: deque[PendingWork]) -> DirectoryNode:
        """List one directory; subdirectories become queued placeholders."""
        node = DirectoryNode(directory.name or str(directory))
        for name in self.fs.list_entries(directory):
            if self.exclude.is_excluded(name):
                continue
            child_path = directory / name
            if self.fs.is_directory(child_path):
                placeholder_index = len(node.children)
                node.children.append(placeholder_index)
                queue.append(PendingWork(child_path, node, placeholder_index))
            else:
                node.children.append(FileNode(name))
        return node

    def collect(self, root: Path, on_done: Callable[[CollectionResult], None]) -> None:
        """Start collecting ``root``; ``on_done`` runs from a later idle step."""
        root = Path(root)
        queue: deque[PendingWork] = deque()
        token = self.token
        logger.debug("Starting incremental collection of {}", root)
        tree = self._build_level(root, queue)

        def complete() -> None:
            if token.cancelled:
                logger.debug("Dropping incremental result for {}: view closed", root)
                return
            logger.debug("Incremental collection of {} finished", root)
            on_done(CollectionResult(root, tree=tree))

        def schedule_next() -> None:
            if queue:
                work = queue.popleft()
                self.scheduler.call_later(self.idle_interval, lambda: run(work))
            else:
                self.scheduler.call_later(self.idle_interval, complete)

        def run(work: PendingWork) -> None:
            if token.cancelled:
                logger.debug("Abandoning pending listing of {}", work.directory)
                return
            subtree: TreeNode = self._build_level(work.directory, queue)
            work.parent.children[work.placeholder_index] = subtree
            schedule_next()

        schedule_next()


__all__ = [
    "PendingWork",
    "IncrementalCollector",
]
