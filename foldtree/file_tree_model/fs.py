"""Filesystem access, exclusion filtering, and the synchronous tree walk."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from loguru import logger

from .types import DirectoryNode, FileNode, TreeNode

DEFAULT_EXCLUDE_PATTERN = r"^(\.git|\.hg|\.svn|__pycache__|\.mypy_cache|\.pytest_cache|node_modules)$|\.py[co]$"
_ALWAYS_SKIPPED = frozenset({".", ".."})


class FileSystemAccess(Protocol):
    """Capability the collectors need from a filesystem."""

    def list_entries(self, directory: Path) -> list[str]:
        ...

    def is_directory(self, path: Path) -> bool:
        ...


class LocalFileSystem:
    """``FileSystemAccess`` backed by ``os.scandir``.

    Entry names come back sorted so repeated walks see the same order. A
    directory that cannot be scanned (removed mid-walk, permission denied)
    lists as empty.
    """

    def list_entries(self, directory: Path) -> list[str]:
        try:
            with os.scandir(directory) as entries:
                names = [entry.name for entry in entries]
        except OSError as exc:
            logger.debug("Treating unreadable directory {} as empty: {}", directory, exc)
            return []
        names.sort()
        return names

    def is_directory(self, path: Path) -> bool:
        """Return whether ``path`` is a real directory (symlinks are not followed)."""
        try:
            return Path(path).is_dir() and not Path(path).is_symlink()
        except OSError:
            return False


@dataclass(frozen=True)
class ExclusionFilter:
    """Base-name exclusion rule shared by every collection strategy."""

    pattern: str | None = DEFAULT_EXCLUDE_PATTERN
    _compiled: re.Pattern[str] | None = field(init=False, repr=False, compare=False, default=None)

    def __post_init__(self) -> None:
        compiled = re.compile(self.pattern) if self.pattern else None
        object.__setattr__(self, "_compiled", compiled)

    def is_excluded(self, name: str) -> bool:
        """Return whether an entry called ``name`` is skipped with its subtree."""
        if name in _ALWAYS_SKIPPED:
            return True
        compiled = self._compiled
        if compiled is None:
            return False
        return compiled.search(name) is not None

    def excludes_any_segment(self, relative_path: str) -> bool:
        """Return whether any segment of a ``/``-separated path is excluded."""
        for segment in relative_path.split("/"):
            if segment and self.is_excluded(segment):
                return True
        return False


def walk_tree(
    root: Path,
    fs: FileSystemAccess | None = None,
    exclude: ExclusionFilter | None = None,
) -> DirectoryNode:
    """Walk ``root`` depth-first and return the collected tree.

    The returned root node carries ``root``'s base name.
    """
    fs = fs or LocalFileSystem()
    exclude = exclude or ExclusionFilter()
    root = Path(root)

    def walk(directory: Path) -> list[TreeNode]:
        nodes: list[TreeNode] = []
        for name in fs.list_entries(directory):
            if exclude.is_excluded(name):
                continue
            child_path = directory / name
            if fs.is_directory(child_path):
                nodes.append(DirectoryNode(name, walk(child_path)))
            else:
                nodes.append(FileNode(name))
        return nodes

    logger.debug("Walking {} synchronously", root)
    return DirectoryNode(root.name or str(root), walk(root))


__all__ = [
    "DEFAULT_EXCLUDE_PATTERN",
    "FileSystemAccess",
    "LocalFileSystem",
    "ExclusionFilter",
    "walk_tree",
]
