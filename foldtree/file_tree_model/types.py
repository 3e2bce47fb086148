"""Domain datatypes for collected file/directory trees."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

PLACEHOLDER_ROOT_NAME = "."


@dataclass(frozen=True)
class PathEntry:
    """One flat collector row: a relative path plus its directory tag."""

    path: str
    is_dir: bool


@dataclass(frozen=True)
class FileNode:
    """Leaf entry in a collected tree."""

    name: str


@dataclass
class DirectoryNode:
    """Directory entry with ordered children.

    While an incremental build is in flight ``children`` may hold ``int``
    placeholders where a subdirectory subtree has not been collected yet.
    """

    name: str
    children: list["TreeNode | int"] = field(default_factory=list)

    def index_of(self, name: str) -> int | None:
        """Return the position of the first child called ``name``, skipping placeholders."""
        for idx, child in enumerate(self.children):
            if not isinstance(child, int) and child.name == name:
                return idx
        return None

    def child_named(self, name: str) -> "TreeNode | None":
        """Return the first child called ``name`` or ``None``."""
        idx = self.index_of(name)
        if idx is None:
            return None
        child = self.children[idx]
        assert not isinstance(child, int)
        return child

    def has_placeholders(self) -> bool:
        """Return whether any subtree below this node is still pending."""
        for child in self.children:
            if isinstance(child, int):
                return True
            if isinstance(child, DirectoryNode) and child.has_placeholders():
                return True
        return False


TreeNode = DirectoryNode | FileNode


@dataclass(frozen=True)
class CollectionResult:
    """Outcome of an asynchronous collection: a tree or an error message."""

    root: Path
    tree: DirectoryNode | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.tree is not None


__all__ = [
    "PLACEHOLDER_ROOT_NAME",
    "PathEntry",
    "FileNode",
    "DirectoryNode",
    "TreeNode",
    "CollectionResult",
]
