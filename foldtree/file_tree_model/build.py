"""Nested-tree construction from flat collector path lists."""

from __future__ import annotations

from collections.abc import Iterable

from .types import PLACEHOLDER_ROOT_NAME, DirectoryNode, FileNode, PathEntry


def path_segments(path: str) -> list[str]:
    """Split a ``/``-separated relative path, dropping empty and ``.`` parts."""
    return [segment for segment in path.split("/") if segment and segment != "."]


def _insert_entry(accumulator: DirectoryNode, entry: PathEntry) -> None:
    """Descend ``accumulator`` along ``entry``'s segments, creating nodes."""
    segments = path_segments(entry.path)
    current = accumulator
    for position, segment in enumerate(segments):
        interior = position < len(segments) - 1
        wants_directory = interior or entry.is_dir
        existing_idx = current.index_of(segment)

        if existing_idx is None:
            node = DirectoryNode(segment) if wants_directory else FileNode(segment)
            current.children.append(node)
        else:
            node = current.children[existing_idx]
            if interior and isinstance(node, FileNode):
                # A file row cannot have descendants; the later row wins.
                node = DirectoryNode(segment)
                current.children[existing_idx] = node

        if not interior:
            return
        assert isinstance(node, DirectoryNode)
        current = node


def build_tree(entries: Iterable[PathEntry], root_name: str | None = None) -> DirectoryNode:
    """Build one nested tree from ordered ``PathEntry`` rows.

    Child lookup is a linear scan per segment, so cost is roughly
    ``entries x depth``. The accumulator keeps a placeholder name until every
    entry is inserted and is then renamed to ``root_name``.
    """
    accumulator = DirectoryNode(PLACEHOLDER_ROOT_NAME)
    for entry in entries:
        _insert_entry(accumulator, entry)
    if root_name:
        accumulator.name = root_name
    return accumulator


__all__ = [
    "path_segments",
    "build_tree",
]
