"""Tree <-> indentation-text codec.

A rendered document is plain text: one row per node, depth encoded as a run
of indent markers, directories suffixed with ``/``. Nothing else is stored
about ancestry; a row's path is recovered by scanning backward for the
nearest row one level shallower, repeatedly, until depth 0.

A name may itself start with the indent marker, so ``render_tree`` hands the
depth of every row to the document. Documents built from raw text count
leading markers instead.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from ..file_tree_model.fs import FileSystemAccess
from ..file_tree_model.types import DirectoryNode, FileNode

INDENT_MARKER = "  "
SEPARATOR = "/"
FOLD_PRIORITY_BASE = 100


@dataclass(frozen=True)
class FoldSpan:
    """Half-open row range ``[start, end)`` holding a directory's children."""

    start: int
    end: int
    priority: int

    def __contains__(self, line: int) -> bool:
        return self.start <= line < self.end


def root_key(root: str | os.PathLike[str]) -> str:
    """Normalize a root directory to an absolute string ending in ``/``."""
    text = os.fspath(root)
    return text if text.endswith(SEPARATOR) else text + SEPARATOR


def line_depth(line: str, indent: str = INDENT_MARKER) -> int:
    """Count leading indent markers."""
    if not indent:
        return 0
    depth = 0
    width = len(indent)
    while line.startswith(indent, depth * width):
        depth += 1
    return depth


def local_name(line: str, indent: str = INDENT_MARKER) -> str:
    """Return a row's label without indentation or the directory suffix."""
    body = line[line_depth(line, indent) * len(indent):]
    return body[:-1] if body.endswith(SEPARATOR) else body


def is_directory_line(line: str) -> bool:
    return line.endswith(SEPARATOR)


@dataclass(frozen=True)
class RenderedDocument:
    """Rendered rows plus the render-time fold spans keyed by header row."""

    root: str
    lines: tuple[str, ...]
    indent: str = INDENT_MARKER
    spans: dict[int, FoldSpan] = field(default_factory=dict)
    title: str = ""
    depths: tuple[int, ...] = field(default=(), repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "root", root_key(self.root))
        if len(self.depths) != len(self.lines):
            object.__setattr__(self, "depths", tuple(line_depth(line, self.indent) for line in self.lines))

    def __len__(self) -> int:
        return len(self.lines)

    @property
    def text(self) -> str:
        return "".join(f"{line}\n" for line in self.lines)

    def depth(self, line: int) -> int:
        return self.depths[line]

    def name(self, line: int) -> str:
        body = self.lines[line][self.depths[line] * len(self.indent):]
        return body[:-1] if body.endswith(SEPARATOR) else body

    def is_directory(self, line: int) -> bool:
        return is_directory_line(self.lines[line])

    def children_span(self, line: int) -> FoldSpan | None:
        """Return the fold span under a directory row, ``None`` for leaves."""
        return self.spans.get(line)


def render_tree(
    root: DirectoryNode,
    root_path: str | os.PathLike[str],
    indent: str = INDENT_MARKER,
) -> RenderedDocument:
    """Render ``root``'s children (the root row itself is not printed)."""
    lines: list[str] = []
    depths: list[int] = []
    spans: dict[int, FoldSpan] = {}

    def emit(node: DirectoryNode, depth: int) -> None:
        prefix = indent * depth
        for child in node.children:
            if isinstance(child, int):
                raise ValueError(f"cannot render {node.name!r}: subtree still pending")
            if isinstance(child, FileNode):
                lines.append(f"{prefix}{child.name}")
                depths.append(depth)
                continue
            header = len(lines)
            lines.append(f"{prefix}{child.name}{SEPARATOR}")
            depths.append(depth)
            emit(child, depth + 1)
            if len(lines) > header + 1:
                spans[header] = FoldSpan(header + 1, len(lines), FOLD_PRIORITY_BASE - depth)

    emit(root, 0)
    return RenderedDocument(
        root=root_path,
        lines=tuple(lines),
        indent=indent,
        spans=spans,
        title=root.name,
        depths=tuple(depths),
    )


def subtree_end(document: RenderedDocument, line: int) -> int:
    """Return the first row after ``line``'s subtree (``len`` at the end)."""
    depth = document.depth(line)
    idx = line + 1
    while idx < len(document) and document.depth(idx) > depth:
        idx += 1
    return idx


def parent_line(document: RenderedDocument, line: int) -> int | None:
    """Return the nearest preceding row exactly one level shallower."""
    depth = document.depth(line)
    if depth == 0:
        return None
    idx = line - 1
    while idx >= 0:
        if document.depth(idx) == depth - 1:
            return idx
        idx -= 1
    return None


def ancestor_lines(document: RenderedDocument, line: int) -> list[int]:
    """Return header rows from ``line``'s parent up to depth 0, nearest first."""
    out: list[int] = []
    current = parent_line(document, line)
    while current is not None:
        out.append(current)
        current = parent_line(document, current)
    return out


def resolve_path(
    document: RenderedDocument,
    line: int,
    fs: FileSystemAccess | None = None,
) -> str:
    """Rebuild the absolute path for ``line`` from indentation alone.

    Directory rows come back with a trailing ``/``. Other rows are checked
    against the live filesystem when ``fs`` is given, so a path that has become
    a directory still resolves unambiguously.
    """
    if not 0 <= line < len(document):
        raise IndexError(f"line {line} outside document of {len(document)} rows")
    parts = [document.name(line)]
    for ancestor in ancestor_lines(document, line):
        parts.append(document.name(ancestor))
    parts.reverse()
    path = document.root + SEPARATOR.join(parts)
    if document.is_directory(line):
        return path + SEPARATOR
    if fs is not None and path and fs.is_directory(Path(path)):
        return path + SEPARATOR
    return path


__all__ = [
    "INDENT_MARKER",
    "SEPARATOR",
    "FOLD_PRIORITY_BASE",
    "FoldSpan",
    "RenderedDocument",
    "root_key",
    "line_depth",
    "local_name",
    "is_directory_line",
    "render_tree",
    "subtree_end",
    "parent_line",
    "ancestor_lines",
    "resolve_path",
]
