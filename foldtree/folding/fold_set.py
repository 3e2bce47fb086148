"""Remembered drilled-into directory paths.

A ``FoldSet`` does not say what is folded right now. It records the most
specific directories the user opened so the same expansion depth can be
replayed after a rebuild or after re-expanding a collapsed ancestor.
"""

from __future__ import annotations

import os
from collections.abc import Iterator

from ..tree_text.codec import SEPARATOR


def directory_key(path: str | os.PathLike[str]) -> str:
    """Normalize a directory path so prefix tests respect segment boundaries."""
    text = os.fspath(path)
    return text if text.endswith(SEPARATOR) else text + SEPARATOR


class FoldSet:
    """Set of absolute directory paths, each ending in ``/``."""

    def __init__(self, paths: set[str] | None = None) -> None:
        self._paths: set[str] = {directory_key(path) for path in paths or ()}

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, os.PathLike)):
            return False
        return directory_key(path) in self._paths

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._paths))

    def __len__(self) -> int:
        return len(self._paths)

    def as_set(self) -> set[str]:
        return set(self._paths)

    def open(self, path: str | os.PathLike[str]) -> None:
        """Record ``path`` as opened, dropping ancestors it makes redundant.

        Opening a shallower path leaves deeper entries alone.
        """
        key = directory_key(path)
        self._paths = {entry for entry in self._paths if not key.startswith(entry)}
        self._paths.add(key)

    def close(
        self,
        path: str | os.PathLike[str],
        parent: str | os.PathLike[str] | None = None,
    ) -> set[str]:
        """Forget ``path`` and its descendants; return what was removed.

        When ``parent`` is given and nothing else under it is remembered, the
        parent itself is recorded so its own open state is not lost.
        """
        key = directory_key(path)
        removed = {entry for entry in self._paths if entry.startswith(key)}
        self._paths -= removed
        if parent is not None:
            parent_key = directory_key(parent)
            if not any(entry.startswith(parent_key) for entry in self._paths):
                self._paths.add(parent_key)
        return removed

    def clear(self) -> None:
        self._paths.clear()


__all__ = [
    "directory_key",
    "FoldSet",
]
