"""Collapsed-range store for a rendered document."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class FoldAnnotation:
    """Children rows ``[start, end)`` of the directory at ``header``, hidden.

    ``priority`` is ``100 - depth``: where collapsed ranges overlap, the
    shallower directory's placeholder wins.
    """

    path: str
    header: int
    start: int
    end: int
    priority: int

    def covers(self, line: int) -> bool:
        return self.start <= line < self.end


class FoldAnnotationStore:
    """Active fold annotations keyed by directory path."""

    def __init__(self) -> None:
        self._by_path: dict[str, FoldAnnotation] = {}

    def __len__(self) -> int:
        return len(self._by_path)

    def __iter__(self) -> Iterator[FoldAnnotation]:
        return iter(sorted(self._by_path.values(), key=lambda item: item.header))

    def add(self, annotation: FoldAnnotation) -> None:
        self._by_path[annotation.path] = annotation

    def get(self, path: str) -> FoldAnnotation | None:
        return self._by_path.get(path)

    def remove(self, path: str) -> FoldAnnotation | None:
        return self._by_path.pop(path, None)

    def paths(self) -> list[str]:
        return [annotation.path for annotation in self]

    def at_header(self, line: int) -> FoldAnnotation | None:
        """Return the annotation whose directory row is ``line``."""
        for annotation in self._by_path.values():
            if annotation.header == line:
                return annotation
        return None

    def covering(self, line: int) -> FoldAnnotation | None:
        """Return the highest-priority annotation hiding ``line``."""
        best: FoldAnnotation | None = None
        for annotation in self._by_path.values():
            if not annotation.covers(line):
                continue
            if best is None or annotation.priority > best.priority:
                best = annotation
        return best

    def nested_within(self, start: int, end: int) -> list[FoldAnnotation]:
        """Return annotations whose header row lies in ``[start, end)``."""
        return [annotation for annotation in self if start <= annotation.header < end]

    def clear(self) -> None:
        self._by_path.clear()


__all__ = [
    "FoldAnnotation",
    "FoldAnnotationStore",
]
