"""Fold state: collapsed-range annotations and remembered open paths."""

from __future__ import annotations

from .annotations import FoldAnnotation, FoldAnnotationStore
from .fold_set import FoldSet, directory_key
from .manager import FOLD_PLACEHOLDER, FoldManager

__all__ = [
    "FoldAnnotation",
    "FoldAnnotationStore",
    "FoldSet",
    "directory_key",
    "FOLD_PLACEHOLDER",
    "FoldManager",
]
