"""Domain model for collected filesystem trees.

This package contains non-UI tree primitives:
- directory/file node datatypes and flat ``PathEntry`` rows
- filesystem access and the synchronous walk
- flat-list tree building and display normalization
- process-backed and incremental (idle-scheduled) collectors
"""

from __future__ import annotations

from .types import CollectionResult, DirectoryNode, FileNode, PathEntry, TreeNode
from .fs import DEFAULT_EXCLUDE_PATTERN, ExclusionFilter, FileSystemAccess, LocalFileSystem, walk_tree
from .build import build_tree, path_segments
from .normalize import compress_tree, normalize_tree, sort_tree
from .process import DEFAULT_LISTING_COMMAND, ListingBuffer, ProcessCollector, parse_listing
from .incremental import IncrementalCollector, PendingWork

__all__ = [
    "CollectionResult",
    "DirectoryNode",
    "FileNode",
    "PathEntry",
    "TreeNode",
    "DEFAULT_EXCLUDE_PATTERN",
    "ExclusionFilter",
    "FileSystemAccess",
    "LocalFileSystem",
    "walk_tree",
    "build_tree",
    "path_segments",
    "compress_tree",
    "normalize_tree",
    "sort_tree",
    "DEFAULT_LISTING_COMMAND",
    "ListingBuffer",
    "ProcessCollector",
    "parse_listing",
    "IncrementalCollector",
    "PendingWork",
]
