"""Display normalization passes: child ordering and single-child compression."""

from __future__ import annotations

from .types import DirectoryNode, FileNode, TreeNode

COMPRESSED_NAME_SEPARATOR = "/"


def _sort_key(node: TreeNode) -> tuple[bool, str]:
    """Directories first, then plain code-point order by name."""
    return (isinstance(node, FileNode), node.name)


def _resolved_children(node: DirectoryNode) -> list[TreeNode]:
    children: list[TreeNode] = []
    for child in node.children:
        if isinstance(child, int):
            raise ValueError(f"directory {node.name!r} still has pending subtrees")
        children.append(child)
    return children


def sort_tree(node: TreeNode) -> TreeNode:
    """Return a copy of ``node`` with every child list ordered recursively."""
    if isinstance(node, FileNode):
        return node
    children = [sort_tree(child) for child in _resolved_children(node)]
    children.sort(key=_sort_key)
    return DirectoryNode(node.name, children)


def compress_tree(node: TreeNode) -> TreeNode:
    """Merge chains of single-directory-child directories into one node.

    ``a/ -> b/ -> {x}`` becomes ``a/b/ -> {x}``. Works bottom-up, so a single
    merge per level is enough: a compressed child never itself has exactly
    one directory child left.
    """
    if isinstance(node, FileNode):
        return node
    children = [compress_tree(child) for child in _resolved_children(node)]
    if len(children) == 1 and isinstance(children[0], DirectoryNode):
        only = children[0]
        return DirectoryNode(
            f"{node.name}{COMPRESSED_NAME_SEPARATOR}{only.name}",
            list(only.children),
        )
    return DirectoryNode(node.name, children)


def normalize_tree(root: DirectoryNode, compress: bool = True) -> DirectoryNode:
    """Prepare a collected tree for rendering.

    The root line is never printed, so compression applies to its children
    only. Sorting runs after compression so merged labels order by their
    final text.
    """
    children = _resolved_children(root)
    if compress:
        children = [compress_tree(child) for child in children]
    normalized = sort_tree(DirectoryNode(root.name, children))
    assert isinstance(normalized, DirectoryNode)
    return normalized


__all__ = [
    "COMPRESSED_NAME_SEPARATOR",
    "sort_tree",
    "compress_tree",
    "normalize_tree",
]
