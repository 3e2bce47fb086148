"""Tests for path -> row navigation."""

from __future__ import annotations

import unittest

from foldtree.file_tree_model import DirectoryNode, FileNode, normalize_tree
from foldtree.tree_text import NavigationResult, navigate_to, render_tree, resolve_path, target_segments


def _cousins_tree() -> DirectoryNode:
    return DirectoryNode(
        "r",
        [
            DirectoryNode("dirA", [DirectoryNode("x", [FileNode("f")]), FileNode("a.txt")]),
            DirectoryNode("dirB", [DirectoryNode("x", [FileNode("g")]), FileNode("b.txt")]),
        ],
    )


def _generated_tree(width: int, depth: int, prefix: str = "n") -> DirectoryNode:
    children: list = []
    for idx in range(width):
        name = f"{prefix}{idx}"
        if depth > 0:
            children.append(_generated_tree(width - (idx % 2), depth - 1, name))
        else:
            children.append(FileNode(f"{name}.txt"))
    # A chain that compresses into one row.
    children.append(DirectoryNode(f"{prefix}chain", [DirectoryNode("mid", [FileNode("leaf")])]))
    return DirectoryNode(prefix, children)


class TargetSegmentsTests(unittest.TestCase):
    def test_absolute_paths_are_taken_relative_to_root(self) -> None:
        document = render_tree(_cousins_tree(), "/r")

        self.assertEqual(target_segments(document, "/r/dirA/x/"), ["dirA", "x"])
        self.assertEqual(target_segments(document, "/r"), [])
        self.assertIsNone(target_segments(document, "/elsewhere/dirA"))
        self.assertIsNone(target_segments(document, "/rr/dirA"))

    def test_relative_paths_are_already_relative(self) -> None:
        document = render_tree(_cousins_tree(), "/r")

        self.assertEqual(target_segments(document, "./dirB//x"), ["dirB", "x"])


class NavigateToTests(unittest.TestCase):
    def test_round_trip_for_every_row(self) -> None:
        document = render_tree(normalize_tree(_generated_tree(3, 2)), "/base")

        self.assertIn("nchain/mid/", document.lines)
        for idx in range(len(document)):
            path = resolve_path(document, idx)
            result = navigate_to(document, path)
            self.assertEqual(result, NavigationResult(idx, True), path)
            self.assertEqual(resolve_path(document, result.line), path)

    def test_search_stays_inside_the_matched_subtree(self) -> None:
        document = render_tree(_cousins_tree(), "/r")

        result = navigate_to(document, "/r/dirB/x/g")

        self.assertEqual(result, NavigationResult(document.lines.index("    g"), True))
        self.assertEqual(resolve_path(document, result.line), "/r/dirB/x/g")

    def test_missing_leaf_returns_deepest_match(self) -> None:
        document = render_tree(_cousins_tree(), "/r")

        result = navigate_to(document, "/r/dirB/x/missing")

        self.assertEqual(result, NavigationResult(5, False))

    def test_cousin_descendant_is_never_a_match(self) -> None:
        document = render_tree(_cousins_tree(), "/r")

        result = navigate_to(document, "/r/dirA/x/g")

        self.assertEqual(result, NavigationResult(1, False))

    def test_unknown_first_segment_is_not_found(self) -> None:
        document = render_tree(_cousins_tree(), "/r")

        self.assertIsNone(navigate_to(document, "/r/nowhere/x"))
        self.assertIsNone(navigate_to(document, "/outside/dirA"))
        self.assertIsNone(navigate_to(document, "/r"))

    def test_file_cannot_be_descended_into(self) -> None:
        document = render_tree(_cousins_tree(), "/r")

        result = navigate_to(document, "/r/dirA/a.txt/more")

        self.assertEqual(result, NavigationResult(0, False))

    def test_cursor_on_matching_header_is_used(self) -> None:
        document = render_tree(_cousins_tree(), "/r")

        self.assertEqual(navigate_to(document, "/r/dirB/x", cursor=5), NavigationResult(5, True))

    def test_stale_cursor_falls_back_to_search(self) -> None:
        document = render_tree(_cousins_tree(), "/r")

        self.assertEqual(navigate_to(document, "/r/dirB/x", cursor=0), NavigationResult(5, True))
        self.assertEqual(navigate_to(document, "/r/dirB/x", cursor=99), NavigationResult(5, True))

    def test_compressed_label_matches_several_segments(self) -> None:
        root = DirectoryNode(
            "r",
            [DirectoryNode("src", [DirectoryNode("lib", [FileNode("a.go")])]), FileNode("README.md")],
        )
        document = render_tree(normalize_tree(root), "/r")

        self.assertEqual(navigate_to(document, "src/lib/a.go"), NavigationResult(1, True))
        self.assertEqual(navigate_to(document, "src/lib"), NavigationResult(0, True))
        # "src" alone is only half of the merged row.
        self.assertIsNone(navigate_to(document, "src"))

    def test_collapsed_header_stops_descent(self) -> None:
        document = render_tree(_cousins_tree(), "/r")

        result = navigate_to(document, "/r/dirB/x/g", is_collapsed=lambda line: line == 4)

        self.assertEqual(result, NavigationResult(4, False))


if __name__ == "__main__":
    unittest.main()
