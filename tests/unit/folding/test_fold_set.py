"""Tests for remembered open directory paths."""

from __future__ import annotations

import unittest

from foldtree.folding import FoldSet, directory_key


class FoldSetOpenTests(unittest.TestCase):
    def test_opening_deeper_path_drops_its_ancestors(self) -> None:
        fold_set = FoldSet()

        fold_set.open("/a/b")
        fold_set.open("/a/b/c")

        self.assertEqual(fold_set.as_set(), {"/a/b/c/"})

    def test_opening_shallower_path_keeps_deeper_entries(self) -> None:
        fold_set = FoldSet()

        fold_set.open("/a/b/c")
        fold_set.open("/a/b")

        self.assertEqual(fold_set.as_set(), {"/a/b/", "/a/b/c/"})

    def test_prefix_test_respects_segment_boundaries(self) -> None:
        fold_set = FoldSet()

        fold_set.open("/a/b")
        fold_set.open("/a/bc")

        self.assertEqual(fold_set.as_set(), {"/a/b/", "/a/bc/"})

    def test_reopening_same_path_is_idempotent(self) -> None:
        fold_set = FoldSet()

        fold_set.open("/a/")
        fold_set.open("/a")

        self.assertEqual(list(fold_set), ["/a/"])
        self.assertIn("/a", fold_set)
        self.assertNotIn(42, fold_set)


class FoldSetCloseTests(unittest.TestCase):
    def test_close_returns_removed_descendants(self) -> None:
        fold_set = FoldSet({"/a/b/c", "/a/b/d", "/a/x"})

        removed = fold_set.close("/a/b")

        self.assertEqual(removed, {"/a/b/c/", "/a/b/d/"})
        self.assertEqual(fold_set.as_set(), {"/a/x/"})

    def test_parent_is_remembered_when_nothing_else_is_open_under_it(self) -> None:
        fold_set = FoldSet({"/a/b/c"})

        fold_set.close("/a/b/c", parent="/a/b")

        self.assertEqual(fold_set.as_set(), {"/a/b/"})

    def test_parent_not_added_while_a_sibling_is_still_open(self) -> None:
        fold_set = FoldSet({"/a/b/c", "/a/b/d"})

        fold_set.close("/a/b/c", parent="/a/b")

        self.assertEqual(fold_set.as_set(), {"/a/b/d/"})

    def test_clear_forgets_everything(self) -> None:
        fold_set = FoldSet({"/a", "/b"})

        fold_set.clear()

        self.assertEqual(len(fold_set), 0)

    def test_directory_key_adds_single_trailing_separator(self) -> None:
        self.assertEqual(directory_key("/a/b"), "/a/b/")
        self.assertEqual(directory_key("/a/b/"), "/a/b/")


if __name__ == "__main__":
    unittest.main()
