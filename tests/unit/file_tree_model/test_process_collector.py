"""Tests for the process-backed listing collector."""

from __future__ import annotations

import gc
import sys
import tempfile
import unittest
import warnings
from pathlib import Path
from unittest import mock

from foldtree.file_tree_model import (
    CollectionResult,
    DirectoryNode,
    ExclusionFilter,
    FileNode,
    ListingBuffer,
    PathEntry,
    ProcessCollector,
    parse_listing,
)
from foldtree.runtime import IdleScheduler


def _python_command(source: str) -> list[str]:
    return [sys.executable, "-c", source]


class ParseListingTests(unittest.TestCase):
    def test_trailing_slash_tags_directories(self) -> None:
        entries = parse_listing("src/\nsrc/a.py\nREADME.md\n")

        self.assertEqual(
            entries,
            [PathEntry("src", True), PathEntry("src/a.py", False), PathEntry("README.md", False)],
        )

    def test_dot_prefix_and_blank_rows_are_ignored(self) -> None:
        entries = parse_listing(".\n./\n./docs/\n\n./docs/x.md\r\n")

        self.assertEqual(entries, [PathEntry("docs", True), PathEntry("docs/x.md", False)])

    def test_rows_under_excluded_directories_are_dropped(self) -> None:
        entries = parse_listing(
            ".git/\n.git/HEAD\nsrc/\nsrc/cache.pyc\nsrc/main.py\n",
            ExclusionFilter(),
        )

        self.assertEqual(entries, [PathEntry("src", True), PathEntry("src/main.py", False)])


class ListingBufferTests(unittest.TestCase):
    def test_chunks_split_inside_a_character_decode_once_complete(self) -> None:
        payload = "café/\nnaïve.txt\n".encode("utf-8")
        buffer = ListingBuffer()
        for idx in range(0, len(payload), 3):
            buffer.feed(payload[idx : idx + 3])

        self.assertEqual(len(buffer), len(payload))
        self.assertEqual(buffer.text(), "café/\nnaïve.txt\n")


class ProcessCollectorTests(unittest.TestCase):
    def _collect(self, command: list[str], root: Path) -> tuple[IdleScheduler, list[CollectionResult]]:
        scheduler = IdleScheduler()
        results: list[CollectionResult] = []
        ProcessCollector(scheduler, command).collect(root, results.append)
        scheduler.run_until(lambda: bool(results), timeout=30.0)
        return scheduler, results

    def test_listing_output_becomes_a_tree_named_after_root(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp) / "project"
            root.mkdir()
            command = _python_command(
                "import sys; sys.stdout.write('src/\\nsrc/lib/\\nsrc/lib/a.go\\nREADME.md\\n')"
            )

            _, results = self._collect(command, root)

            self.assertEqual(len(results), 1)
            result = results[0]
            self.assertTrue(result.ok)
            self.assertEqual(
                result.tree,
                DirectoryNode(
                    "project",
                    [
                        DirectoryNode("src", [DirectoryNode("lib", [FileNode("a.go")])]),
                        FileNode("README.md"),
                    ],
                ),
            )

    def test_command_runs_inside_root(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp) / "project"
            root.mkdir()
            (root / "marker.txt").write_text("", encoding="utf-8")
            command = _python_command("import os; print('\\n'.join(sorted(os.listdir('.'))))")

            _, results = self._collect(command, root)

            self.assertEqual(results[0].tree, DirectoryNode("project", [FileNode("marker.txt")]))

    def test_large_output_arrives_in_several_chunks(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            command = _python_command(
                "import sys\n"
                "for i in range(20000):\n"
                "    sys.stdout.write('dir%05d/\\n' % i)\n"
            )

            scheduler, results = self._collect(command, root)

            tree = results[0].tree
            assert tree is not None
            self.assertEqual(len(tree.children), 20000)
            self.assertEqual(tree.children[0], DirectoryNode("dir00000", []))
            self.assertGreater(scheduler.steps_run, 2)

    def test_nonzero_exit_reports_error_with_stderr(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            command = _python_command("import sys; sys.stderr.write('boom'); sys.exit(3)")

            _, results = self._collect(command, Path(tmp))

            result = results[0]
            self.assertFalse(result.ok)
            self.assertIsNone(result.tree)
            assert result.error is not None
            self.assertIn("status 3", result.error)
            self.assertIn("boom", result.error)

    def test_missing_executable_reports_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            _, results = self._collect(["foldtree-no-such-listing-binary"], Path(tmp))

            result = results[0]
            self.assertFalse(result.ok)
            assert result.error is not None
            self.assertIn("failed to run", result.error)

    def test_finished_listing_leaves_no_open_pipes(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            command = _python_command("import sys; sys.stderr.write('note'); print('a.txt')")

            with warnings.catch_warnings(record=True) as caught:
                warnings.simplefilter("always", ResourceWarning)
                _, results = self._collect(command, Path(tmp))
                gc.collect()

            self.assertTrue(results[0].ok)
            leaked = [
                str(item.message)
                for item in caught
                if issubclass(item.category, ResourceWarning) or "unclosed" in str(item.message)
            ]
            self.assertEqual(leaked, [])

    def test_read_failure_kills_process_and_reports_error(self) -> None:
        fake = mock.MagicMock()
        fake.pid = 4242
        fake.stdout.read1.side_effect = OSError("pipe broke")
        fake.stderr.read.return_value = b""
        fake.poll.return_value = None
        fake.communicate.return_value = (b"", b"")
        fake.returncode = -9

        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("foldtree.file_tree_model.process.subprocess.Popen", return_value=fake):
                _, results = self._collect(["lister"], Path(tmp))

        self.assertEqual(len(results), 1)
        result = results[0]
        self.assertFalse(result.ok)
        assert result.error is not None
        self.assertIn("pipe broke", result.error)
        fake.kill.assert_called_once_with()
        fake.communicate.assert_called_once_with()


if __name__ == "__main__":
    unittest.main()
