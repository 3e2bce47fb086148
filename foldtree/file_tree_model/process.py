"""Process-backed directory listing collector.

One external listing process runs per ``collect`` call. Its stdout is read on
a daemon thread in arbitrary chunks; every chunk is handed to the scheduler so
buffering and parsing happen on the owning thread. The listing is parsed only
after the process exits.
"""

from __future__ import annotations

import subprocess
import threading
from collections.abc import Callable, Sequence
from pathlib import Path

from loguru import logger

from ..runtime.scheduler import CancellationToken, IdleScheduler
from .build import build_tree
from .fs import ExclusionFilter
from .types import CollectionResult, PathEntry

# Directories are printed with a trailing "/" so rows can be tagged without stat.
DEFAULT_LISTING_COMMAND: tuple[str, ...] = (
    "find",
    ".",
    "-mindepth",
    "1",
    "-type",
    "d",
    "-printf",
    "%P/\\n",
    "-o",
    "-printf",
    "%P\\n",
)
READ_CHUNK_BYTES = 64 * 1024
STDERR_SUMMARY_MAX_CHARS = 200


class ListingBuffer:
    """Accumulates raw listing output exactly as it arrives."""

    def __init__(self) -> None:
        self._data = bytearray()

    def feed(self, chunk: bytes) -> None:
        self._data.extend(chunk)

    def __len__(self) -> int:
        return len(self._data)

    def text(self) -> str:
        return self._data.decode("utf-8", errors="surrogateescape")


def parse_listing(text: str, exclude: ExclusionFilter | None = None) -> list[PathEntry]:
    """Split finished listing output into tagged ``PathEntry`` rows.

    A trailing ``/`` marks a directory. Rows with any excluded segment are
    dropped, which also drops everything beneath an excluded directory.
    """
    entries: list[PathEntry] = []
    for raw in text.splitlines():
        line = raw.rstrip("\r")
        if line.startswith("./"):
            line = line[2:]
        if not line or line in {".", "./"}:
            continue
        is_dir = line.endswith("/")
        relative = line.rstrip("/")
        if not relative:
            continue
        if exclude is not None and exclude.excludes_any_segment(relative):
            continue
        entries.append(PathEntry(relative, is_dir))
    return entries


class ProcessCollector:
    """Collect a tree by running an external listing command in ``root``."""

    def __init__(
        self,
        scheduler: IdleScheduler,
        command: Sequence[str] = DEFAULT_LISTING_COMMAND,
        exclude: ExclusionFilter | None = None,
        token: CancellationToken | None = None,
    ) -> None:
        self.scheduler = scheduler
        self.command = tuple(command)
        self.exclude = exclude or ExclusionFilter()
        self.token = token or CancellationToken()

    def collect(self, root: Path, on_done: Callable[[CollectionResult], None]) -> None:
        """Start the listing process; ``on_done`` runs on the scheduler thread."""
        root = Path(root)
        try:
            proc = subprocess.Popen(
                list(self.command),
                cwd=root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as exc:
            message = f"failed to run {self.command[0]!r}: {exc}"
            logger.warning("Listing process for {} did not start: {}", root, message)
            self.scheduler.call_soon(lambda: on_done(CollectionResult(root, error=message)))
            return

        logger.debug("Started listing process {} for {}", proc.pid, root)
        buffer = ListingBuffer()

        def finish(returncode: int, stderr_text: str, failure: str | None = None) -> None:
            if self.token.cancelled:
                logger.debug("Discarding listing for {}: view closed", root)
                return
            if failure is not None:
                logger.warning("Collection of {} failed: {}", root, failure)
                on_done(CollectionResult(root, error=failure))
                return
            if returncode != 0:
                detail = stderr_text.strip()[:STDERR_SUMMARY_MAX_CHARS]
                message = f"listing command exited with status {returncode}"
                if detail:
                    message = f"{message}: {detail}"
                logger.warning("Collection of {} failed: {}", root, message)
                on_done(CollectionResult(root, error=message))
                return
            entries = parse_listing(buffer.text(), self.exclude)
            tree = build_tree(entries, root.name or str(root))
            logger.debug("Listing for {} produced {} entries", root, len(entries))
            on_done(CollectionResult(root, tree=tree))

        stderr_chunks: list[bytes] = []

        def drain_stderr() -> None:
            assert proc.stderr is not None
            try:
                stderr_chunks.append(proc.stderr.read())
            except (OSError, ValueError) as exc:
                logger.debug("Reading listing stderr for {} stopped: {}", root, exc)

        def pump() -> None:
            failure: str | None = None
            try:
                assert proc.stdout is not None
                while True:
                    chunk = proc.stdout.read1(READ_CHUNK_BYTES)
                    if not chunk:
                        break
                    self.scheduler.call_soon(lambda chunk=chunk: buffer.feed(chunk))
            except (OSError, ValueError) as exc:
                failure = f"reading listing output failed: {exc}"
                if proc.poll() is None:
                    proc.kill()
            finally:
                stderr_reader.join()
                # Closes both pipes and reaps the child.
                proc.communicate()
            returncode = proc.returncode
            stderr_text = b"".join(stderr_chunks).decode("utf-8", errors="replace")
            self.scheduler.call_soon(lambda: finish(returncode, stderr_text, failure))

        stderr_reader = threading.Thread(
            target=drain_stderr,
            name="foldtree-listing-stderr",
            daemon=True,
        )
        reader = threading.Thread(
            target=pump,
            name="foldtree-listing-reader",
            daemon=True,
        )
        stderr_reader.start()
        reader.start()


__all__ = [
    "DEFAULT_LISTING_COMMAND",
    "ListingBuffer",
    "parse_listing",
    "ProcessCollector",
]
