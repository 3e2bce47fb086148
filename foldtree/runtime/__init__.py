"""Runtime orchestration: idle scheduling and per-view state.

``TreeView`` is imported lazily so collectors can depend on the scheduler
without creating a package-import cycle.
"""

from __future__ import annotations

from .scheduler import CancellationToken, IdleScheduler


def __getattr__(name: str):
    if name in {"TreeView", "RebuildStatus"}:
        from . import view as _view

        return getattr(_view, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "CancellationToken",
    "IdleScheduler",
    "TreeView",
    "RebuildStatus",
]
