"""Public package surface for foldtree.

Exports ``main`` for programmatic CLI invocation.
Most implementation lives in submodules under ``foldtree``.
"""

from __future__ import annotations

from loguru import logger

# Library loggers stay silent until the CLI calls ``foldtree.log.setup_logging``.
logger.disable("foldtree")


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main"]
