"""Exceptions raised for API misuse.

Runtime conditions (unreadable directories, failed listing processes, missing
navigation targets) are reported as values instead.
"""

from __future__ import annotations


class FoldtreeError(Exception):
    """Base class for foldtree errors."""


class ConfigurationError(FoldtreeError):
    """A configured value cannot be used."""


class NoDocumentError(FoldtreeError):
    """A view operation needs a document that has not been built yet."""


__all__ = [
    "FoldtreeError",
    "ConfigurationError",
    "NoDocumentError",
]
