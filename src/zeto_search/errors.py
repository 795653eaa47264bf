"""Exception taxonomy for the search engine."""

from __future__ import annotations

from typing import Any


class ZetoSearchError(Exception):
    """Base class for all engine errors."""


class ConfigurationError(ZetoSearchError, ValueError):
    """Raised for invalid engine configuration or auto-suggest options."""


class ValidationWarning(ZetoSearchError, UserWarning):
    """Describes a record that was skipped during indexing.

    Instances are collected and logged, never raised by the engine.
    """

    def __init__(self, message: str, *, doc_id: Any = None, position: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.doc_id = doc_id
        self.position = position

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        return f"record #{self.position}: {self.message}"


class SearchFailure(ZetoSearchError, RuntimeError):
    """Wraps an unexpected error raised inside the query pipeline."""
