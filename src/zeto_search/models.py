"""Pydantic response models returned by the public engine API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class SearchDebugInfo(BaseModel):
    """Breakdown of how a query was processed.

    Fields:
        tokens: Query terms after tokenization and stop-word removal
        matched_keys: Number of ``field:token`` index keys that contributed scores
        documents_scored: Number of documents that accumulated a score
        average_score: Mean score over every scored document, not only the returned page
    """

    tokens: list[str] = Field(default_factory=list)
    matched_keys: int = 0
    documents_scored: int = 0
    average_score: float = 0.0


class SearchResponse(BaseModel):
    """Response of ``ZetoSearch.search``.

    The shape is the same on success, on an empty query, and on failure:
    ``results`` is always a list (empty on error) and ``error`` carries the
    failure message when the pipeline raised.

    Example Success Response:
        {
            "results": [{"id": 1, "title": "JavaScript Basics", "score": 1.2345}],
            "total": 1,
            "total_results": 1,
            "query": "javascript",
            "took_ms": 0.41,
            "debug": None,
            "error": None
        }
    """

    results: list[dict[str, Any]] = Field(default_factory=list, description="Projected results for this page")
    total: int = Field(default=0, description="Number of results returned in this page")
    total_results: int = Field(default=0, description="Number of matching documents before pagination")
    query: str = Field(default="", description="Normalized query string")
    took_ms: float = Field(default=0.0, description="Elapsed time in milliseconds")
    debug: SearchDebugInfo | None = Field(default=None, description="Present when debug output was requested")
    error: str | None = Field(default=None, description="Error message if the search failed")

    @classmethod
    def empty(cls, query: str = "", *, took_ms: float = 0.0, error: str | None = None) -> SearchResponse:
        return cls(query=query, took_ms=took_ms, error=error)


class IndexStats(BaseModel):
    """Snapshot of index size and shape."""

    total_documents: int
    total_tokens: int = Field(description="Distinct field:token keys in the index")
    avg_doc_length: float
    index_size: int = Field(description="Byte size of the JSON-serialized index")
    fields_indexed: list[str]
