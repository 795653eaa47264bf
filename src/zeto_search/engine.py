"""ZetoSearch - embeddable in-process full-text search engine.

One ``ZetoSearch`` instance owns its inverted index, document collection and
length table; nothing is shared between instances. The public surface is
small:

- index_documents(records) -> IndexBuildResult
- add_document(record) / update_document(record) / remove_document(doc_id) -> bool
- search(query, options) -> SearchResponse
- auto_suggest(partial, options) -> list[str]
- get_stats() -> IndexStats

The engine is synchronous and assumes a single writer. Hosts that share an
instance across threads must serialize calls themselves.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import logging
import time
from typing import Any

from pydantic import BaseModel, ValidationError

from zeto_search.config import EngineConfig, SearchOptions, SuggestOptions
from zeto_search.errors import ConfigurationError, SearchFailure
from zeto_search.models import IndexStats, SearchResponse
from zeto_search.observability.context import bound_context
from zeto_search.observability.metrics import (
    DOCUMENT_COUNT,
    INDEX_TERM_COUNT,
    SEARCH_COUNT,
    SEARCH_LATENCY,
    SKIPPED_DOCUMENTS,
    track_latency,
)
from zeto_search.observability.tracing import create_span
from zeto_search.search.indexer import DocumentIndexer
from zeto_search.search.models import IndexBuildResult
from zeto_search.search.query_engine import QueryEngine, normalize_query
from zeto_search.search.suggest import rank_suggestions


logger = logging.getLogger(__name__)


def _merge_options(model: type[BaseModel], options: BaseModel | Mapping[str, Any] | None, overrides: dict[str, Any]):
    if isinstance(options, model):
        if not overrides:
            return options
        data = options.model_dump()
    else:
        data = dict(options or {})
    data.update(overrides)
    return model.model_validate(data)


class ZetoSearch:
    """In-memory search engine over schema-less records."""

    def __init__(self, config: EngineConfig | Mapping[str, Any] | None = None, **options: Any) -> None:
        """Validate configuration and create an empty index.

        Args:
            config: An ``EngineConfig`` or a mapping of its fields
            **options: Field overrides applied on top of ``config``

        Raises:
            ConfigurationError: ``search_fields``/``result_fields`` missing or empty,
                or any other option out of range
        """
        self.config = EngineConfig.build(config, **options)
        self._indexer = DocumentIndexer(self.config)
        self._query_engine = QueryEngine(self.config, self._indexer)
        self._labels = {"engine": self.config.name}
        logger.debug(
            "Initialized ZetoSearch %r on fields %s",
            self.config.name,
            ", ".join(self.config.search_fields),
        )

    def __len__(self) -> int:
        return self._indexer.document_count

    def __contains__(self, doc_id: object) -> bool:
        try:
            return doc_id in self._indexer.documents_by_id
        except TypeError:
            return False

    @property
    def documents(self) -> list[Mapping[str, Any]]:
        """Indexed records in insertion order (a copy of the collection)."""
        return list(self._indexer.documents)

    def get_document(self, doc_id: Any) -> Mapping[str, Any] | None:
        try:
            return self._indexer.documents_by_id.get(doc_id)
        except TypeError:
            return None

    # Indexing -----------------------------------------------------------------

    def index_documents(self, records: Iterable[Any]) -> IndexBuildResult:
        """Clear the engine and index ``records`` in order, skipping invalid ones."""
        with (
            bound_context(engine=self.config.name, operation="index_documents"),
            create_span("zeto_search.index_documents", attributes={"zeto_search.engine": self.config.name}) as span,
        ):
            result = self._indexer.index_documents(records)
            span.set_attribute("zeto_search.documents_indexed", result.documents_indexed)
            span.set_attribute("zeto_search.documents_skipped", result.documents_skipped)
        if result.documents_skipped:
            SKIPPED_DOCUMENTS.labels(**self._labels).inc(result.documents_skipped)
        self._publish_index_gauges()
        return result

    def add_document(self, record: Any) -> bool:
        added = self._indexer.add_document(record)
        if added:
            self._publish_index_gauges()
        else:
            SKIPPED_DOCUMENTS.labels(**self._labels).inc()
        return added

    def update_document(self, record: Any) -> bool:
        """Replace the stored record with the same identifier; no-op when absent."""
        updated = self._indexer.update_document(record)
        if updated:
            self._publish_index_gauges()
        return updated

    def remove_document(self, doc_id: Any) -> bool:
        removed = self._indexer.remove_document(doc_id)
        if removed:
            self._publish_index_gauges()
        return removed

    def _publish_index_gauges(self) -> None:
        DOCUMENT_COUNT.labels(**self._labels).set(self._indexer.document_count)
        INDEX_TERM_COUNT.labels(**self._labels).set(len(self._indexer.index))

    # Querying -----------------------------------------------------------------

    def search(
        self,
        query: str,
        options: SearchOptions | Mapping[str, Any] | None = None,
        **overrides: Any,
    ) -> SearchResponse:
        """Rank indexed documents against a free-text query.

        Never raises: failures (including invalid options or a raising
        ``filter``) are returned as ``SearchResponse.error`` with no results.
        """
        started = time.perf_counter()
        with (
            bound_context(engine=self.config.name, operation="search"),
            create_span("zeto_search.search", attributes={"zeto_search.engine": self.config.name}) as span,
        ):
            try:
                with track_latency(SEARCH_LATENCY, **self._labels):
                    parsed = _merge_options(SearchOptions, options, overrides)
                    response = self._query_engine.search(query, parsed)
            except Exception as exc:
                failure = SearchFailure(f"{type(exc).__name__}: {exc}")
                logger.exception("Search failed for query %r", query)
                span.set_attribute("zeto_search.error", str(failure))
                SEARCH_COUNT.labels(status="error", **self._labels).inc()
                return SearchResponse.empty(
                    normalize_query(query) if isinstance(query, str) else "",
                    took_ms=(time.perf_counter() - started) * 1000,
                    error=str(failure),
                )

            span.set_attribute("zeto_search.total_results", response.total_results)
            logger.debug(
                "Search returned %d of %d results",
                response.total,
                response.total_results,
                extra={"query": response.query, "took_ms": response.took_ms},
            )
        SEARCH_COUNT.labels(status="ok" if response.total_results else "empty", **self._labels).inc()
        return response

    def auto_suggest(
        self,
        partial_query: str,
        options: SuggestOptions | Mapping[str, Any] | None = None,
        **overrides: Any,
    ) -> list[str]:
        """Return index vocabulary that completes the last word of ``partial_query``.

        Raises:
            ConfigurationError: ``options`` or keyword overrides fail validation
        """
        try:
            parsed = _merge_options(SuggestOptions, options, overrides)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid suggest options: {exc}") from exc
        with (
            bound_context(engine=self.config.name, operation="auto_suggest"),
            create_span("zeto_search.auto_suggest", attributes={"zeto_search.engine": self.config.name}) as span,
        ):
            suggestions = rank_suggestions(partial_query, self._indexer.index, self._indexer.tokenize, parsed)
            span.set_attribute("zeto_search.suggestions", len(suggestions))
        return suggestions

    def get_stats(self) -> IndexStats:
        return IndexStats(
            total_documents=self._indexer.document_count,
            total_tokens=len(self._indexer.index),
            avg_doc_length=self._indexer.average_document_length,
            index_size=self._indexer.index.serialized_size(),
            fields_indexed=list(self.config.search_fields),
        )
