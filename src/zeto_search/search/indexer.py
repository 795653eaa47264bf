"""Document indexing and index maintenance.

The indexer owns every piece of mutable engine state: the inverted index,
the ordered document collection, the identifier map, and the document
length table. All inserts, updates and deletes go through it so the
index invariants hold after every operation:

- ``entry.document_frequency == len(entry.postings)`` for every entry
- an entry exists only while it has at least one posting
- ``len(posting.positions) == posting.term_frequency``
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping
import logging
from typing import Any

from zeto_search.config import EngineConfig
from zeto_search.errors import ValidationWarning
from zeto_search.search.analyzers import TokenizeFn, make_tokenize
from zeto_search.search.inverted_index import InvertedIndex
from zeto_search.search.models import DocId, IndexBuildResult
from zeto_search.search.stats import compute_length_stats


logger = logging.getLogger(__name__)


class DocumentIndexer:
    """Build and maintain the inverted index for one engine instance."""

    def __init__(self, config: EngineConfig, tokenize: TokenizeFn | None = None) -> None:
        self.config = config
        self.tokenize = tokenize or make_tokenize(
            stem=config.enable_stemming,
            min_length=config.min_token_length,
            max_length=config.max_token_length,
        )
        self.index = InvertedIndex()
        self.documents: list[Mapping[str, Any]] = []
        self.documents_by_id: dict[DocId, Mapping[str, Any]] = {}
        self.document_lengths: dict[DocId, int] = {}
        self.average_document_length = 0.0
        self._document_keys: dict[DocId, set[str]] = {}

    @property
    def document_count(self) -> int:
        return len(self.documents_by_id)

    def clear(self) -> None:
        self.index.clear()
        self.documents.clear()
        self.documents_by_id.clear()
        self.document_lengths.clear()
        self._document_keys.clear()
        self.average_document_length = 0.0

    def index_documents(self, records: Iterable[Any]) -> IndexBuildResult:
        """Replace the index contents with ``records``.

        Invalid records are skipped with a warning; earlier records of the
        batch stay indexed.
        """
        self.clear()
        indexed = 0
        warnings: list[ValidationWarning] = []

        for position, record in enumerate(records):
            problem = self.validate(record, position=position)
            if problem is not None:
                logger.warning("Skipping document: %s", problem)
                warnings.append(problem)
                continue
            self.index_document(record)
            indexed += 1

        self.recompute_average_length()
        logger.info(
            "Indexed %d documents (%d skipped, %d index keys)",
            indexed,
            len(warnings),
            len(self.index),
        )
        return IndexBuildResult(
            documents_indexed=indexed,
            documents_skipped=len(warnings),
            warnings=tuple(warnings),
        )

    def validate(self, record: Any, *, position: int | None = None) -> ValidationWarning | None:
        """Return a warning describing why ``record`` cannot be indexed, or None."""
        id_field = self.config.identifier_field
        if not isinstance(record, Mapping):
            return ValidationWarning(
                f"expected a mapping, got {type(record).__name__}",
                position=position,
            )
        doc_id = record.get(id_field)
        if doc_id is None:
            return ValidationWarning(f"missing identifier field '{id_field}'", position=position)
        if not isinstance(doc_id, Hashable):
            return ValidationWarning(
                f"identifier field '{id_field}' must be hashable, got {type(doc_id).__name__}",
                position=position,
            )
        if doc_id in self.documents_by_id:
            return ValidationWarning(
                f"duplicate identifier {doc_id!r}",
                doc_id=doc_id,
                position=position,
            )
        return None

    def index_document(self, record: Mapping[str, Any]) -> None:
        """Tokenize the search fields of an already validated record into the index."""
        doc_id = record[self.config.identifier_field]
        stop_words = self.config.stop_words
        keys: set[str] = set()
        length = 0

        for field_name in self.config.search_fields:
            value = record.get(field_name)
            if value is None:
                continue
            text = value if isinstance(value, str) else str(value)
            if not text:
                continue
            for position, token in enumerate(self.tokenize(text)):
                if not token or token in stop_words:
                    continue
                keys.add(self.index.add_occurrence(field_name, token, doc_id, position))
                length += 1

        self.documents.append(record)
        self.documents_by_id[doc_id] = record
        self.document_lengths[doc_id] = length
        self._document_keys[doc_id] = keys

    def add_document(self, record: Any) -> bool:
        problem = self.validate(record)
        if problem is not None:
            logger.warning("Document not added: %s", problem)
            return False
        self.index_document(record)
        self.recompute_average_length()
        logger.debug("Added document %r", record[self.config.identifier_field])
        return True

    def update_document(self, record: Any) -> bool:
        """Replace an existing document; absent identifiers are left alone."""
        if not isinstance(record, Mapping) or record.get(self.config.identifier_field) is None:
            logger.warning("Document not updated: missing identifier field '%s'", self.config.identifier_field)
            return False
        doc_id = record[self.config.identifier_field]
        if not isinstance(doc_id, Hashable) or doc_id not in self.documents_by_id:
            logger.debug("Update ignored for unknown document %r", doc_id)
            return False

        self._remove(doc_id)
        self.index_document(record)
        self.recompute_average_length()
        logger.debug("Updated document %r", doc_id)
        return True

    def remove_document(self, doc_id: Any) -> bool:
        if not isinstance(doc_id, Hashable) or doc_id not in self.documents_by_id:
            return False
        self._remove(doc_id)
        self.recompute_average_length()
        logger.debug("Removed document %r", doc_id)
        return True

    def _remove(self, doc_id: DocId) -> None:
        self.index.remove_postings(doc_id, self._document_keys.pop(doc_id, ()))
        record = self.documents_by_id.pop(doc_id)
        for idx, stored in enumerate(self.documents):
            if stored is record:
                del self.documents[idx]
                break
        self.document_lengths.pop(doc_id, None)

    def recompute_average_length(self) -> float:
        self.average_document_length = compute_length_stats(self.document_lengths).average_length
        return self.average_document_length
