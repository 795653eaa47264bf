"""Search data models."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import Any


DocId = Hashable


@dataclass
class Posting:
    """Occurrences of one token within one document field."""

    term_frequency: int = 0
    positions: list[int] = field(default_factory=list)

    def add(self, position: int) -> None:
        self.term_frequency += 1
        self.positions.append(position)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"tf": self.term_frequency, "positions": list(self.positions)}


@dataclass
class IndexEntry:
    """Postings for one ``field:token`` key plus its document frequency."""

    document_frequency: int = 0
    postings: dict[DocId, Posting] = field(default_factory=dict)

    def posting_for(self, doc_id: DocId) -> Posting:
        """Return the document's posting, creating it on first occurrence."""
        posting = self.postings.get(doc_id)
        if posting is None:
            posting = Posting()
            self.postings[doc_id] = posting
            self.document_frequency += 1
        return posting

    def discard(self, doc_id: DocId) -> bool:
        if self.postings.pop(doc_id, None) is None:
            return False
        self.document_frequency -= 1
        return True

    def is_empty(self) -> bool:
        return not self.postings

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization; document ids become strings."""
        return {
            "df": self.document_frequency,
            "postings": {str(doc_id): posting.to_dict() for doc_id, posting in self.postings.items()},
        }


@dataclass(frozen=True)
class IndexBuildResult:
    """Outcome of a bulk indexing run."""

    documents_indexed: int
    documents_skipped: int
    warnings: tuple[Any, ...] = ()
