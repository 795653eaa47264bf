"""Statistical helpers for TF-IDF and BM25 scoring.

The functions here are pure and independent of the index structure; the
query engine feeds them counts read from postings and the document length
table.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import math
from typing import Protocol

from zeto_search.search.models import DocId


DEFAULT_K1 = 1.5
DEFAULT_B = 0.75


@dataclass(frozen=True)
class DocumentLengthStats:
    """Aggregated token counts over the indexed documents."""

    total_terms: int
    document_count: int

    @property
    def average_length(self) -> float:
        if self.document_count == 0:
            return 0.0
        return self.total_terms / self.document_count


def compute_length_stats(lengths: Mapping[DocId, int]) -> DocumentLengthStats:
    """Return aggregate stats given per-document lengths."""
    return DocumentLengthStats(
        total_terms=sum(max(length, 0) for length in lengths.values()),
        document_count=len(lengths),
    )


def tfidf_idf(doc_freq: int, total_docs: int) -> float:
    """Smoothed IDF, always positive: ``ln((N + 1) / (df + 1)) + 1``."""
    return math.log((total_docs + 1) / (doc_freq + 1)) + 1.0


def tf_idf(tf: int, doc_freq: int, total_docs: int) -> float:
    """Return ``tf * idf`` with the smoothed IDF."""
    return tf * tfidf_idf(doc_freq, total_docs)


def bm25_idf(doc_freq: int, total_docs: int) -> float:
    """Robertson/Sparck-Jones IDF: ``ln((N - df + 0.5) / (df + 0.5))``.

    Not clamped: terms contained in more than half the documents get a
    negative IDF.
    """
    return math.log((total_docs - doc_freq + 0.5) / (doc_freq + 0.5))


def bm25(
    tf: int,
    doc_freq: int,
    total_docs: int,
    doc_length: float | None,
    avg_doc_length: float,
    *,
    k1: float = DEFAULT_K1,
    b: float = DEFAULT_B,
) -> float:
    """Compute the BM25 score of one posting.

    An unknown ``doc_length`` falls back to the average length. When the
    average length is zero the length ratio is taken as 1.
    """
    if tf <= 0:
        return 0.0
    if doc_length is None:
        doc_length = avg_doc_length
    length_ratio = doc_length / avg_doc_length if avg_doc_length > 0 else 1.0
    denominator = tf + k1 * (1 - b + b * length_ratio)
    return bm25_idf(doc_freq, total_docs) * (tf * (k1 + 1)) / denominator


class ScoreFunction(Protocol):
    """Scores one posting given corpus statistics."""

    def __call__(
        self, tf: int, doc_freq: int, total_docs: int, doc_length: float | None, avg_doc_length: float
    ) -> float:  # pragma: no cover - interface definition
        ...


def make_score_function(scoring: str, *, k1: float = DEFAULT_K1, b: float = DEFAULT_B) -> ScoreFunction:
    """Return the scoring callable for ``"bm25"`` or ``"tfidf"``."""
    if scoring == "bm25":

        def _bm25(tf: int, doc_freq: int, total_docs: int, doc_length: float | None, avg_doc_length: float) -> float:
            return bm25(tf, doc_freq, total_docs, doc_length, avg_doc_length, k1=k1, b=b)

        return _bm25
    if scoring == "tfidf":

        def _tfidf(tf: int, doc_freq: int, total_docs: int, doc_length: float | None, avg_doc_length: float) -> float:
            return tf_idf(tf, doc_freq, total_docs)

        return _tfidf
    msg = f"Unknown scoring function '{scoring}'. Available: ['bm25', 'tfidf']"
    raise ValueError(msg)
