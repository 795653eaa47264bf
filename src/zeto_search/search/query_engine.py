"""Query pipeline: tokenize, match, score, filter, sort and paginate."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Mapping
from dataclasses import dataclass, field
import time
from typing import Any

from zeto_search.config import EngineConfig, SearchOptions
from zeto_search.models import SearchDebugInfo, SearchResponse
from zeto_search.search.fuzzy import calculate_similarity, damerau_levenshtein_distance, max_edit_distance
from zeto_search.search.indexer import DocumentIndexer
from zeto_search.search.inverted_index import make_key
from zeto_search.search.models import DocId, IndexEntry
from zeto_search.search.ordering import paginate, sort_results
from zeto_search.search.stats import ScoreFunction, make_score_function


# Fuzzy match scores are discounted to prefer exact matches
FUZZY_DISCOUNT = 0.8
# Candidates at or below this similarity are rejected even within edit distance
MIN_FUZZY_SIMILARITY = 0.3
# Every accepted match contributes at least this much to a document's score
MIN_CONTRIBUTION = 0.1
SCORE_PRECISION = 4


@dataclass(frozen=True)
class QueryTerms:
    """Query terms after tokenization and stop-word removal."""

    terms: tuple[str, ...]
    normalized: str

    def is_empty(self) -> bool:
        return not self.terms


@dataclass
class ScoreAccumulator:
    """Per-query running scores keyed by document id."""

    scores: dict[DocId, float] = field(default_factory=lambda: defaultdict(float))
    matched_keys: set[str] = field(default_factory=set)

    def add(self, doc_id: DocId, contribution: float) -> None:
        self.scores[doc_id] += contribution

    @property
    def average_score(self) -> float:
        if not self.scores:
            return 0.0
        return sum(self.scores.values()) / len(self.scores)


def normalize_query(query: str) -> str:
    return " ".join(query.split()).casefold()


class QueryEngine:
    """Score documents held by a :class:`DocumentIndexer` against free-text queries."""

    def __init__(self, config: EngineConfig, indexer: DocumentIndexer) -> None:
        self.config = config
        self.indexer = indexer
        self.score_function: ScoreFunction = make_score_function(
            config.scoring,
            k1=config.bm25_k1,
            b=config.bm25_b,
        )

    def tokenize_query(self, query: str) -> QueryTerms:
        normalized = normalize_query(query)
        if not normalized:
            return QueryTerms((), "")
        stop_words = self.config.stop_words
        terms = tuple(token for token in self.indexer.tokenize(normalized) if token and token not in stop_words)
        return QueryTerms(terms, normalized)

    def search(self, query: str, options: SearchOptions) -> SearchResponse:
        """Run the full pipeline; exceptions propagate to the caller."""
        if not query or not query.strip():
            return SearchResponse.empty()

        started = time.perf_counter()
        query_terms = self.tokenize_query(query)
        if query_terms.is_empty():
            return SearchResponse.empty(query_terms.normalized, took_ms=_elapsed_ms(started))

        fields = options.fields if options.fields is not None else self.config.search_fields
        fuzzy_factor = options.fuzzy_factor if options.fuzzy_factor is not None else self.config.fuzzy_factor
        accumulator = self.score(query_terms.terms, fields, fuzzy_factor)

        matches = self._collect(accumulator, options)
        ordered = sort_results(matches, options.sort)
        page = paginate(ordered, offset=options.offset, limit=options.limit)

        debug = None
        if options.debug:
            debug = SearchDebugInfo(
                tokens=list(query_terms.terms),
                matched_keys=len(accumulator.matched_keys),
                documents_scored=len(accumulator.scores),
                average_score=round(accumulator.average_score, SCORE_PRECISION),
            )

        return SearchResponse(
            results=page,
            total=len(page),
            total_results=len(ordered),
            query=query_terms.normalized,
            took_ms=_elapsed_ms(started),
            debug=debug,
        )

    def score(self, terms: tuple[str, ...], fields: list[str], fuzzy_factor: float) -> ScoreAccumulator:
        """Accumulate exact and fuzzy match scores for every term and field."""
        accumulator = ScoreAccumulator()
        index = self.indexer.index

        for term in terms:
            max_distance = max_edit_distance(len(term), fuzzy_factor)
            for field_name in fields:
                exact_key = make_key(field_name, term)
                exact = index.get(exact_key)
                if exact is not None:
                    self._score_entry(exact_key, exact, 1.0, accumulator)

                if max_distance <= 0:
                    continue

                for token, entry in index.scan_field(field_name):
                    if token == term or abs(len(token) - len(term)) > max_distance:
                        continue
                    distance = damerau_levenshtein_distance(term, token)
                    if distance > max_distance:
                        continue
                    similarity = calculate_similarity(term, token, distance)
                    if similarity <= MIN_FUZZY_SIMILARITY:
                        continue
                    self._score_entry(make_key(field_name, token), entry, similarity * FUZZY_DISCOUNT, accumulator)

        return accumulator

    def _score_entry(self, key: str, entry: IndexEntry, weight: float, accumulator: ScoreAccumulator) -> None:
        total_docs = self.indexer.document_count
        avg_length = self.indexer.average_document_length
        lengths = self.indexer.document_lengths
        accumulator.matched_keys.add(key)
        for doc_id, posting in entry.postings.items():
            raw = self.score_function(
                posting.term_frequency,
                entry.document_frequency,
                total_docs,
                lengths.get(doc_id),
                avg_length,
            )
            accumulator.add(doc_id, max(MIN_CONTRIBUTION, raw * weight))

    def _collect(self, accumulator: ScoreAccumulator, options: SearchOptions) -> list[dict[str, Any]]:
        documents = self.indexer.documents_by_id
        matches: list[dict[str, Any]] = []
        for doc_id, score in accumulator.scores.items():
            if score <= 0:
                continue
            record = documents.get(doc_id)
            if record is None:
                continue
            if options.filter is not None and not options.filter(record):
                continue
            matches.append(self._project(record, score))
        return matches

    def _project(self, record: Mapping[str, Any], score: float) -> dict[str, Any]:
        result = {field_name: record.get(field_name) for field_name in self.config.result_fields}
        result["score"] = round(score, SCORE_PRECISION)
        return result


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
