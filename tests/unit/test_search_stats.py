"""Unit tests for scoring helpers."""

from __future__ import annotations

import math

import pytest

from zeto_search.search.stats import (
    DocumentLengthStats,
    bm25,
    bm25_idf,
    compute_length_stats,
    make_score_function,
    tf_idf,
    tfidf_idf,
)


def test_compute_length_stats_returns_average() -> None:
    stats = compute_length_stats({"doc1": 100, "doc2": 50})

    assert isinstance(stats, DocumentLengthStats)
    assert stats.document_count == 2
    assert stats.average_length == 75


def test_compute_length_stats_empty_average_is_zero() -> None:
    assert compute_length_stats({}).average_length == 0.0


def test_tfidf_idf_is_positive_even_for_ubiquitous_terms() -> None:
    assert tfidf_idf(doc_freq=3, total_docs=3) == pytest.approx(1.0)
    assert tfidf_idf(doc_freq=1, total_docs=10) > tfidf_idf(doc_freq=5, total_docs=10) > 0


@pytest.mark.parametrize(("tf", "df", "n"), [(1, 1, 1), (3, 2, 10), (1, 100, 100), (7, 1, 1000)])
def test_tf_idf_is_finite_and_positive(tf: int, df: int, n: int) -> None:
    score = tf_idf(tf, df, n)
    assert math.isfinite(score)
    assert score > 0


def test_tf_idf_scales_with_term_frequency() -> None:
    assert tf_idf(2, 1, 4) == pytest.approx(2 * tf_idf(1, 1, 4))


def test_bm25_idf_is_not_clamped() -> None:
    assert bm25_idf(doc_freq=1, total_docs=10) > 0
    assert bm25_idf(doc_freq=3, total_docs=3) == pytest.approx(math.log(0.5 / 3.5))
    assert bm25_idf(doc_freq=3, total_docs=3) < 0


def test_bm25_matches_reference_formula() -> None:
    tf, df, n, dl, avgdl = 2, 3, 20, 12, 10.0
    idf = math.log((n - df + 0.5) / (df + 0.5))
    expected = idf * (tf * 2.5) / (tf + 1.5 * (1 - 0.75 + 0.75 * dl / avgdl))

    assert bm25(tf, df, n, dl, avgdl) == pytest.approx(expected)


def test_bm25_respects_term_frequency() -> None:
    assert bm25(3, 1, 10, 100, 80) > bm25(1, 1, 10, 100, 80)


def test_bm25_penalizes_long_documents() -> None:
    assert bm25(1, 1, 10, 10, 10) > bm25(1, 1, 10, 40, 10)


def test_bm25_unknown_length_falls_back_to_average() -> None:
    assert bm25(2, 1, 10, None, 8.0) == pytest.approx(bm25(2, 1, 10, 8.0, 8.0))


def test_bm25_zero_average_length_uses_unit_ratio() -> None:
    assert bm25(2, 1, 10, 5, 0.0) == pytest.approx(bm25(2, 1, 10, 5, 5.0))


def test_bm25_zero_term_frequency() -> None:
    assert bm25(0, 1, 10, 5, 5.0) == 0.0


def test_bm25_custom_parameters() -> None:
    # b = 0 disables length normalization
    assert bm25(1, 1, 10, 50, 5.0, b=0.0) == pytest.approx(bm25(1, 1, 10, 5, 5.0, b=0.0))


def test_make_score_function_selects_formula() -> None:
    bm25_fn = make_score_function("bm25", k1=1.2, b=0.5)
    tfidf_fn = make_score_function("tfidf")

    assert bm25_fn(2, 1, 10, 4, 5.0) == pytest.approx(bm25(2, 1, 10, 4, 5.0, k1=1.2, b=0.5))
    assert tfidf_fn(2, 1, 10, 4, 5.0) == pytest.approx(tf_idf(2, 1, 10))


def test_make_score_function_rejects_unknown_name() -> None:
    with pytest.raises(ValueError, match="Unknown scoring function"):
        make_score_function("cosine")
