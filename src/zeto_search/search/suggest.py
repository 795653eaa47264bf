"""Vocabulary auto-completion over the inverted index."""

from __future__ import annotations

from zeto_search.config import SuggestOptions
from zeto_search.search.analyzers import TokenizeFn
from zeto_search.search.fuzzy import calculate_similarity, damerau_levenshtein_distance, max_edit_distance
from zeto_search.search.inverted_index import InvertedIndex, split_key


# Extra weight for tokens that complete the typed prefix
PREFIX_MATCH_BONUS = 0.5


def rank_suggestions(
    partial_query: str,
    index: InvertedIndex,
    tokenize: TokenizeFn,
    options: SuggestOptions,
) -> list[str]:
    """Return the best vocabulary completions for the last word of ``partial_query``.

    A token qualifies when it starts with the stem or lies within the
    tolerated edit distance of it. Each qualifying token is scored as
    ``document_frequency * (similarity + prefix bonus)``; a token found in
    several fields keeps its best score.
    """
    tokens = tokenize(partial_query or "")
    if not tokens:
        return []

    stem = tokens[-1]
    max_distance = max_edit_distance(len(stem), options.fuzzy_factor)
    fields = set(options.fields) if options.fields is not None else None
    best: dict[str, float] = {}

    for key, entry in index.items():
        field_name, token = split_key(key)
        if fields is not None and field_name not in fields:
            continue
        is_prefix = token.startswith(stem)
        distance = damerau_levenshtein_distance(stem, token)
        if not is_prefix and distance > max_distance:
            continue
        similarity = calculate_similarity(stem, token, distance)
        score = entry.document_frequency * (similarity + (PREFIX_MATCH_BONUS if is_prefix else 0.0))
        if score > best.get(token, float("-inf")):
            best[token] = score

    ranked = sorted(best.items(), key=lambda item: (-item[1], item[0]))
    return [token for token, _score in ranked[: options.limit]]
