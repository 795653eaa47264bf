"""Fuzzy matching and string similarity for typo-tolerant search.

Both the query engine (fuzzy term expansion) and auto-suggest rank
candidate vocabulary with the same similarity model:

- edit similarity: ``1 - distance / max(len(a), len(b))``
- Jaccard similarity of the case-folded character sets
- the larger of the two, plus additive boosts when the candidate contains
  the term (+0.2) or starts with it (+0.1)

Scores are not capped at 1.0; boosts stack on top of the base score.
"""

from __future__ import annotations

import math


SUBSTRING_BOOST = 0.2
PREFIX_BOOST = 0.1


def damerau_levenshtein_distance(s1: str, s2: str) -> int:
    """Return the unrestricted Damerau-Levenshtein distance between two strings.

    Counts insertions, deletions, substitutions, and transpositions of
    adjacent characters, with no restriction on editing a substring more
    than once (so "ca" -> "abc" is 2, not 3).

    Examples:
        >>> damerau_levenshtein_distance("kitten", "sitting")
        3
        >>> damerau_levenshtein_distance("javscript", "jvascript")
        1
        >>> damerau_levenshtein_distance("", "abc")
        3
    """
    if s1 == s2:
        return 0
    if not s1:
        return len(s2)
    if not s2:
        return len(s1)

    len1, len2 = len(s1), len(s2)
    max_dist = len1 + len2
    last_row_for_char: dict[str, int] = {}

    # (len1 + 2) x (len2 + 2) table with a sentinel border of max_dist
    table = [[0] * (len2 + 2) for _ in range(len1 + 2)]
    table[0][0] = max_dist
    for i in range(len1 + 1):
        table[i + 1][0] = max_dist
        table[i + 1][1] = i
    for j in range(len2 + 1):
        table[0][j + 1] = max_dist
        table[1][j + 1] = j

    for i in range(1, len1 + 1):
        last_match_col = 0
        for j in range(1, len2 + 1):
            prev_row = last_row_for_char.get(s2[j - 1], 0)
            prev_col = last_match_col
            if s1[i - 1] == s2[j - 1]:
                cost = 0
                last_match_col = j
            else:
                cost = 1
            table[i + 1][j + 1] = min(
                table[i][j] + cost,  # substitution
                table[i + 1][j] + 1,  # insertion
                table[i][j + 1] + 1,  # deletion
                table[prev_row][prev_col] + (i - prev_row - 1) + 1 + (j - prev_col - 1),  # transposition
            )
        last_row_for_char[s1[i - 1]] = i

    return table[len1 + 1][len2 + 1]


def jaccard_similarity(s1: str, s2: str) -> float:
    """Return intersection-over-union of the case-folded character sets."""
    chars1 = set(s1.casefold())
    chars2 = set(s2.casefold())
    union = chars1 | chars2
    if not union:
        return 0.0
    return len(chars1 & chars2) / len(union)


def calculate_similarity(term: str, token: str, distance: int | None = None) -> float:
    """Score how closely ``token`` resembles ``term``.

    Args:
        term: The query term (or partial term for suggestions).
        token: A candidate token from the index vocabulary.
        distance: Precomputed edit distance, if the caller already has it.

    Returns:
        1.0 for identical strings, otherwise the best of edit and Jaccard
        similarity plus substring/prefix boosts. May exceed 1.0.
    """
    if term == token:
        return 1.0

    if distance is None:
        distance = damerau_levenshtein_distance(term, token)
    longest = max(len(term), len(token))
    edit_similarity = 1.0 - distance / longest if longest else 0.0
    similarity = max(edit_similarity, jaccard_similarity(term, token))

    if term in token:
        similarity += SUBSTRING_BOOST
    if token.startswith(term):
        similarity += PREFIX_BOOST
    return similarity


def max_edit_distance(term_length: int, fuzzy_factor: float) -> int:
    """Return the tolerated edit distance for a term, rounding halves up.

    Examples:
        >>> max_edit_distance(10, 0.1)
        1
        >>> max_edit_distance(5, 0.1)
        1
        >>> max_edit_distance(4, 0.1)
        0
    """
    if term_length <= 0 or fuzzy_factor <= 0:
        return 0
    return int(math.floor(term_length * fuzzy_factor + 0.5))
