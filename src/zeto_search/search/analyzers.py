"""Tokenizer pipeline used for both indexing and querying.

A tokenizer splits text into word tokens and a chain of filters normalizes
them: case folding, length bounds, and an optional light suffix stemmer.
Stop words are not handled here; the indexer and query engine drop them
so that token positions still count every word of the source text.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from functools import lru_cache
import re
from typing import Protocol


@dataclass
class Token:
    """Represents a token emitted by the pipeline."""

    text: str
    position: int
    start_char: int
    end_char: int

    def copy_with(self, **updates: object) -> Token:
        data = {
            "text": self.text,
            "position": self.position,
            "start_char": self.start_char,
            "end_char": self.end_char,
        }
        data.update(updates)
        return Token(**data)  # type: ignore[arg-type]


class Tokenizer(Protocol):
    """Protocol implemented by tokenizers."""

    def __call__(self, text: str) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class TokenFilter(Protocol):
    """Protocol implemented by token filters."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class RegexTokenizer:
    """Regex-based tokenizer that yields word tokens.

    The default pattern splits on anything that is not a letter, digit or
    underscore, so "Node.js" yields "Node" and "js".
    """

    def __init__(self, pattern: str = r"\w+", flags: int = re.UNICODE) -> None:
        self.pattern = re.compile(pattern, flags)

    def __call__(self, text: str) -> Iterator[Token]:
        for position, match in enumerate(self.pattern.finditer(text)):
            yield Token(
                text=match.group(0),
                position=position,
                start_char=match.start(),
                end_char=match.end(),
            )


class LowercaseFilter:
    """Filter that case-folds token text."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            folded = token.text.casefold()
            if folded == token.text:
                yield token
            else:
                yield token.copy_with(text=folded)


class LengthFilter:
    """Drops tokens shorter than ``min_length`` or longer than ``max_length``."""

    def __init__(self, min_length: int = 1, max_length: int = 50) -> None:
        self.min_length = min_length
        self.max_length = max_length

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            if self.min_length <= len(token.text) <= self.max_length:
                yield token


_SUFFIX_RULES: tuple[tuple[str, str], ...] = (
    ("ization", "ize"),
    ("ational", "ate"),
    ("fulness", "ful"),
    ("ousness", "ous"),
    ("iveness", "ive"),
    ("tional", "tion"),
    ("biliti", "ble"),
    ("lessli", "less"),
    ("entli", "ent"),
    ("enci", "ence"),
    ("anci", "ance"),
    ("izer", "ize"),
    ("abli", "able"),
    ("alli", "al"),
    ("ator", "ate"),
    ("alism", "al"),
    ("aliti", "al"),
    ("ousli", "ous"),
    ("ation", "ate"),
    ("ness", ""),
    ("ment", ""),
)

_SIMPLE_SUFFIXES: tuple[str, ...] = ("ingly", "edly", "ing", "ies", "ed", "ly", "es", "s")
# "es" is only a plural ending after these; otherwise just the "s" is stripped
_ES_STEM_ENDINGS: tuple[str, ...] = ("ss", "x", "z", "ch", "sh")


class StemFilter:
    """Applies a small Porter-style suffix stemmer ("running" -> "run")."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            stemmed = stem(token.text)
            yield token if stemmed == token.text else token.copy_with(text=stemmed)


@lru_cache(maxsize=8192)
def stem(word: str) -> str:
    """Return the stem of a lowercase word, or the word itself."""
    candidate = _strip_complex_suffix(word)
    if candidate:
        return candidate
    candidate = _strip_simple_suffix(word)
    if candidate:
        return candidate
    return word


def _strip_complex_suffix(word: str) -> str | None:
    for suffix, replacement in _SUFFIX_RULES:
        if word.endswith(suffix) and len(word) - len(suffix) >= 2:
            candidate = word[: -len(suffix)] + replacement
            if len(candidate) >= 2:
                return candidate
    return None


def _strip_simple_suffix(word: str) -> str | None:
    if word.endswith("ss"):
        return None
    for suffix in _SIMPLE_SUFFIXES:
        if word.endswith(suffix) and len(word) - len(suffix) >= 2:
            candidate = word[: -len(suffix)]
            if suffix == "es" and not candidate.endswith(_ES_STEM_ENDINGS):
                continue
            if suffix == "ies":
                candidate += "y"
            elif suffix in {"ing", "ed"} and _ends_with_double_consonant(candidate):
                candidate = candidate[:-1]
            if len(candidate) >= 2:
                return candidate
    return None


def _ends_with_double_consonant(word: str) -> bool:
    return len(word) >= 2 and word[-1] == word[-2] and word[-1] not in "aeioulsz"


class AnalyzerPipeline:
    """Composable analyzer pipeline (tokenizer + filters)."""

    def __init__(self, tokenizer: Tokenizer, filters: Sequence[TokenFilter] | None = None) -> None:
        self.tokenizer = tokenizer
        self.filters = list(filters or [])

    def __call__(self, text: str) -> list[Token]:
        stream: Iterable[Token] = self.tokenizer(text)
        for token_filter in self.filters:
            stream = token_filter(stream)
        tokens = list(stream)
        for idx, token in enumerate(tokens):  # normalize positions post-filtering
            token.position = idx
        return tokens


def build_analyzer(*, stem: bool = False, min_length: int = 1, max_length: int = 50) -> AnalyzerPipeline:
    """Return the standard pipeline: word split, case fold, length bounds, optional stemming."""
    filters: list[TokenFilter] = [LowercaseFilter(), LengthFilter(min_length, max_length)]
    if stem:
        filters.append(StemFilter())
    return AnalyzerPipeline(RegexTokenizer(), filters)


def tokenize(text: str, *, stem: bool = False, min_length: int = 1, max_length: int = 50) -> list[str]:
    """Return the normalized token texts for ``text`` in order."""
    if not text:
        return []
    return [token.text for token in build_analyzer(stem=stem, min_length=min_length, max_length=max_length)(text)]


TokenizeFn = Callable[[str], list[str]]


def make_tokenize(*, stem: bool = False, min_length: int = 1, max_length: int = 50) -> TokenizeFn:
    """Bind tokenizer options once and return a ``text -> tokens`` callable."""
    analyzer = build_analyzer(stem=stem, min_length=min_length, max_length=max_length)

    def _tokenize(text: str) -> list[str]:
        if not text:
            return []
        return [token.text for token in analyzer(text)]

    return _tokenize
