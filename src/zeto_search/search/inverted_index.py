"""In-memory inverted index keyed by ``field:token``.

The index is a flat mapping from composite keys to :class:`IndexEntry`
objects. Entries are created on the first occurrence of a token in a field
and deleted as soon as their last posting is removed, so every key present
in the index is contained by at least one indexed document.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

import orjson

from zeto_search.search.models import DocId, IndexEntry, Posting


KEY_SEPARATOR = ":"


def make_key(field_name: str, token: str) -> str:
    return f"{field_name}{KEY_SEPARATOR}{token}"


def split_key(key: str) -> tuple[str, str]:
    """Split a composite key into ``(field, token)``.

    Tokens never contain the separator, so the last separator wins and
    field names may contain it.
    """
    field_name, _, token = key.rpartition(KEY_SEPARATOR)
    return field_name, token


class InvertedIndex:
    """Mapping from ``field:token`` to postings with document frequencies."""

    def __init__(self) -> None:
        self._entries: dict[str, IndexEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def get(self, key: str) -> IndexEntry | None:
        return self._entries.get(key)

    def lookup(self, field_name: str, token: str) -> IndexEntry | None:
        return self._entries.get(make_key(field_name, token))

    def add_occurrence(self, field_name: str, token: str, doc_id: DocId, position: int) -> str:
        """Record one occurrence of ``token`` at ``position`` and return its key."""
        key = make_key(field_name, token)
        entry = self._entries.get(key)
        if entry is None:
            entry = IndexEntry()
            self._entries[key] = entry
        posting: Posting = entry.posting_for(doc_id)
        posting.add(position)
        return key

    def remove_postings(self, doc_id: DocId, keys: Iterable[str]) -> int:
        """Drop the document's postings under ``keys``; return how many were removed."""
        removed = 0
        for key in keys:
            entry = self._entries.get(key)
            if entry is None or not entry.discard(doc_id):
                continue
            removed += 1
            if entry.is_empty():
                del self._entries[key]
        return removed

    def items(self) -> Iterator[tuple[str, IndexEntry]]:
        return iter(self._entries.items())

    def scan_field(self, field_name: str) -> Iterator[tuple[str, IndexEntry]]:
        """Yield ``(token, entry)`` for every key of ``field_name``.

        This is a linear scan over all keys in the index.
        """
        for key, entry in self._entries.items():
            key_field, token = split_key(key)
            if key_field == field_name:
                yield token, entry

    def clear(self) -> None:
        self._entries.clear()

    def to_dict(self) -> dict[str, dict]:
        return {key: entry.to_dict() for key, entry in self._entries.items()}

    def serialized_size(self) -> int:
        """Byte length of the JSON-serialized index."""
        return len(orjson.dumps(self.to_dict()))
