"""Result ordering and pagination helpers."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from functools import cmp_to_key
from typing import Any, TypeVar

from zeto_search.config import SortOptions


T = TypeVar("T")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def compare_results(a: Mapping[str, Any], b: Mapping[str, Any], sort: SortOptions) -> int:
    """Three-way comparison of two projected results.

    Missing and ``None`` values sort after every present value for both
    directions. Strings compare case-insensitively and numbers numerically;
    values of different kinds compare equal.
    """
    val_a = a.get(sort.by)
    val_b = b.get(sort.by)

    if val_a is None and val_b is None:
        return 0
    if val_a is None:
        return 1
    if val_b is None:
        return -1

    direction = 1 if sort.order == "asc" else -1

    if _is_number(val_a) and _is_number(val_b):
        return direction * ((val_a > val_b) - (val_a < val_b))
    if isinstance(val_a, str) and isinstance(val_b, str):
        lower_a = val_a.casefold()
        lower_b = val_b.casefold()
        return direction * ((lower_a > lower_b) - (lower_a < lower_b))
    if isinstance(val_a, bool) and isinstance(val_b, bool):
        return direction * (int(val_a) - int(val_b))
    return 0


def sort_results(results: Sequence[dict[str, Any]], sort: SortOptions) -> list[dict[str, Any]]:
    """Return a stably sorted copy of ``results``."""
    return sorted(results, key=cmp_to_key(lambda a, b: compare_results(a, b, sort)))


def paginate(items: Sequence[T], *, offset: int, limit: int) -> list[T]:
    offset = max(0, offset)
    limit = max(1, limit)
    return list(items[offset : offset + limit])
