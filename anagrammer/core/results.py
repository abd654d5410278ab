"""Insertion-ordered, duplicate-free collection of anagram results."""

from __future__ import annotations

from collections.abc import Iterable as IterableABC
from typing import Iterable, Iterator, List, Optional, Set, Tuple

CanonicalResult = Tuple[str, ...]


def canonical(words: Iterable[str]) -> CanonicalResult:
    """Return the canonical (lexicographically sorted) form of a result."""

    return tuple(sorted(words))


class ResultSet:
    """Accepts results in discovery order, rejecting canonical duplicates.

    Two results are equal when their sorted word lists are equal, so
    ``["tea", "pot"]`` and ``["pot", "tea"]`` count once.  Accepted results
    are stored in canonical order and never modified afterwards.
    """

    def __init__(self, limit: Optional[int] = None) -> None:
        self.limit = limit
        self._ordered: List[CanonicalResult] = []
        self._seen: Set[CanonicalResult] = set()

    def insert(self, words: Iterable[str]) -> bool:
        key = canonical(words)
        if key in self._seen:
            return False
        self._seen.add(key)
        self._ordered.append(key)
        return True

    @property
    def full(self) -> bool:
        return self.limit is not None and len(self._ordered) >= self.limit

    def as_lists(self) -> List[List[str]]:
        return [list(result) for result in self._ordered]

    def __len__(self) -> int:
        return len(self._ordered)

    def __iter__(self) -> Iterator[CanonicalResult]:
        return iter(self._ordered)

    def __contains__(self, words: object) -> bool:
        if isinstance(words, str) or not isinstance(words, IterableABC):
            return False
        return canonical(words) in self._seen


__all__ = ["CanonicalResult", "ResultSet", "canonical"]
