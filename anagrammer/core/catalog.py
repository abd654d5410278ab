"""Normalisation and ordering of dictionary words for the anagram search."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Sequence, Set, Tuple, overload

SOFT_VOWELS = frozenset("aeiouy")
SINGLE_LETTER_WORDS = frozenset({"a", "i"})


def normalize_word(value: Optional[str]) -> str:
    return value.strip().lower() if value else ""


def normalize_exclusions(words: Optional[Iterable[str]]) -> frozenset[str]:
    """Return the normalised, non-empty entries of ``words``."""

    if not words:
        return frozenset()
    return frozenset(
        normalized for normalized in (normalize_word(word) for word in words) if normalized
    )


def is_catalog_word(word: str, exclusions: Set[str] | frozenset[str] = frozenset()) -> bool:
    """Return whether an already normalised ``word`` may enter the catalog."""

    if word in exclusions:
        return False
    if len(word) == 1 and word not in SINGLE_LETTER_WORDS:
        return False
    return any(letter in SOFT_VOWELS for letter in word)


class WordCatalog(Sequence[str]):
    """Immutable, length-ordered collection of candidate words.

    Words are sorted longest first.  The sort is stable, so words of equal
    length keep the order in which the source listed them, and duplicates are
    dropped after sorting, keeping the first occurrence.
    """

    def __init__(self, words: Iterable[str] = ()) -> None:
        self._words: Tuple[str, ...] = tuple(words)
        self._members = frozenset(self._words)

    @classmethod
    def build(
        cls,
        raw_words: Iterable[str],
        exclusions: Optional[Iterable[str]] = None,
    ) -> "WordCatalog":
        excluded = normalize_exclusions(exclusions)

        kept: List[str] = []
        for raw in raw_words:
            word = normalize_word(raw)
            if is_catalog_word(word, excluded):
                kept.append(word)

        kept.sort(key=len, reverse=True)

        seen: Set[str] = set()
        unique: List[str] = []
        for word in kept:
            if word in seen:
                continue
            seen.add(word)
            unique.append(word)
        return cls(unique)

    @property
    def words(self) -> Tuple[str, ...]:
        return self._words

    @overload
    def __getitem__(self, index: int) -> str: ...

    @overload
    def __getitem__(self, index: slice) -> Tuple[str, ...]: ...

    def __getitem__(self, index):
        return self._words[index]

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __contains__(self, word: object) -> bool:
        return word in self._members

    def __eq__(self, other: object) -> bool:
        if isinstance(other, WordCatalog):
            return self._words == other._words
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._words)

    def __repr__(self) -> str:
        return f"WordCatalog(size={len(self._words)})"


def build_catalog(
    raw_words: Iterable[str],
    exclusions: Optional[Iterable[str]] = None,
) -> WordCatalog:
    """Filter, order and de-duplicate ``raw_words`` into a :class:`WordCatalog`."""

    return WordCatalog.build(raw_words, exclusions)


__all__ = [
    "SOFT_VOWELS",
    "SINGLE_LETTER_WORDS",
    "WordCatalog",
    "build_catalog",
    "is_catalog_word",
    "normalize_exclusions",
    "normalize_word",
]
