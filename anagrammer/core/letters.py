"""Letter multiset helpers used by the anagram search."""

from __future__ import annotations

import re
from collections import Counter
from typing import Iterable, Optional

_NON_LETTER_PATTERN = re.compile(r"[^a-z]")

LetterPool = Counter


def letters_only(text: Optional[str]) -> str:
    """Return the lowercase ``a``-``z`` letters of ``text`` in order."""

    if not text:
        return ""
    return _NON_LETTER_PATTERN.sub("", text.lower())


def letter_pool(text: Optional[str]) -> LetterPool:
    """Build the letter multiset for ``text``, ignoring non-letters."""

    return Counter(letters_only(text))


def pool_size(pool: LetterPool) -> int:
    return sum(count for count in pool.values() if count > 0)


def subtract(pool: LetterPool, word: Iterable[str]) -> Optional[LetterPool]:
    """Remove the letters of ``word`` from ``pool``.

    Returns a new pool, or ``None`` when any letter of ``word`` is not
    available in the quantity required.  ``pool`` itself is never modified,
    so a failed subtraction leaves no partial state behind.
    """

    remaining = Counter(pool)
    for letter in word:
        if remaining[letter] <= 0:
            return None
        remaining[letter] -= 1
        if remaining[letter] == 0:
            del remaining[letter]
    return remaining


__all__ = ["LetterPool", "letters_only", "letter_pool", "pool_size", "subtract"]
