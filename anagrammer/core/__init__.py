"""Core anagram search utilities for the anagram finder."""

from .catalog import (
    SINGLE_LETTER_WORDS,
    SOFT_VOWELS,
    WordCatalog,
    build_catalog,
    is_catalog_word,
    normalize_word,
)
from .letters import letter_pool, letters_only, subtract
from .results import ResultSet, canonical
from .search import (
    DEFAULT_MAX_RESULTS,
    AnagramSearch,
    SearchContext,
    SearchOutcome,
    find_anagrams,
)
from .word_source import WordSource

__all__ = [
    "AnagramSearch",
    "DEFAULT_MAX_RESULTS",
    "ResultSet",
    "SearchContext",
    "SearchOutcome",
    "SINGLE_LETTER_WORDS",
    "SOFT_VOWELS",
    "WordCatalog",
    "WordSource",
    "build_catalog",
    "canonical",
    "find_anagrams",
    "is_catalog_word",
    "letter_pool",
    "letters_only",
    "normalize_word",
    "subtract",
]
