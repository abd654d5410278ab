"""Backtracking search for multi-word anagrams."""

from __future__ import annotations

import random
import threading
import time
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from ..utils.observability import get_logger
from .catalog import WordCatalog, normalize_word
from .letters import LetterPool, letter_pool, subtract
from .results import ResultSet

DEFAULT_MAX_RESULTS = 200

# The clock is sampled every few candidate evaluations; the cancel event is
# checked on every one.
_CLOCK_CHECK_INTERVAL = 64


@dataclass
class SearchOutcome:
    """Results of one search plus how the search ended."""

    results: List[List[str]] = field(default_factory=list)
    cancelled: bool = False
    required_satisfied: bool = True
    expansions: int = 0
    attempts: int = 0


class SearchContext:
    """Mutable state shared by every level of one search.

    Holds the result cap (through the :class:`ResultSet`), the optional
    deadline and cancellation event, and the work counters.  Results are
    only ever appended, so the partial list is valid whenever the search
    stops.
    """

    def __init__(
        self,
        limit: int,
        *,
        deadline: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        self.results = ResultSet(limit=max(0, int(limit)))
        self.deadline = deadline
        self.cancel_event = cancel_event
        self.cancelled = False
        self.expansions = 0
        self.attempts = 0

    def should_stop(self) -> bool:
        if self.cancelled:
            return True
        if self.cancel_event is not None and self.cancel_event.is_set():
            self.cancelled = True
        elif (
            self.deadline is not None
            and self.attempts % _CLOCK_CHECK_INTERVAL == 0
            and time.monotonic() >= self.deadline
        ):
            self.cancelled = True
        return self.cancelled

    @property
    def done(self) -> bool:
        return self.results.full or self.should_stop()


class AnagramSearch:
    """Finds word combinations whose letters exactly match a phrase.

    ``rng`` decides the order in which viable branches are explored; any
    object with a ``shuffle(list)`` method works.  It defaults to a private
    :class:`random.Random`, so pass ``random.Random(seed)`` for repeatable
    output.
    """

    def __init__(
        self,
        catalog: WordCatalog | Sequence[str],
        *,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.catalog = catalog if isinstance(catalog, WordCatalog) else WordCatalog(catalog)
        self._rng = rng if rng is not None else random.Random()
        self._logger = get_logger(__name__).bind(component="anagram_search")

    def search(
        self,
        phrase: str,
        with_words: Optional[Iterable[str]] = None,
        limit: int = DEFAULT_MAX_RESULTS,
        *,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> SearchOutcome:
        """Run a search and report results together with how it ended."""

        deadline = time.monotonic() + timeout if timeout is not None else None
        context = SearchContext(limit, deadline=deadline, cancel_event=cancel_event)

        required = [word for word in (normalize_word(w) for w in with_words or ()) if word]
        pool = letter_pool(phrase)
        for word in required:
            remaining = subtract(pool, word)
            if remaining is None:
                self._logger.info(
                    "Required word does not fit the phrase",
                    context={"word": word, "phrase": phrase},
                )
                return SearchOutcome(required_satisfied=False)
            pool = remaining

        self._expand(context, required, pool, self.catalog.words)

        if context.cancelled:
            self._logger.warning(
                "Anagram search stopped early",
                context={
                    "phrase": phrase,
                    "results": len(context.results),
                    "attempts": context.attempts,
                },
            )

        return SearchOutcome(
            results=context.results.as_lists(),
            cancelled=context.cancelled,
            expansions=context.expansions,
            attempts=context.attempts,
        )

    def find_anagrams(
        self,
        phrase: str,
        with_words: Optional[Iterable[str]] = None,
        limit: int = DEFAULT_MAX_RESULTS,
        *,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[List[str]]:
        return self.search(
            phrase,
            with_words,
            limit,
            timeout=timeout,
            cancel_event=cancel_event,
        ).results

    def _expand(
        self,
        context: SearchContext,
        path: List[str],
        pool: LetterPool,
        candidates: Sequence[str],
    ) -> None:
        if context.results.full or not candidates:
            return
        context.expansions += 1

        viable: List[Tuple[LetterPool, str]] = []
        for word in candidates:
            if context.done:
                return
            context.attempts += 1
            remaining = subtract(pool, word)
            if remaining is None:
                continue
            if remaining:
                viable.append((remaining, word))
            else:
                context.results.insert([*path, word])

        self._rng.shuffle(viable)
        next_candidates = [word for _, word in viable]

        for remaining, word in viable:
            if context.done:
                return
            self._expand(context, [*path, word], remaining, next_candidates)


def find_anagrams(
    phrase: str,
    catalog: WordCatalog | Sequence[str],
    with_words: Optional[Iterable[str]] = None,
    limit: int = DEFAULT_MAX_RESULTS,
    *,
    rng: Optional[random.Random] = None,
    timeout: Optional[float] = None,
    cancel_event: Optional[threading.Event] = None,
) -> List[List[str]]:
    """Convenience wrapper running a single :class:`AnagramSearch`."""

    return AnagramSearch(catalog, rng=rng).find_anagrams(
        phrase,
        with_words,
        limit,
        timeout=timeout,
        cancel_event=cancel_event,
    )


__all__ = [
    "AnagramSearch",
    "DEFAULT_MAX_RESULTS",
    "SearchContext",
    "SearchOutcome",
    "find_anagrams",
]
