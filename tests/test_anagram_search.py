import random
import threading
from collections import Counter

from anagrammer.core import AnagramSearch, build_catalog, find_anagrams, letter_pool


class CountdownEvent:
    """Event stand-in that reports ``set`` after a number of checks."""

    def __init__(self, checks_before_set: int) -> None:
        self._remaining = checks_before_set

    def is_set(self) -> bool:
        if self._remaining <= 0:
            return True
        self._remaining -= 1
        return False


ASTRONOMER_WORDS = [
    "moon", "starer", "no", "more", "stare", "a", "ton", "re", "as",
    "tremor", "on", "moan", "rest", "sate", "near", "one", "store", "man",
]


def _as_sets(results):
    return {tuple(result) for result in results}


def test_single_word_anagrams_of_listen(keep_order):
    catalog = build_catalog(["listen", "silent", "enlist", "tin", "line"])

    results = find_anagrams("listen", catalog, limit=10, rng=keep_order)

    assert _as_sets(results) == {("listen",), ("silent",), ("enlist",)}
    assert ["line", "tin"] not in results


def test_multi_word_anagram_is_found_once(keep_order):
    catalog = build_catalog(["dormitory", "dirty", "room"])

    results = find_anagrams("Dormitory", catalog, rng=keep_order)

    assert results == [["dormitory"], ["dirty", "room"]]


def test_words_can_repeat_while_letters_remain(keep_order):
    results = find_anagrams("aa", ["a"], rng=keep_order)

    assert results == [["a", "a"]]


def test_required_words_that_exhaust_the_phrase_yield_nothing():
    catalog = build_catalog(["eat", "tea"])

    assert find_anagrams("eat", catalog, with_words=["ate"]) == []


def test_unavailable_required_word_empties_the_result():
    catalog = build_catalog(["listen", "silent", "tin", "le", "sin"])

    outcome = AnagramSearch(catalog).search("listen", ["lists"])

    assert outcome.results == []
    assert outcome.required_satisfied is False


def test_required_words_are_included_in_results(keep_order):
    catalog = build_catalog(["dirty", "dormitory"])

    results = find_anagrams("dirty room", catalog, with_words=["Room", ""], rng=keep_order)

    assert results == [["dirty", "room"]]


def test_result_cap_of_one_returns_one_anagram():
    catalog = build_catalog(["live", "vile", "evil", "veil"])

    results = find_anagrams("evil", catalog, limit=1)

    assert len(results) == 1
    assert results[0] in (["live"], ["vile"], ["evil"], ["veil"])


def test_zero_cap_does_no_search_work():
    catalog = build_catalog(["live", "vile"])

    outcome = AnagramSearch(catalog).search("evil", limit=0)

    assert outcome.results == []
    assert outcome.expansions == 0
    assert outcome.attempts == 0


def test_results_match_phrase_letters_and_are_unique():
    phrase = "Astronomer!"
    catalog = build_catalog(ASTRONOMER_WORDS)

    results = find_anagrams(phrase, catalog, limit=500, rng=random.Random(3))

    assert results
    assert len(_as_sets(results)) == len(results)
    for words in results:
        assert Counter("".join(words)) == letter_pool(phrase)
        assert words == sorted(words)


def test_cap_limits_multi_word_results():
    catalog = build_catalog(ASTRONOMER_WORDS)

    results = find_anagrams("astronomer", catalog, limit=2, rng=random.Random(11))

    assert len(results) == 2


def test_excluded_words_never_appear():
    catalog = build_catalog(ASTRONOMER_WORDS, exclusions=["moon", "Starer"])

    results = find_anagrams("astronomer", catalog, limit=500, rng=random.Random(5))

    assert all("moon" not in words and "starer" not in words for words in results)


def test_seeded_rng_gives_repeatable_output():
    catalog = build_catalog(ASTRONOMER_WORDS)

    first = find_anagrams("astronomer", catalog, limit=5, rng=random.Random(42))
    second = find_anagrams("astronomer", catalog, limit=5, rng=random.Random(42))

    assert first == second


def test_unbounded_search_finds_the_same_results_for_any_ordering(keep_order):
    catalog = build_catalog(ASTRONOMER_WORDS)

    ordered = find_anagrams("astronomer", catalog, limit=10_000, rng=keep_order)
    shuffled = find_anagrams("astronomer", catalog, limit=10_000, rng=random.Random(9))

    assert _as_sets(ordered) == _as_sets(shuffled)


def test_cancellation_keeps_partial_results(keep_order):
    catalog = build_catalog(["listen", "silent", "enlist"])

    outcome = AnagramSearch(catalog, rng=keep_order).search(
        "listen",
        limit=10,
        cancel_event=CountdownEvent(2),
    )

    assert outcome.cancelled is True
    assert outcome.results == [["listen"], ["silent"]]


def test_pre_set_cancel_event_stops_immediately():
    event = threading.Event()
    event.set()

    outcome = AnagramSearch(build_catalog(["listen"])).search("listen", cancel_event=event)

    assert outcome.cancelled is True
    assert outcome.results == []


def test_expired_timeout_returns_without_results():
    outcome = AnagramSearch(build_catalog(["listen"])).search("listen", timeout=0)

    assert outcome.cancelled is True
    assert outcome.results == []


def test_phrase_without_letters_has_no_anagrams():
    assert find_anagrams("123 !!", build_catalog(["a", "i"])) == []
