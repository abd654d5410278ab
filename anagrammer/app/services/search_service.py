"""Search service orchestrating catalog construction and anagram searches."""

from __future__ import annotations

import copy
import random
import threading
from collections import OrderedDict
from contextlib import contextmanager
from typing import Any, Callable, Dict, FrozenSet, Generator, Iterable, List, Optional, Tuple

from anagrammer.core import (
    DEFAULT_MAX_RESULTS,
    AnagramSearch,
    SearchOutcome,
    WordCatalog,
    WordSource,
    build_catalog,
)
from anagrammer.core.catalog import normalize_exclusions

from ...utils.observability import (
    add_span_attributes,
    create_counter,
    create_histogram,
    get_logger,
    record_exception,
    start_span,
)
from ...utils.telemetry import StructuredTelemetry
from .result_formatter import AnagramResultFormatter

CatalogKey = Tuple[Tuple[str, Optional[int]], FrozenSet[str]]


def parse_word_list(value: Any) -> List[str]:
    """Turn a space separated string or an iterable of words into a list.

    Blank entries are dropped; order and case are preserved.
    """

    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    words: List[str] = []
    for item in value:
        if item is None:
            continue
        words.extend(str(item).split())
    return words


class AnagramQueryOrchestrator:
    """Coordinates catalog caching, search gating and instrumentation."""

    def __init__(
        self,
        *,
        word_source: Optional[WordSource] = None,
        rng_factory: Optional[Callable[[], random.Random]] = None,
        default_max_results: int = DEFAULT_MAX_RESULTS,
        search_timeout: Optional[float] = None,
        max_concurrent_searches: Optional[int] = None,
        gate_timeout: Optional[float] = None,
        catalog_cache_size: int = 8,
        telemetry: Optional[StructuredTelemetry] = None,
    ) -> None:
        self.word_source = word_source or WordSource()
        self._rng_factory = rng_factory or random.Random
        self.default_max_results = int(default_max_results)
        self.telemetry = telemetry or StructuredTelemetry()
        self._latest_trace: Dict[str, Any] = {}

        self._logger = get_logger(__name__).bind(component="anagram_query_orchestrator")

        self._metric_request_total = create_counter(
            "anagram_search_requests_total",
            "Total anagram search requests received.",
        )
        self._metric_request_failures = create_counter(
            "anagram_search_request_failures_total",
            "Total anagram search requests that raised an exception.",
        )
        self._metric_request_cancelled = create_counter(
            "anagram_search_cancelled_total",
            "Anagram searches that stopped on timeout or cancellation.",
        )
        self._metric_request_duration = create_histogram(
            "anagram_search_request_seconds",
            "Latency of anagram search requests.",
        )
        self._metric_cache_hits = create_counter(
            "anagram_catalog_cache_hits_total",
            "Catalog cache hits recorded by the search orchestrator.",
            label_names=("cache",),
        )
        self._metric_cache_misses = create_counter(
            "anagram_catalog_cache_misses_total",
            "Catalog cache misses recorded by the search orchestrator.",
            label_names=("cache",),
        )

        self._cache_lock = threading.RLock()
        self._max_cache_entries = max(0, int(catalog_cache_size))
        self._catalog_cache: OrderedDict[CatalogKey, WordCatalog] = OrderedDict()

        self._search_timeout = self._coerce_seconds(search_timeout)
        self._gate_timeout = self._coerce_seconds(gate_timeout)

        self._search_semaphore: Optional[threading.BoundedSemaphore] = None
        if max_concurrent_searches is not None:
            try:
                max_concurrent = int(max_concurrent_searches)
            except (TypeError, ValueError):
                max_concurrent = 0
            if max_concurrent > 0:
                self._search_semaphore = threading.BoundedSemaphore(max_concurrent)

        self._logger.info(
            "Anagram query orchestrator initialised",
            context={
                "words_path": str(self.word_source.dict_path),
                "max_cache_entries": self._max_cache_entries,
                "max_concurrent_searches": max_concurrent_searches,
                "search_timeout": self._search_timeout,
            },
        )

    @staticmethod
    def _coerce_seconds(value: Optional[float]) -> Optional[float]:
        if value is None:
            return None
        try:
            seconds = float(value)
        except (TypeError, ValueError):
            return None
        return seconds if seconds >= 0 else None

    def clear_cached_results(self) -> None:
        """Drop cached catalogs and word lists, e.g. after replacing word files."""

        self._logger.info("Clearing catalog caches", context={"caches": ["catalog", "word_source"]})
        with self._cache_lock:
            self._catalog_cache.clear()
        self.word_source.clear()

    def get_latest_telemetry(self) -> Dict[str, Any]:
        """Return the most recent telemetry snapshot for the search service."""

        if not self._latest_trace:
            return self.telemetry.latest_snapshot()
        return copy.deepcopy(self._latest_trace)

    def _trim_cache(self) -> None:
        if self._max_cache_entries <= 0:
            self._catalog_cache.clear()
            return
        while len(self._catalog_cache) > self._max_cache_entries:
            self._catalog_cache.popitem(last=False)

    def _record_cache_event(self, *, hit: bool, details: Dict[str, Any]) -> None:
        metric = self._metric_cache_hits if hit else self._metric_cache_misses
        metric.labels(cache="catalog").inc()
        self.telemetry.increment("catalog.cache.hit" if hit else "catalog.cache.miss")
        log = self._logger.debug if hit else self._logger.info
        log("Catalog cache %s", "hit" if hit else "miss", context=details)

    def get_catalog(
        self,
        without_words: Optional[Iterable[str]] = None,
        top_n: Optional[int] = None,
    ) -> WordCatalog:
        """Return the catalog for ``top_n`` with ``without_words`` removed.

        Catalogs are cached by word-list identity, exclusions and rank
        cutoff.  A cached catalog is the same object a fresh build would
        produce, so ordering is unaffected by caching.
        """

        exclusions = normalize_exclusions(without_words)
        key: CatalogKey = (self.word_source.cache_key(top_n), exclusions)
        details = {"path": key[0][0], "top_n": top_n, "exclusions": len(exclusions)}

        with self._cache_lock:
            cached = self._catalog_cache.get(key)
            if cached is not None:
                self._catalog_cache.move_to_end(key)
        if cached is not None:
            self._record_cache_event(hit=True, details=details)
            return cached

        self._record_cache_event(hit=False, details=details)
        raw_words = self.word_source.read_words(top_n)
        catalog = build_catalog(raw_words, exclusions)

        # An empty read is retried next time rather than cached.
        if raw_words:
            with self._cache_lock:
                self._catalog_cache[key] = catalog
                self._trim_cache()
        return catalog

    @contextmanager
    def _search_slot(self) -> Generator[None, None, None]:
        """Bound concurrent searches when a semaphore has been configured."""

        semaphore = self._search_semaphore
        telemetry = self.telemetry
        if semaphore is None:
            telemetry.increment("search.gate.bypass")
            yield
            return

        with telemetry.timer("search.gate.wait"):
            if self._gate_timeout is None:
                acquired = semaphore.acquire()
            else:
                acquired = semaphore.acquire(timeout=self._gate_timeout)

        if not acquired:
            telemetry.increment("search.gate.timeout")
            raise TimeoutError("Search capacity exhausted; please retry later")

        telemetry.increment("search.gate.acquired")
        try:
            yield
        finally:
            semaphore.release()
            telemetry.increment("search.gate.released")

    def run_search(
        self,
        phrase: str,
        with_words: Optional[Iterable[str]] = None,
        without_words: Optional[Iterable[str]] = None,
        top_n: Optional[int] = None,
        max_results: Optional[int] = None,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> SearchOutcome:
        """Search for anagrams of ``phrase`` and report how the search ended."""

        phrase = phrase or ""
        required = parse_word_list(with_words)
        excluded = parse_word_list(without_words)
        limit = self.default_max_results if max_results is None else int(max_results)

        request_context: Dict[str, Any] = {
            "phrase": phrase,
            "with_words": required,
            "without_words": excluded,
            "top_n": top_n,
            "max_results": limit,
        }

        telemetry = self.telemetry
        telemetry.start_trace("find_anagrams")
        telemetry.increment("search.invoked")
        for key, value in request_context.items():
            telemetry.annotate(f"input.{key}", value)

        self._metric_request_total.inc()
        self._logger.info("Search request received", context=request_context)

        with start_span("anagram.request", request_context) as request_span:
            try:
                with self._metric_request_duration.time():
                    with self._search_slot():
                        outcome = self._run_search_internal(
                            phrase,
                            required,
                            excluded,
                            top_n,
                            limit,
                            cancel_event=cancel_event,
                        )
            except Exception as exc:
                failure_context = dict(request_context)
                failure_context["error"] = str(exc)
                self._metric_request_failures.inc()
                self._logger.error("Search request failed", context=failure_context)
                record_exception(request_span, exc)
                telemetry.increment("search.failed")
                self._latest_trace = telemetry.snapshot()
                raise

            if outcome.cancelled:
                self._metric_request_cancelled.inc()
                telemetry.increment("search.cancelled")

            self._logger.info(
                "Search request completed",
                context={
                    "phrase": phrase,
                    "results": len(outcome.results),
                    "cancelled": outcome.cancelled,
                    "required_satisfied": outcome.required_satisfied,
                },
            )

            telemetry.annotate("result.total", len(outcome.results))
            telemetry.annotate("result.cancelled", outcome.cancelled)
            telemetry.increment("search.completed")
            self._latest_trace = telemetry.snapshot()

            add_span_attributes(
                request_span,
                {
                    "search.success": True,
                    "search.cancelled": outcome.cancelled,
                    "result.total": len(outcome.results),
                },
            )
            return outcome

    def _run_search_internal(
        self,
        phrase: str,
        required: List[str],
        excluded: List[str],
        top_n: Optional[int],
        limit: int,
        *,
        cancel_event: Optional[threading.Event],
    ) -> SearchOutcome:
        telemetry = self.telemetry

        with telemetry.timer("catalog.build", {"top_n": top_n}) as catalog_meta:
            catalog = self.get_catalog(excluded, top_n)
            catalog_meta["size"] = len(catalog)
        telemetry.annotate("catalog.size", len(catalog))

        engine = AnagramSearch(catalog, rng=self._rng_factory())
        with telemetry.timer("search.expand") as search_meta:
            outcome = engine.search(
                phrase,
                required,
                limit,
                timeout=self._search_timeout,
                cancel_event=cancel_event,
            )
            search_meta["results"] = len(outcome.results)

        telemetry.increment("search.expansions", outcome.expansions)
        telemetry.increment("search.attempts", outcome.attempts)
        if not outcome.required_satisfied:
            telemetry.increment("search.required_unsatisfied")
        return outcome

    def find_anagrams(
        self,
        phrase: str,
        with_words: Optional[Iterable[str]] = None,
        without_words: Optional[Iterable[str]] = None,
        top_n: Optional[int] = None,
        max_results: Optional[int] = None,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[List[str]]:
        return self.run_search(
            phrase,
            with_words,
            without_words,
            top_n,
            max_results,
            cancel_event=cancel_event,
        ).results


class SearchService:
    """Thin facade that delegates to the orchestrator and formatter."""

    def __init__(
        self,
        *,
        word_source: Optional[WordSource] = None,
        rng_factory: Optional[Callable[[], random.Random]] = None,
        default_max_results: int = DEFAULT_MAX_RESULTS,
        search_timeout: Optional[float] = None,
        max_concurrent_searches: Optional[int] = None,
        gate_timeout: Optional[float] = None,
        catalog_cache_size: int = 8,
        telemetry: Optional[StructuredTelemetry] = None,
        orchestrator: Optional[AnagramQueryOrchestrator] = None,
        formatter: Optional[AnagramResultFormatter] = None,
    ) -> None:
        if orchestrator is None:
            orchestrator = AnagramQueryOrchestrator(
                word_source=word_source,
                rng_factory=rng_factory,
                default_max_results=default_max_results,
                search_timeout=search_timeout,
                max_concurrent_searches=max_concurrent_searches,
                gate_timeout=gate_timeout,
                catalog_cache_size=catalog_cache_size,
                telemetry=telemetry,
            )
        self.orchestrator = orchestrator
        self.formatter = formatter or AnagramResultFormatter()
        self.word_source = orchestrator.word_source
        self.telemetry = orchestrator.telemetry

    @property
    def default_max_results(self) -> int:
        return self.orchestrator.default_max_results

    def find_anagrams(
        self,
        phrase: str,
        with_words: Optional[Iterable[str]] = None,
        without_words: Optional[Iterable[str]] = None,
        top_n: Optional[int] = None,
        max_results: Optional[int] = None,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[List[str]]:
        return self.orchestrator.find_anagrams(
            phrase,
            with_words,
            without_words,
            top_n,
            max_results,
            cancel_event=cancel_event,
        )

    def run_search(
        self,
        phrase: str,
        with_words: Optional[Iterable[str]] = None,
        without_words: Optional[Iterable[str]] = None,
        top_n: Optional[int] = None,
        max_results: Optional[int] = None,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> SearchOutcome:
        return self.orchestrator.run_search(
            phrase,
            with_words,
            without_words,
            top_n,
            max_results,
            cancel_event=cancel_event,
        )

    def get_catalog(
        self,
        without_words: Optional[Iterable[str]] = None,
        top_n: Optional[int] = None,
    ) -> WordCatalog:
        return self.orchestrator.get_catalog(without_words, top_n)

    def clear_cached_results(self) -> None:
        self.orchestrator.clear_cached_results()

    def get_latest_telemetry(self) -> Dict[str, Any]:
        return self.orchestrator.get_latest_telemetry()

    def format_results(self, phrase: str, outcome: SearchOutcome | List[List[str]]) -> str:
        return self.formatter.format_results(phrase, outcome)

    def format_plain_text(self, results: Iterable[Iterable[str]]) -> str:
        return self.formatter.format_plain_text(results)


__all__ = [
    "AnagramQueryOrchestrator",
    "SearchService",
    "parse_word_list",
]
