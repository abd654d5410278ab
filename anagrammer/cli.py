#!/usr/bin/env python3
"""Command line entry point for finding anagrams of a phrase."""

from __future__ import annotations

import argparse
import json
import os
import random
import sys
from typing import Callable, List, Optional, Sequence

from anagrammer.app.config import AppSettings
from anagrammer.app.services.search_service import SearchService
from anagrammer.core import WordSource
from anagrammer.utils.logging_config import LOG_LEVEL_ENV, configure_logging


def _parse_list(values: Optional[Sequence[str]]) -> List[str]:
    """Normalize CLI list arguments.

    Accepts repeated flags as well as comma separated values, so both
    ``--with tea --with pot`` and ``--with tea,pot`` work.
    """

    if not values:
        return []

    items: List[str] = []
    for value in values:
        parts = [part.strip() for part in value.replace(",", " ").split()]
        items.extend(part for part in parts if part)
    return items


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Find combinations of dictionary words that use every letter of a phrase.",
    )
    parser.add_argument("phrase", help="Phrase to anagram; non-letters are ignored.")
    parser.add_argument(
        "--with",
        dest="with_words",
        action="append",
        help="Word every anagram must contain (repeatable).",
    )
    parser.add_argument(
        "--without",
        dest="without_words",
        action="append",
        help="Word to remove from the word list (repeatable).",
    )
    parser.add_argument(
        "--top-n",
        type=int,
        help="Use the common_words_<N>.txt list instead of the full word list.",
    )
    parser.add_argument(
        "--max-results",
        type=int,
        help="Maximum number of anagrams to return.",
    )
    parser.add_argument(
        "--words",
        help="Path to the main word list (defaults to ANAGRAM_WORDS_PATH or ./words.txt).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the branch ordering, for repeatable output.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Stop searching after this many seconds and print what was found.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit JSON instead of one anagram per line.",
    )
    parser.add_argument(
        "--log-level",
        help="Logging level (defaults to ANAGRAM_LOG_LEVEL or WARNING).",
    )
    return parser


def _rng_factory(seed: Optional[int]) -> Optional[Callable[[], random.Random]]:
    if seed is None:
        return None
    return lambda: random.Random(seed)


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level or os.environ.get(LOG_LEVEL_ENV) or "WARNING")

    settings = AppSettings.from_env()
    service = SearchService(
        word_source=WordSource(args.words or settings.words_path),
        rng_factory=_rng_factory(args.seed),
        default_max_results=settings.default_max_results,
        search_timeout=args.timeout if args.timeout is not None else settings.search_timeout,
    )

    outcome = service.run_search(
        args.phrase,
        _parse_list(args.with_words),
        _parse_list(args.without_words),
        args.top_n,
        args.max_results,
    )

    if args.json:
        json.dump(outcome.results, sys.stdout)
        sys.stdout.write("\n")
        return 0

    text = service.format_plain_text(outcome.results)
    if text:
        print(text)
    if outcome.cancelled:
        print("Search stopped early; results are partial.", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
