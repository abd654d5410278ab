"""Loader for the line-oriented word lists that feed the catalog."""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Dict, Optional, Tuple

from ..utils.observability import get_logger

WORDS_PATH_ENV = "ANAGRAM_WORDS_PATH"
DEFAULT_WORDS_FILENAME = "words.txt"
RANKED_WORDS_TEMPLATE = "common_words_{top_n}.txt"


def _coerce_top_n(top_n: Optional[int]) -> Optional[int]:
    if top_n is None or isinstance(top_n, bool):
        return None
    try:
        value = int(top_n)
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


class WordSource:
    """Reads the full word list, or one of its ranked ``top_n`` variants.

    Ranked variants sit next to the main list as ``common_words_<N>.txt``.
    Successful reads are kept as tuples shared by every search; a missing or
    unreadable file yields an empty list and is retried on the next call.
    """

    def __init__(self, dict_path: Optional[Path | str] = None) -> None:
        if dict_path is None:
            dict_path = os.environ.get(WORDS_PATH_ENV) or None

        if dict_path is not None:
            base_path = Path(dict_path)
        else:
            module_path = Path(__file__).resolve()
            candidates = [
                Path.cwd() / DEFAULT_WORDS_FILENAME,
                module_path.parents[1] / "data" / DEFAULT_WORDS_FILENAME,
            ]
            base_path = candidates[0]
            for candidate in candidates:
                try:
                    if candidate.exists():
                        base_path = candidate
                        break
                except OSError:
                    continue

        self.dict_path: Path = base_path
        self._lock = threading.Lock()
        self._words: Dict[Tuple[str, Optional[int]], Tuple[str, ...]] = {}
        self._logger = get_logger(__name__).bind(component="word_source")

    def variant_path(self, top_n: int) -> Path:
        return self.dict_path.with_name(RANKED_WORDS_TEMPLATE.format(top_n=top_n))

    def resolve_path(self, top_n: Optional[int] = None) -> Path:
        """Return the file backing ``top_n``, falling back to the full list."""

        ranked = _coerce_top_n(top_n)
        if ranked is None:
            return self.dict_path

        candidate = self.variant_path(ranked)
        try:
            if candidate.is_file():
                return candidate
        except OSError:
            pass

        self._logger.debug(
            "Ranked word list unavailable; using full list",
            context={"top_n": ranked, "path": str(candidate)},
        )
        return self.dict_path

    def _stat_key(self, path: Path) -> Tuple[str, Optional[int]]:
        try:
            mtime: Optional[int] = path.stat().st_mtime_ns
        except OSError:
            mtime = None
        return str(path), mtime

    def cache_key(self, top_n: Optional[int] = None) -> Tuple[str, Optional[int]]:
        """Identity of the list backing ``top_n`` (path plus modification time)."""

        return self._stat_key(self.resolve_path(top_n))

    def read_words(self, top_n: Optional[int] = None) -> Tuple[str, ...]:
        """Return every line of the selected list, unmodified apart from newlines.

        Cached lists are keyed by path and modification time, so an edited
        file is read again on the next call.
        """

        path = self.resolve_path(top_n)
        key = self._stat_key(path)
        with self._lock:
            cached = self._words.get(key)
        if cached is not None:
            return cached

        try:
            with path.open("r", encoding="utf-8") as handle:
                words = tuple(line.rstrip("\r\n") for line in handle)
        except (OSError, UnicodeDecodeError) as exc:
            self._logger.warning(
                "Word list could not be read; continuing with an empty catalog",
                context={"path": str(path), "error": str(exc)},
            )
            return ()

        with self._lock:
            for stale in [entry for entry in self._words if entry[0] == key[0]]:
                del self._words[stale]
            self._words[key] = words
        self._logger.info(
            "Word list loaded",
            context={"path": str(path), "entries": len(words)},
        )
        return words

    def clear(self) -> None:
        with self._lock:
            self._words.clear()


__all__ = [
    "WordSource",
    "WORDS_PATH_ENV",
    "DEFAULT_WORDS_FILENAME",
    "RANKED_WORDS_TEMPLATE",
]
