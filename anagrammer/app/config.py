"""Runtime settings for the anagram finder, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from anagrammer.core import DEFAULT_MAX_RESULTS
from anagrammer.core.word_source import WORDS_PATH_ENV


def _env_int(
    env: Mapping[str, str],
    name: str,
    default: Optional[int],
    *,
    minimum: int = 0,
) -> Optional[int]:
    raw = env.get(name)
    if raw is None or not str(raw).strip():
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        return default
    return value if value >= minimum else default


def _env_float(env: Mapping[str, str], name: str, default: Optional[float]) -> Optional[float]:
    raw = env.get(name)
    if raw is None or not str(raw).strip():
        return default
    try:
        value = float(str(raw).strip())
    except ValueError:
        return default
    return value if value >= 0 else default


@dataclass(frozen=True)
class AppSettings:
    """Settings shared by the web app, the API and the CLI.

    Attributes
    ----------
    words_path:
        Main word list; ``common_words_<N>.txt`` variants live beside it.
    default_max_results:
        Result cap used when a request does not supply one.
    search_timeout:
        Seconds a single search may run before partial results are returned.
    max_concurrent_searches:
        Upper bound on simultaneous searches, ``None`` for no bound.
    gate_timeout:
        Seconds to wait for a free search slot before failing the request.
    catalog_cache_size:
        Number of built catalogs kept in memory.
    """

    words_path: Optional[str] = None
    default_max_results: int = DEFAULT_MAX_RESULTS
    search_timeout: Optional[float] = 10.0
    max_concurrent_searches: Optional[int] = None
    gate_timeout: Optional[float] = 5.0
    catalog_cache_size: int = 8
    host: str = "0.0.0.0"
    port: int = 7860

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "AppSettings":
        env = os.environ if env is None else env
        defaults = cls()
        return cls(
            words_path=env.get(WORDS_PATH_ENV) or None,
            default_max_results=_env_int(
                env, "ANAGRAM_DEFAULT_MAX_RESULTS", defaults.default_max_results, minimum=1
            ),
            search_timeout=_env_float(env, "ANAGRAM_SEARCH_TIMEOUT", defaults.search_timeout),
            max_concurrent_searches=_env_int(
                env, "ANAGRAM_MAX_CONCURRENT_SEARCHES", None, minimum=1
            ),
            gate_timeout=_env_float(env, "ANAGRAM_GATE_TIMEOUT", defaults.gate_timeout),
            catalog_cache_size=_env_int(
                env, "ANAGRAM_CATALOG_CACHE_SIZE", defaults.catalog_cache_size
            ),
            host=env.get("ANAGRAM_HOST") or defaults.host,
            port=_env_int(env, "ANAGRAM_PORT", defaults.port, minimum=1),
        )


__all__ = ["AppSettings"]
