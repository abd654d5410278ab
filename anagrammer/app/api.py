"""HTTP API exposing the anagram search."""

from __future__ import annotations

from typing import Any, List, Optional

from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from ..utils.observability import get_logger
from .services.search_service import SearchService, parse_word_list

GENERIC_FAILURE_MESSAGE = "Failed to find anagrams"

_logger = get_logger(__name__).bind(component="http_api")


def parse_optional_int(value: Optional[str]) -> Optional[int]:
    """Parse a query parameter, returning ``None`` when it is blank or not numeric."""

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def resolve_top_n(value: Optional[str]) -> Optional[int]:
    top_n = parse_optional_int(value)
    if top_n is None or top_n <= 0:
        return None
    return top_n


def resolve_max_results(value: Optional[str], default: int) -> int:
    parsed = parse_optional_int(value)
    return default if parsed is None else parsed


def create_api(service: SearchService) -> FastAPI:
    """Build the FastAPI application serving ``GET /api/anagrams``."""

    api = FastAPI(title="Anagram Finder API")
    api.mount("/metrics", make_asgi_app())

    @api.get("/healthz")
    def healthz() -> dict:
        return {"status": "ok"}

    @api.get("/api/anagrams")
    def anagrams(
        phrase: str = "",
        with_words: str = Query("", alias="with"),
        without_words: str = Query("", alias="without"),
        top_n: str = "",
        max_results: Optional[str] = None,
    ) -> Any:
        """Return the anagrams of ``phrase`` as a JSON list of word lists."""

        required = parse_word_list(with_words)
        excluded = parse_word_list(without_words)
        request_context = {
            "phrase": phrase,
            "with": required,
            "without": excluded,
            "top_n": top_n,
            "max_results": max_results,
        }
        try:
            results: List[List[str]] = service.find_anagrams(
                phrase,
                required,
                excluded,
                resolve_top_n(top_n),
                resolve_max_results(max_results, service.default_max_results),
            )
        except Exception as exc:
            failure_context = dict(request_context)
            failure_context["error"] = str(exc)
            _logger.error("Anagram request failed", context=failure_context)
            return JSONResponse({"error": GENERIC_FAILURE_MESSAGE}, status_code=500)
        return JSONResponse(results)

    return api


__all__ = [
    "GENERIC_FAILURE_MESSAGE",
    "create_api",
    "parse_optional_int",
    "resolve_max_results",
    "resolve_top_n",
]
