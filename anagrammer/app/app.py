"""Application wiring for the anagram finder."""

from __future__ import annotations

import logging
import random
from typing import Callable, List, Optional

import gradio as gr
import uvicorn
from fastapi import FastAPI

from anagrammer.core import WordSource
from anagrammer.utils.logging_config import configure_logging
from anagrammer.utils.observability import get_logger
from anagrammer.utils.telemetry import StructuredTelemetry, TelemetryLogger

from .api import create_api
from .config import AppSettings
from .services.search_service import SearchService
from .ui.gradio import create_interface


class AnagramFinderApp:
    """High-level application facade bundling dependencies."""

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        *,
        word_source: Optional[WordSource] = None,
        search_service: Optional[SearchService] = None,
        rng_factory: Optional[Callable[[], random.Random]] = None,
        telemetry: Optional[StructuredTelemetry] = None,
    ) -> None:
        self.settings = settings or AppSettings.from_env()
        self._logger = get_logger(__name__).bind(component="app_facade")
        self._logger.info(
            "Initialising application facade",
            context={"words_path": self.settings.words_path},
        )

        self.word_source = word_source or WordSource(self.settings.words_path)
        if search_service is None:
            telemetry = telemetry or StructuredTelemetry()
            telemetry.add_listener(TelemetryLogger(level=logging.DEBUG))
            search_service = SearchService(
                word_source=self.word_source,
                rng_factory=rng_factory,
                default_max_results=self.settings.default_max_results,
                search_timeout=self.settings.search_timeout,
                max_concurrent_searches=self.settings.max_concurrent_searches,
                gate_timeout=self.settings.gate_timeout,
                catalog_cache_size=self.settings.catalog_cache_size,
                telemetry=telemetry,
            )
        self.search_service = search_service

        self._logger.info(
            "Application dependencies wired",
            context={
                "words_path": str(self.search_service.word_source.dict_path),
                "default_max_results": self.search_service.default_max_results,
            },
        )

    # Public API ------------------------------------------------------------
    def find_anagrams(self, *args, **kwargs) -> List[List[str]]:
        return self.search_service.find_anagrams(*args, **kwargs)

    def format_results(self, phrase: str, results: List[List[str]]) -> str:
        return self.search_service.format_results(phrase, results)

    def create_api(self) -> FastAPI:
        return create_api(self.search_service)

    def create_gradio_interface(self) -> gr.Blocks:
        return create_interface(self.search_service)

    def create_web_app(self) -> FastAPI:
        """FastAPI app serving the JSON API with the Gradio UI mounted at ``/``."""

        api = self.create_api()
        return gr.mount_gradio_app(api, self.create_gradio_interface(), path="/")


def main() -> None:
    configure_logging()
    settings = AppSettings.from_env()
    app = AnagramFinderApp(settings)
    uvicorn.run(app.create_web_app(), host=settings.host, port=settings.port)


__all__ = ["AnagramFinderApp", "main"]
