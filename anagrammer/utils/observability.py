"""Logging, metrics and tracing helpers shared across the project.

Metrics are backed by ``prometheus_client`` and spans by the OpenTelemetry
API.  Without a configured OpenTelemetry SDK the tracer is the API's no-op
implementation, so spans cost almost nothing in tests and local runs.
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterable, Iterator, Optional

from opentelemetry import trace
from prometheus_client import REGISTRY, Counter, Histogram

_TRACER_NAME = "anagrammer"


class StructuredLoggerAdapter(logging.LoggerAdapter):
    """Simple adapter that renders structured context inline with messages."""

    def bind(self, **context: Any) -> "StructuredLoggerAdapter":
        merged = dict(self.extra)
        merged.update(context)
        return StructuredLoggerAdapter(self.logger, merged)

    def process(self, msg: str, kwargs: Dict[str, Any]):
        event_context: Dict[str, Any] = dict(self.extra)
        provided = kwargs.pop("context", None)
        if isinstance(provided, dict):
            event_context.update(provided)
        if event_context:
            try:
                payload = json.dumps(event_context, sort_keys=True, default=str)
            except TypeError:
                payload = json.dumps({k: str(v) for k, v in event_context.items()})
            msg = f"{msg} | {payload}"
        return msg, kwargs


def get_logger(name: str, **context: Any) -> StructuredLoggerAdapter:
    """Return a project logger with optional bound context."""

    base_logger = logging.getLogger(name)
    return StructuredLoggerAdapter(base_logger, context)


class _MetricHandle:
    """Thin view over a registered Prometheus collector (or one of its children)."""

    def __init__(self, collector: Any) -> None:
        self._collector = collector

    def labels(self, **labels: Any):
        return self.__class__(self._collector.labels(**labels))


class CounterHandle(_MetricHandle):
    def inc(self, amount: float = 1.0) -> None:
        self._collector.inc(amount)


class HistogramHandle(_MetricHandle):
    def observe(self, value: float) -> None:
        self._collector.observe(value)

    @contextmanager
    def time(self) -> Iterator[None]:
        """Observe the wall-clock duration of the enclosed block."""

        started = time.perf_counter()
        try:
            yield
        finally:
            self.observe(time.perf_counter() - started)


def _register(
    metric_type: Callable[..., Any],
    name: str,
    documentation: str,
    label_names: Optional[Iterable[str]],
) -> Any:
    try:
        return metric_type(name, documentation, labelnames=tuple(label_names or ()))
    except ValueError:
        # Already registered by an earlier service instance in this process.
        existing = REGISTRY._names_to_collectors.get(name)  # type: ignore[attr-defined]
        if existing is None:
            raise
        return existing


def create_counter(
    name: str,
    documentation: str,
    label_names: Optional[Iterable[str]] = None,
) -> CounterHandle:
    """Return a handle for the counter ``name``, registering it on first use."""

    return CounterHandle(_register(Counter, name, documentation, label_names))


def create_histogram(
    name: str,
    documentation: str,
    label_names: Optional[Iterable[str]] = None,
) -> HistogramHandle:
    """Return a handle for the histogram ``name``, registering it on first use."""

    return HistogramHandle(_register(Histogram, name, documentation, label_names))


@contextmanager
def start_span(name: str, attributes: Optional[Dict[str, Any]] = None) -> Iterator[Any]:
    """Run the enclosed block inside an OpenTelemetry span."""

    tracer = trace.get_tracer(_TRACER_NAME)
    with tracer.start_as_current_span(name) as span:
        if attributes:
            add_span_attributes(span, attributes)
        yield span


def _span_value(value: Any) -> Any:
    if isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    return str(value)


def add_span_attributes(span: Any, attributes: Dict[str, Any]) -> None:
    """Set ``attributes`` on ``span``; ``None`` values and non-string keys are skipped."""

    if span is None:
        return
    for key, value in attributes.items():
        if isinstance(key, str) and value is not None:
            span.set_attribute(key, _span_value(value))


def record_exception(span: Any, error: BaseException) -> None:
    if span is None:
        return
    span.record_exception(error)
    span.set_attribute("error", True)


__all__ = [
    "StructuredLoggerAdapter",
    "get_logger",
    "CounterHandle",
    "HistogramHandle",
    "create_counter",
    "create_histogram",
    "start_span",
    "add_span_attributes",
    "record_exception",
]
