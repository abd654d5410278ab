"""In-process telemetry for anagram searches.

A :class:`StructuredTelemetry` instance records one trace at a time: phase
timings (catalog build, search expansion, gate waits), counters (attempts,
cache hits) and free-form metadata.  Listeners receive every change as it
happens, which is how the web UI streams search progress and how
:class:`TelemetryLogger` mirrors activity into the log.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from contextlib import contextmanager
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, Dict, Iterable, Iterator, List, Optional

from .observability import get_logger

TelemetryListener = Callable[[str, Dict[str, Any]], None]


@dataclass
class TimingStats:
    """Aggregate of every measurement recorded under one timer name."""

    count: int = 0
    total: float = 0.0
    min: float = 0.0
    max: float = 0.0

    def add(self, duration: float) -> None:
        self.min = duration if self.count == 0 else min(self.min, duration)
        self.max = max(self.max, duration)
        self.count += 1
        self.total += duration

    def as_dict(self) -> Dict[str, float]:
        return {
            "count": self.count,
            "total": self.total,
            "min": self.min,
            "max": self.max,
            "avg": self.total / self.count if self.count else 0.0,
        }


@dataclass
class _Trace:
    trace_id: int = 0
    name: Optional[str] = None
    timings: Dict[str, TimingStats] = field(default_factory=dict)
    counters: Dict[str, float] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)
    events: Deque[Dict[str, Any]] = field(default_factory=deque)

    def export(self) -> Dict[str, Any]:
        return {
            "trace_id": self.trace_id,
            "name": self.name,
            "timings": {key: stats.as_dict() for key, stats in self.timings.items()},
            "counters": dict(self.counters),
            "events": [dict(event) for event in self.events],
            "metadata": dict(self.metadata),
        }


class StructuredTelemetry:
    """Collects timings, counters and metadata for the current search."""

    def __init__(
        self,
        time_fn: Optional[Callable[[], float]] = None,
        *,
        max_events: int = 256,
        listeners: Optional[Iterable[TelemetryListener]] = None,
    ) -> None:
        self._time_fn = time_fn or time.perf_counter
        self._max_events = max(1, int(max_events))
        self._lock = threading.RLock()
        self._listeners: List[TelemetryListener] = list(listeners or [])
        self._trace = self._new_trace(0)
        self._published: Dict[str, Any] = {}

    def _new_trace(self, trace_id: int, name: Optional[str] = None) -> _Trace:
        return _Trace(trace_id=trace_id, name=name, events=deque(maxlen=self._max_events))

    def _publish_locked(self) -> None:
        self._published = deepcopy(self._trace.export())

    def _emit(self, event_type: str, payload: Dict[str, Any]) -> None:
        with self._lock:
            listeners = tuple(self._listeners)
        for listener in listeners:
            try:
                listener(event_type, dict(payload))
            except Exception:
                # Listener failures never reach the search being measured.
                continue

    def now(self) -> float:
        return float(self._time_fn())

    def start_trace(self, name: str) -> int:
        """Discard the previous trace and begin recording ``name``."""

        with self._lock:
            trace = self._new_trace(self._trace.trace_id + 1, name)
            trace.metadata["trace_name"] = name
            trace.metadata["start_time"] = self.now()
            self._trace = trace
            self._publish_locked()

        self._emit("trace_started", {"trace_id": trace.trace_id, "name": name})
        return trace.trace_id

    @contextmanager
    def timer(
        self,
        name: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Iterator[Dict[str, Any]]:
        """Time the enclosed block and record it under ``name``.

        The yielded dict is stored with the measurement, so the block can
        attach details it discovers (e.g. a catalog size).
        """

        payload: Dict[str, Any] = dict(metadata or {})
        self._emit("timer_started", {"name": name, "metadata": dict(payload)})
        started = self.now()
        try:
            yield payload
        finally:
            self._record_timing(name, self.now() - started, payload)

    def _record_timing(self, name: str, duration: float, payload: Dict[str, Any]) -> None:
        duration = max(0.0, float(duration))
        event: Dict[str, Any] = {"name": name, "duration": duration}
        if payload:
            event["metadata"] = dict(payload)

        with self._lock:
            self._trace.timings.setdefault(name, TimingStats()).add(duration)
            self._trace.events.append(event)
            self._publish_locked()

        self._emit("timing", {"name": name, "duration": duration, "metadata": dict(payload)})

    def increment(self, name: str, amount: float = 1.0) -> None:
        delta = float(amount)
        with self._lock:
            counters = self._trace.counters
            counters[name] = counters.get(name, 0.0) + delta
            value = counters[name]
            self._publish_locked()

        self._emit("counter", {"name": name, "delta": delta, "value": value})

    def annotate(self, key: str, value: Any) -> None:
        with self._lock:
            self._trace.metadata[key] = value
            self._publish_locked()

        self._emit("metadata", {"key": key, "value": value})

    def snapshot(self) -> Dict[str, Any]:
        """Export the active trace and remember it as the latest snapshot."""

        with self._lock:
            self._publish_locked()
            return self._trace.export()

    def latest_snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return deepcopy(self._published)

    def add_listener(self, listener: TelemetryListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: TelemetryListener) -> None:
        with self._lock:
            self._listeners = [entry for entry in self._listeners if entry is not listener]


class TelemetryLogger:
    """Listener writing each telemetry event to the ``anagrammer`` log."""

    def __init__(
        self,
        *,
        logger: Optional[logging.LoggerAdapter] = None,
        level: int = logging.INFO,
        level_map: Optional[Dict[str, int]] = None,
    ) -> None:
        self._logger = logger or get_logger(__name__).bind(component="telemetry")
        self._level = level
        self._level_map = dict(level_map or {})

    def __call__(self, event_type: str, payload: Dict[str, Any]) -> None:
        level = self._level_map.get(event_type, self._level)
        if not self._logger.isEnabledFor(level):
            return

        subject = payload.get("name") or payload.get("key") or payload.get("trace_id") or "event"
        context = {"telemetry.event": event_type}
        context.update((str(key), value) for key, value in payload.items())
        self._logger.log(level, f"Telemetry {event_type}: {subject}", context=context)


__all__ = ["StructuredTelemetry", "TelemetryLogger", "TelemetryListener", "TimingStats"]
