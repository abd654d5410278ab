import logging

from prometheus_client import REGISTRY

from anagrammer.utils.observability import (
    add_span_attributes,
    create_counter,
    create_histogram,
    get_logger,
    start_span,
)


class RecordingSpan:
    def __init__(self):
        self.attributes = {}

    def set_attribute(self, key, value):
        self.attributes[key] = value


def test_structured_logger_renders_context(caplog):
    logger = get_logger("anagrammer.tests.observability").bind(component="tests")
    caplog.set_level(logging.INFO, logger="anagrammer.tests.observability")

    logger.info("Search finished", context={"results": 3})

    message = caplog.records[-1].getMessage()
    assert message.startswith("Search finished | ")
    assert '"component": "tests"' in message
    assert '"results": 3' in message


def test_metrics_are_reused_when_created_twice():
    first = create_counter("anagram_test_events_total", "Test events.")
    second = create_counter("anagram_test_events_total", "Test events.")

    first.inc()
    second.inc(2)

    assert REGISTRY.get_sample_value("anagram_test_events_total") == 3.0


def test_histogram_timer_observes_durations():
    histogram = create_histogram("anagram_test_duration_seconds", "Test durations.")

    with histogram.time():
        pass

    assert REGISTRY.get_sample_value("anagram_test_duration_seconds_count") == 1.0


def test_span_attributes_skip_missing_values():
    span = RecordingSpan()

    add_span_attributes(span, {"phrase": "listen", "top_n": None, "words": ("a", "b"), 3: "x"})

    assert span.attributes == {"phrase": "listen", "words": ["a", "b"]}


def test_start_span_yields_a_usable_span():
    with start_span("anagram.test", {"phrase": "listen"}) as span:
        add_span_attributes(span, {"result.total": 1})
