import logging

from anagrammer.utils import logging_config
from anagrammer.utils.logging_config import configure_logging, resolve_level


def test_resolve_level_accepts_names_numbers_and_ints():
    assert resolve_level(None) == logging.INFO
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(" Warning ") == logging.WARNING
    assert resolve_level("40") == logging.ERROR
    assert resolve_level(logging.CRITICAL) == logging.CRITICAL
    assert resolve_level("chatty") == logging.INFO


def test_configure_logging_runs_once(monkeypatch):
    monkeypatch.setattr(logging_config, "_configured_level", logging.ERROR)

    assert configure_logging("debug") == logging.ERROR
