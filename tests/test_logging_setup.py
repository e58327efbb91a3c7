"""Tests for the standard logging format helper."""

import logging

from apiwiki.logging_setup import DATE_FORMAT, LOG_FORMAT, configure_logging


def test_configures_bare_root_logger(monkeypatch):
    monkeypatch.setattr(logging.root, "handlers", [])
    monkeypatch.setattr(logging.root, "level", logging.WARNING)

    configure_logging(logging.DEBUG)

    assert logging.root.level == logging.DEBUG
    (handler,) = logging.root.handlers
    assert handler.formatter._fmt == LOG_FORMAT
    assert handler.formatter.datefmt == DATE_FORMAT


def test_existing_handlers_left_alone(monkeypatch):
    existing = logging.NullHandler()
    monkeypatch.setattr(logging.root, "handlers", [existing])
    monkeypatch.setattr(logging.root, "level", logging.WARNING)

    configure_logging(logging.DEBUG)

    assert logging.root.handlers == [existing]
    assert logging.root.level == logging.WARNING
