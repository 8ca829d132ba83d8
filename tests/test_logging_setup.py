# tests/test_logging_setup.py

from __future__ import annotations

import logging

import pytest

from orangedue.logging_setup import _ConsoleNoiseFilter


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


@pytest.mark.parametrize(
    ("name", "level", "shown"),
    [
        ("orangedue.records.store", logging.DEBUG, True),
        ("orangedue", logging.INFO, True),
        ("asyncio", logging.INFO, False),
        ("asyncio", logging.WARNING, True),
        ("asyncio.events", logging.WARNING, True),
        ("py.warnings", logging.WARNING, False),
        ("urllib3.connectionpool", logging.WARNING, False),
        ("urllib3.connectionpool", logging.ERROR, True),
        ("orangeduex", logging.INFO, False),
    ],
)
def test_console_filter_thresholds(name: str, level: int, shown: bool) -> None:
    assert _ConsoleNoiseFilter().filter(_record(name, level)) is shown
