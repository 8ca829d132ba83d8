# src/orangedue/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

APP_LOGGER = "orangedue"
LOG_FILE_NAME = "orangedue.log"

# Console thresholds for loggers outside the app. asyncio reports slow
# callbacks and executor shutdown at WARNING; py.warnings carries warnings.warn().
_CONSOLE_THRESHOLDS = {
    "asyncio": logging.WARNING,
    "py.warnings": logging.ERROR,
}


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable while the REPL prompt is open: every orangedue
    record passes, other loggers only above their threshold (ERROR by default).
    The log file still receives everything.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == APP_LOGGER or name.startswith(APP_LOGGER + "."):
            return True

        top = name.split(".", 1)[0]
        threshold = _CONSOLE_THRESHOLDS.get(name, _CONSOLE_THRESHOLDS.get(top, logging.ERROR))
        return record.levelno >= threshold


def setup_logging(
    *,
    log_dir: str | Path = ".local/orangedue",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Route logs to stderr (filtered, so reminder lines and the prompt stay
    visible) and to <log_dir>/orangedue.log (unfiltered).

    Call once from the entry point, before the event loop starts.
    Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    # asyncio debug chatter (selector choice, executor threads) only goes to the file.
    logging.getLogger("asyncio").setLevel(logging.INFO)
    return log_file
