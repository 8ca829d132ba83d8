# src/orangedue/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState inside the event loop, then runs the
console REPL. Pending reminders are dropped on exit (the store is volatile).
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state
from ..config import Settings, get_settings
from ..connectors.console_connector import ConsoleNotifier, run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _run(settings: Settings) -> None:
    state = create_initial_state(
        ConsoleNotifier(),
        settings=settings,
        loop=asyncio.get_running_loop(),
    )
    try:
        await run_console_loop(state)
    finally:
        state.scheduler.shutdown()
        await state.scheduler.drain()


def main() -> None:
    settings = get_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    try:
        asyncio.run(_run(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")

    logger.info("Bye.")


if __name__ == "__main__":
    main()
