"""Process entry point: ``python -m meteodisplay``."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
import sys

from meteodisplay.config import DisplayConfig
from meteodisplay.exceptions import DisplayConfigError
from meteodisplay.service import DisplayService

_logger = logging.getLogger("meteodisplay")


async def _serve(service: DisplayService) -> None:
    loop = asyncio.get_running_loop()
    task = asyncio.current_task()
    assert task is not None  # noqa: S101
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, task.cancel)
    with contextlib.suppress(asyncio.CancelledError):
        await service.run()


def main() -> int:
    try:
        config = DisplayConfig.from_env()
    except DisplayConfigError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _logger.info("Starting meteo display bridge")
    asyncio.run(_serve(DisplayService(config)))
    _logger.info("Stopped")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
