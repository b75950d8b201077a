"""
Main module for the upload-notification relay service.

This module runs the relay worker until the process receives SIGINT or
SIGTERM. The batch in flight when the signal arrives is finished before
the worker exits.
"""

import asyncio
import signal

import structlog

from imagesync.core.config import settings
from imagesync.core.dependencies import create_relay_worker
from imagesync.relay.worker import RelayWorker
from imagesync.utils.logging import configure_logging

logger = structlog.get_logger(__name__)


def install_signal_handlers(worker: RelayWorker) -> None:
    """Request a cooperative stop of the worker on SIGINT and SIGTERM."""
    loop = asyncio.get_running_loop()
    for signal_name in ("SIGINT", "SIGTERM"):
        try:
            loop.add_signal_handler(getattr(signal, signal_name), worker.stop)
        except (NotImplementedError, AttributeError):
            # Signal handling is not available on Windows
            pass


async def run_service() -> None:
    """Run the relay service."""
    worker = create_relay_worker(settings)
    install_signal_handlers(worker)

    try:
        await worker.run()
    except asyncio.CancelledError:
        logger.info("Relay service cancelled")
        raise


def main() -> None:
    """Entry point for the service."""
    configure_logging(log_level=settings.LOG_LEVEL)
    try:
        asyncio.run(run_service())
    except KeyboardInterrupt:
        logger.info("Relay service interrupted")


if __name__ == "__main__":
    main()
