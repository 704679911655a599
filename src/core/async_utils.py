"""
Async utilities with proper signal handling.

Provides signal-aware async execution so that CTRL+C interrupts a
long-running populate and lets in-flight downloads clean up.
"""

import asyncio
import signal
import sys
from typing import Any, Coroutine, TypeVar

from core.logging.setup import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def run_async_with_shutdown(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run an async coroutine with SIGINT/SIGTERM handling.

    When SIGINT (CTRL+C) or SIGTERM is received the main task is
    cancelled, which cancels every download it is waiting on, and
    KeyboardInterrupt is raised once cleanup has run.

    Args:
        coro: The coroutine to run

    Returns:
        The result of the coroutine

    Raises:
        KeyboardInterrupt: When SIGINT or SIGTERM is received
        Any exception raised by the coroutine
    """

    async def run_with_signal_handling() -> T:
        loop = asyncio.get_running_loop()
        main_task = asyncio.current_task()
        shutdown_received = False

        def signal_handler() -> None:
            nonlocal shutdown_received
            shutdown_received = True

            logger.info("Shutdown signal received, cancelling downloads...")

            if main_task is not None and not main_task.done():
                main_task.cancel()

        # Unix only; Windows delivers KeyboardInterrupt directly
        signals_to_handle = []
        if sys.platform != "win32":
            signals_to_handle = [signal.SIGINT, signal.SIGTERM]
            for sig in signals_to_handle:
                try:
                    loop.add_signal_handler(sig, signal_handler)
                except (ValueError, RuntimeError):
                    # Signal handling not available in this context
                    pass

        try:
            return await coro
        except asyncio.CancelledError:
            if shutdown_received:
                raise KeyboardInterrupt("Shutdown signal received during async operation")
            raise
        finally:
            for sig in signals_to_handle:
                try:
                    loop.remove_signal_handler(sig)
                except (ValueError, RuntimeError):
                    pass

    return asyncio.run(run_with_signal_handling())
