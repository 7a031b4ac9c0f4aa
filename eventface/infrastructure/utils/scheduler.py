"""
Scheduled delays with cancellation.

Retry backoff and the pause between indexing windows wait through a
Scheduler instead of calling asyncio.sleep directly, so the delays can be
recorded (and skipped) in tests.
"""

# Standard library imports
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Set

logger = logging.getLogger(__name__)


class Scheduler(ABC):
    """Timer + cancellation token"""

    @abstractmethod
    async def sleep(self, delay: float) -> None:
        """Wait for delay seconds. Raises asyncio.CancelledError once cancelled"""
        pass

    @abstractmethod
    def cancel(self) -> None:
        """Wake every pending sleep with CancelledError and refuse new ones"""
        pass

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        pass


class AsyncioScheduler(Scheduler):
    """Scheduler backed by the running event loop's timers"""

    def __init__(self) -> None:
        self._cancelled = False
        self._pending: Set[asyncio.Future] = set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    async def sleep(self, delay: float) -> None:
        if self._cancelled:
            raise asyncio.CancelledError("scheduler cancelled")
        if delay <= 0:
            return

        loop = asyncio.get_running_loop()
        waiter = loop.create_future()
        handle = loop.call_later(delay, _resolve, waiter)
        self._pending.add(waiter)
        try:
            await waiter
        finally:
            handle.cancel()
            self._pending.discard(waiter)

    def cancel(self) -> None:
        self._cancelled = True
        pending = list(self._pending)
        if pending:
            logger.info(f"Cancelling {len(pending)} scheduled delay(s)")
        for waiter in pending:
            if not waiter.done():
                waiter.cancel()


def _resolve(waiter: asyncio.Future) -> None:
    if not waiter.done():
        waiter.set_result(None)
