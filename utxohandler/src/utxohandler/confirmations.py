"""
Background confirmation polling for a broadcast transaction.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable, Callable

from loguru import logger

from utxohandler.constants import CONFIRMATION_POLL_INTERVAL
from utxohandler.events import EventChannel
from utxohandler.models import TransactionEvent, TransactionHandle


class ConfirmationMonitor:
    """
    Polls confirmation depth on a fixed interval and emits confirmation events.

    Polling is best-effort: lookup failures are logged and skipped, never
    raised. The monitor stops for good once the handle is errored, once
    ``target`` confirmations are seen, or when stopped/cancelled.
    """

    def __init__(
        self,
        events: EventChannel,
        interval: float = CONFIRMATION_POLL_INTERVAL,
        target: int | None = None,
    ):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        if target is not None and target < 1:
            raise ValueError(f"target must be >= 1, got {target}")

        self.events = events
        self.interval = interval
        self.target = target
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def subscribe(
        self,
        handle: TransactionHandle,
        is_errored: Callable[[], bool],
        fetch_confirmations: Callable[[], Awaitable[int]],
    ) -> asyncio.Task[None]:
        """Start polling in a background task. The handle must already carry a hash."""
        if not handle.tx_hash:
            raise RuntimeError("Cannot monitor confirmations before a transaction hash exists")
        if self._task is not None:
            raise RuntimeError("Monitor already subscribed")

        self._task = asyncio.create_task(
            self._run(handle, is_errored, fetch_confirmations),
            name=f"confirmations-{handle.tx_hash[:16]}",
        )
        return self._task

    async def _run(
        self,
        handle: TransactionHandle,
        is_errored: Callable[[], bool],
        fetch_confirmations: Callable[[], Awaitable[int]],
    ) -> None:
        logger.debug(f"Monitoring confirmations for {handle.tx_hash} every {self.interval}s")
        try:
            while True:
                await asyncio.sleep(self.interval)

                if is_errored():
                    logger.debug(f"Transaction {handle.tx_hash} errored, stopping monitor")
                    return

                try:
                    count = await fetch_confirmations()
                except Exception as e:
                    logger.warning(f"Confirmation lookup for {handle.tx_hash} failed: {e}")
                    continue

                # Re-check: the handle may have errored while the lookup was pending
                if is_errored():
                    return

                handle.confirmation_count = count
                self.events.emit(TransactionEvent.confirmation(count))

                if self.target is not None and count >= self.target:
                    logger.info(f"Transaction {handle.tx_hash} reached {count} confirmations")
                    return
        finally:
            self.events.close()

    async def stop(self) -> None:
        """Cancel polling and wait for the task to finish."""
        if self._task is None or self._task.done():
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task

    async def wait(self) -> None:
        """Wait until the monitor stops on its own."""
        if self._task is not None:
            await self._task
