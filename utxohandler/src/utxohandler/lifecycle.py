"""
Send lifecycle: build, broadcast, then monitor confirmations.

The outcome of a send is exposed through two separate channels:
- a future that resolves with the transaction hash as soon as a provider
  accepts the broadcast (or is rejected with the failure), and
- an event channel carrying one transactionHash event followed by zero or
  more confirmation events.

The lifecycle task writes handle.tx_hash and handle.errored; the
confirmation monitor writes handle.confirmation_count. Neither writes the
other's fields, so no locking is needed on the single event loop.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Generator
from enum import Enum
from typing import Any

from loguru import logger

from utxohandler.builder import SignedTransaction, Signer, TransactionBuilder
from utxohandler.confirmations import ConfirmationMonitor
from utxohandler.errors import BroadcastError, BuildError, RetryExhaustedError
from utxohandler.events import EventChannel, Listener
from utxohandler.models import NetworkType, TransactionEvent, TransactionHandle, TransactionRequest
from utxohandler.providers.endpoints import ProviderSet
from utxohandler.retry import RetryPolicy, fallback
from utxohandler.utxo import UTXOSelector


class TransactionState(str, Enum):
    """Send lifecycle states."""

    BUILDING = "building"
    BROADCASTING = "broadcasting"
    BROADCAST = "broadcast"
    CONFIRMED = "confirmed"
    FAILED = "failed"


class TransactionLifecycle:
    """
    Drives a single send from UTXO selection to broadcast.

    Once the broadcast is acknowledged the result is resolved and a
    ConfirmationMonitor takes over; its progress never changes the result.
    """

    def __init__(
        self,
        request: TransactionRequest,
        signer: Signer,
        builder: TransactionBuilder,
        selector: UTXOSelector,
        providers: ProviderSet,
        network: NetworkType = NetworkType.MAINNET,
        confirmations: int = 0,
        retry_policy: RetryPolicy | None = None,
        monitor: ConfirmationMonitor | None = None,
    ):
        self.request = request
        self.signer = signer
        self.builder = builder
        self.selector = selector
        self.providers = providers
        self.network = network
        self.confirmations = confirmations
        self.retry_policy = retry_policy or RetryPolicy()

        self.handle = TransactionHandle()
        self.events = monitor.events if monitor is not None else EventChannel()
        self.monitor = monitor or ConfirmationMonitor(self.events)
        self.result: asyncio.Future[str] = asyncio.get_running_loop().create_future()

        self.tx_hex: str = ""
        self._phase = TransactionState.BUILDING
        self._task: asyncio.Task[None] | None = None

    @property
    def state(self) -> TransactionState:
        target = self.monitor.target
        if (
            self._phase == TransactionState.BROADCAST
            and target is not None
            and self.handle.confirmation_count >= target
        ):
            return TransactionState.CONFIRMED
        return self._phase

    def start(self) -> PendingTransaction:
        if self._task is not None:
            raise RuntimeError("Lifecycle already started")
        self._task = asyncio.create_task(self._run(), name="send-lifecycle")
        return PendingTransaction(self)

    async def _run(self) -> None:
        try:
            built = await self._build()
            tx_hash = await self._broadcast(built)
        except Exception as e:
            self._fail(e)
            return

        self.handle.record_hash(tx_hash)
        self._phase = TransactionState.BROADCAST
        logger.info(f"Transaction broadcast: {tx_hash}")

        self.events.emit(TransactionEvent.transaction_hash(tx_hash))
        if not self.result.done():
            self.result.set_result(tx_hash)

        self.monitor.subscribe(
            self.handle,
            lambda: self.handle.errored,
            lambda: self.selector.get_confirmations(tx_hash),
        )

    async def _build(self) -> SignedTransaction:
        self._phase = TransactionState.BUILDING
        request = self.request
        logger.info(
            f"Building transaction: {request.value_units:,} units to {request.to_address} "
            f"(fee {request.fee_units:,}, subtract_fee={request.subtract_fee})"
        )

        utxos = await self.selector.select_for_spending(request.from_address, self.confirmations)
        logger.debug(f"{len(utxos)} spend candidate(s) for {request.from_address}")

        try:
            return await self.builder.build(self.network, self.signer, request, utxos)
        except BuildError:
            raise
        except Exception as e:
            raise BuildError(f"Failed to build transaction: {e}") from e

    async def _broadcast(self, built: SignedTransaction) -> str:
        self._phase = TransactionState.BROADCASTING
        self.tx_hex = built.to_hex()
        logger.info("Broadcasting transaction...")

        try:
            return await self._submit()
        except RetryExhaustedError as e:
            raise BroadcastError(e.attempts, e.last_error) from e.last_error

    async def _submit(self) -> str:
        return await self.retry_policy.run(
            lambda: fallback(self.providers.broadcast_transaction(self.network, self.tx_hex))
        )

    async def rebroadcast(self) -> str:
        """
        Resubmit the already-broadcast transaction.

        Returns the hash reported by the provider. The handle and the result
        are left untouched whatever the outcome.
        """
        if not self.handle.tx_hash:
            raise RuntimeError("Transaction has not been broadcast")

        tx_hash = await self._submit()
        if tx_hash != self.handle.tx_hash:
            logger.warning(
                f"Rebroadcast returned {tx_hash}, expected {self.handle.tx_hash}"
            )
        return tx_hash

    def _fail(self, error: Exception) -> None:
        failed_in = self._phase.value
        self.handle.errored = True
        self._phase = TransactionState.FAILED
        logger.error(f"Transaction failed while {failed_in}: {error}")

        if not self.result.done():
            self.result.set_exception(error)
        self.events.close()

    async def wait(self) -> None:
        """Wait for the lifecycle task and then for the monitor to finish."""
        if self._task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
        with contextlib.suppress(asyncio.CancelledError):
            await self.monitor.wait()

    async def close(self) -> None:
        """Tear down: cancel any in-flight work and stop monitoring."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
        await self.monitor.stop()
        if not self.result.done():
            self.result.cancel()
        self.events.close()


class PendingTransaction:
    """
    Caller-facing view of a send.

    Await it for the transaction hash; iterate ``events`` (or register
    listeners with ``on``) for progress.
    """

    def __init__(self, lifecycle: TransactionLifecycle):
        self._lifecycle = lifecycle

    @property
    def handle(self) -> TransactionHandle:
        return self._lifecycle.handle

    @property
    def events(self) -> EventChannel:
        return self._lifecycle.events

    @property
    def result(self) -> asyncio.Future[str]:
        return self._lifecycle.result

    @property
    def state(self) -> TransactionState:
        return self._lifecycle.state

    @property
    def tx_hash(self) -> str | None:
        return self._lifecycle.handle.tx_hash

    def on(self, name: str, callback: Listener) -> PendingTransaction:
        self._lifecycle.events.on(callback, name)
        return self

    async def rebroadcast(self) -> str:
        return await self._lifecycle.rebroadcast()

    async def wait_for_monitor(self) -> None:
        """Wait until confirmation monitoring ends (target reached or errored)."""
        await self._lifecycle.wait()

    async def close(self) -> None:
        await self._lifecycle.close()

    def __await__(self) -> Generator[Any, None, str]:
        return self._lifecycle.result.__await__()

    async def __aenter__(self) -> PendingTransaction:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
