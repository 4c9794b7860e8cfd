"""
Lifecycle event channel.

Events reach consumers two ways: synchronous listener callbacks registered
with on(), and async iteration over the channel. Every iteration starts from
the first event ever emitted and ends once the channel is closed, so a
channel can be iterated any number of times, concurrently or one after
another.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from typing import cast

from loguru import logger

from utxohandler.models import TransactionEvent

Listener = Callable[[TransactionEvent], None]

_CLOSED = object()


class EventChannel:
    def __init__(self) -> None:
        self._subscribers: list[asyncio.Queue[object]] = []
        self._listeners: list[tuple[str | None, Listener]] = []
        self._history: list[TransactionEvent] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def history(self) -> list[TransactionEvent]:
        """Every event emitted so far, in order."""
        return list(self._history)

    def on(self, callback: Listener, name: str | None = None) -> None:
        """Register a listener for all events, or only those called ``name``."""
        self._listeners.append((name, callback))

    def emit(self, event: TransactionEvent) -> None:
        if self._closed:
            logger.debug(f"Dropping {event.name} event on closed channel")
            return

        self._history.append(event)
        for queue in self._subscribers:
            queue.put_nowait(event)
        for name, callback in list(self._listeners):
            if name is not None and name != event.name:
                continue
            try:
                callback(event)
            except Exception as e:
                logger.warning(f"Event listener raised on {event.name}: {e}")

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            for queue in self._subscribers:
                queue.put_nowait(_CLOSED)

    async def __aiter__(self) -> AsyncIterator[TransactionEvent]:
        # Replay what was already emitted, then follow live events
        queue: asyncio.Queue[object] = asyncio.Queue()
        for event in self._history:
            queue.put_nowait(event)
        if self._closed:
            queue.put_nowait(_CLOSED)
        self._subscribers.append(queue)

        try:
            while True:
                item = await queue.get()
                if item is _CLOSED:
                    return
                yield cast(TransactionEvent, item)
        finally:
            self._subscribers.remove(queue)
