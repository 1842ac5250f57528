"""Event bus for SystemEvents.

Async pub/sub: services emit lifecycle and integration events, subscribers
(the audit logger) consume them on a background worker so request handling
never waits on a slow subscriber.

Usage:
    # Emit an event from anywhere:
    from src.events import emit

    await emit(SystemEvent(
        event_type=EventType.PERSON_CREATED,
        entity_id=pessoa.id,
        data={"tipo": "F"},
    ))

    # Register a subscriber at startup:
    from src.events import subscribe

    subscribe(my_handler)  # async def my_handler(event: SystemEvent) -> None
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Coroutine
from typing import Any

from src.schemas.events import EventType, SystemEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[SystemEvent], Coroutine[Any, Any, None]]


class EventBus:
    """Queue-backed dispatcher with global and per-type subscribers."""

    def __init__(self) -> None:
        self._subscribers: list[EventHandler] = []
        self._type_subscribers: dict[EventType, list[EventHandler]] = {}
        self._queue: asyncio.Queue[SystemEvent] | None = None
        self._worker: asyncio.Task[None] | None = None

    def subscribe(self, handler: EventHandler, event_types: list[EventType] | None = None) -> None:
        """Register a handler for all events, or only for ``event_types``."""
        if event_types is None:
            self._subscribers.append(handler)
            logger.info("Registered global event subscriber: %s", handler.__name__)
            return
        for et in event_types:
            self._type_subscribers.setdefault(et, []).append(handler)
        logger.info(
            "Registered event subscriber %s for types: %s",
            handler.__name__,
            [t.value for t in event_types],
        )

    def unsubscribe(self, handler: EventHandler) -> None:
        if handler in self._subscribers:
            self._subscribers.remove(handler)
        for handlers in self._type_subscribers.values():
            if handler in handlers:
                handlers.remove(handler)

    async def emit(self, event: SystemEvent) -> None:
        """Queue an event; a worker is started lazily on first use."""
        if self._queue is None:
            self._queue = asyncio.Queue()
        self._ensure_worker()
        await self._queue.put(event)
        logger.debug("Event emitted: %s (entity=%s)", event.event_type.value, event.entity_id)

    async def dispatch(self, event: SystemEvent) -> None:
        """Deliver one event to every matching subscriber; failures are isolated."""
        handlers = list(self._subscribers) + self._type_subscribers.get(event.event_type, [])
        if not handlers:
            return
        results = await asyncio.gather(
            *[handler(event) for handler in handlers],
            return_exceptions=True,
        )
        for handler, result in zip(handlers, results):
            if isinstance(result, Exception):
                logger.error(
                    "Handler %s failed for event %s: %s",
                    handler.__name__,
                    event.event_type.value,
                    result,
                )

    async def start(self) -> None:
        self._queue = asyncio.Queue()
        self._ensure_worker()
        logger.info(
            "Event bus started with %d global + %d typed subscribers",
            len(self._subscribers),
            sum(len(v) for v in self._type_subscribers.values()),
        )

    async def stop(self) -> None:
        """Drain pending events, then cancel the worker."""
        if self._queue is not None:
            await self._queue.join()
        if self._worker is not None and not self._worker.done():
            self._worker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._worker
        self._worker = None
        self._queue = None
        logger.info("Event bus stopped")

    def _ensure_worker(self) -> None:
        if self._worker is None or self._worker.done():
            self._worker = asyncio.create_task(self._run())

    async def _run(self) -> None:
        queue = self._queue
        if queue is None:
            return
        while True:
            event = await queue.get()
            try:
                await self.dispatch(event)
            except Exception:
                logger.exception("Error dispatching event %s", event.event_type.value)
            finally:
                queue.task_done()


# Module-level singleton and shortcuts
event_bus = EventBus()

emit = event_bus.emit
subscribe = event_bus.subscribe
unsubscribe = event_bus.unsubscribe
start_event_system = event_bus.start
stop_event_system = event_bus.stop
