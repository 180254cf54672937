"""
Event Bus - In-process pub/sub between the sync engine and its observers.

Publishers in this package:
    reconciler   pass.completed      ReconcileResult.to_dict()
    watcher      manifest.<kind>     {"root": ..., "path": ...}
    telemetry    <event name>        telemetry properties, intent="metric"

Subscribers filter on source/topic with glob patterns and on intent exactly:
    bus.on(handler, topic="manifest.*")
    bus.on(handler, source="telemetry", intent="metric")
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from fnmatch import fnmatch
from typing import Any

import structlog

__all__ = ["Event", "EventBus", "Handler", "get_event_bus", "init_event_bus"]

logger = structlog.get_logger(__name__)

# Handlers and middleware may be plain or async callables
Handler = Callable[["Event"], Any]


@dataclass(slots=True, frozen=True)
class Event:
    source: str
    topic: str
    data: dict = field(default_factory=dict)
    intent: str | None = None
    ts: float = field(default_factory=time.time)


@dataclass(slots=True)
class _Subscription:
    handler: Handler
    source: str
    topic: str
    intent: str | None

    def wants(self, event: Event) -> bool:
        if self.intent is not None and self.intent != event.intent:
            return False
        return fnmatch(event.source, self.source) and fnmatch(event.topic, self.topic)


async def _call(handler: Handler, event: Event) -> Any:
    outcome = handler(event)
    if asyncio.iscoroutine(outcome):
        outcome = await outcome
    return outcome


class EventBus:
    """Delivers events to every matching subscriber concurrently.

    A subscriber that raises is logged; the publisher and the other
    subscribers are unaffected. Middleware runs first, in order, and may
    replace the event or drop it by returning None.
    """

    def __init__(self) -> None:
        self._subscriptions: list[_Subscription] = []
        self._middleware: list[Handler] = []
        self._in_flight: set[asyncio.Task] = set()

    def on(
        self,
        handler: Handler,
        *,
        source: str = "*",
        topic: str = "*",
        intent: str | None = None,
    ) -> Callable[[], None]:
        """Subscribe ``handler``; returns a function that unsubscribes it."""
        subscription = _Subscription(handler, source, topic, intent)
        self._subscriptions.append(subscription)

        def unsubscribe() -> None:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

        return unsubscribe

    def use(self, middleware: Handler) -> None:
        self._middleware.append(middleware)

    async def emit(
        self,
        source: str,
        topic: str,
        data: dict | None = None,
        intent: str | None = None,
    ) -> None:
        event: Event | None = Event(source, topic, data or {}, intent)
        for middleware in self._middleware:
            replaced = await _call(middleware, event)
            if replaced is None:
                return
            if isinstance(replaced, Event):
                event = replaced

        targets = [s.handler for s in self._subscriptions if s.wants(event)]
        if targets:
            await asyncio.gather(*(self._deliver(handler, event) for handler in targets))

    async def _deliver(self, handler: Handler, event: Event) -> None:
        try:
            await _call(handler, event)
        except Exception as e:
            logger.error("event_handler_failed", source=event.source, topic=event.topic, error=str(e))

    def emit_sync(
        self,
        source: str,
        topic: str,
        data: dict | None = None,
        intent: str | None = None,
    ) -> None:
        """Schedule an emit from synchronous code.

        Without a running loop there is nobody to deliver to; the event is
        dropped and logged at debug level.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("event_dropped_no_loop", source=source, topic=topic)
            return

        task = loop.create_task(self.emit(source, topic, data, intent))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def drain(self) -> None:
        """Wait until every scheduled emit has been delivered."""
        while self._in_flight:
            await asyncio.gather(*tuple(self._in_flight), return_exceptions=True)


_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Process-wide bus, created on first use."""
    global _bus
    if _bus is None:
        _bus = EventBus()
    return _bus


def init_event_bus() -> EventBus:
    """Replace the process-wide bus with a fresh one."""
    global _bus
    _bus = EventBus()
    return _bus
