"""Tests for the event bus."""

import asyncio

import pytest

from typingsync.events import Event, EventBus, get_event_bus, init_event_bus


class TestSubscription:
    """Test filter matching."""

    @pytest.mark.asyncio
    async def test_topic_wildcard(self):
        bus = EventBus()
        seen = []
        bus.on(seen.append, topic="manifest.*")

        await bus.emit("watcher", "manifest.changed")
        await bus.emit("reconciler", "pass.completed")

        assert [e.topic for e in seen] == ["manifest.changed"]

    @pytest.mark.asyncio
    async def test_source_and_intent(self):
        bus = EventBus()
        seen = []
        bus.on(seen.append, source="telemetry", intent="metric")

        await bus.emit("telemetry", "unknownPlugin", {"plugin": "x"}, intent="metric")
        await bus.emit("telemetry", "unknownPlugin", {"plugin": "x"})
        await bus.emit("watcher", "manifest.created", intent="metric")

        assert len(seen) == 1
        assert seen[0].data == {"plugin": "x"}

    @pytest.mark.asyncio
    async def test_unsubscribe(self):
        bus = EventBus()
        seen = []
        unsubscribe = bus.on(seen.append)

        unsubscribe()
        await bus.emit("watcher", "manifest.changed")

        assert seen == []

    @pytest.mark.asyncio
    async def test_async_handler(self):
        bus = EventBus()
        seen = []

        async def handler(event):
            await asyncio.sleep(0)
            seen.append(event)

        bus.on(handler)
        await bus.emit("reconciler", "pass.completed")

        assert len(seen) == 1


class TestEventBus:
    """Test emission semantics."""

    @pytest.mark.asyncio
    async def test_handler_error_isolated(self):
        """A failing handler does not affect other handlers or the emitter."""
        bus = EventBus()
        seen = []

        def broken(event):
            raise ValueError("broken handler")

        bus.on(broken)
        bus.on(seen.append)

        await bus.emit("reconciler", "pass.completed")

        assert len(seen) == 1

    @pytest.mark.asyncio
    async def test_middleware_can_cancel(self):
        bus = EventBus()
        seen = []
        bus.on(seen.append)
        bus.use(lambda event: None if event.topic == "noise" else event)

        await bus.emit("watcher", "noise")
        await bus.emit("watcher", "manifest.changed")

        assert [e.topic for e in seen] == ["manifest.changed"]

    @pytest.mark.asyncio
    async def test_middleware_can_replace(self):
        bus = EventBus()
        seen = []
        bus.on(seen.append)
        bus.use(lambda event: Event(event.source, event.topic, {"tagged": True}))

        await bus.emit("watcher", "manifest.changed", {"tagged": False})

        assert seen[0].data == {"tagged": True}

    @pytest.mark.asyncio
    async def test_emit_sync_and_drain(self):
        bus = EventBus()
        seen = []
        bus.on(seen.append)

        bus.emit_sync("telemetry", "addTypings")
        await bus.drain()

        assert [e.topic for e in seen] == ["addTypings"]

    def test_emit_sync_without_loop(self):
        """Outside an event loop the event is dropped, not raised."""
        bus = EventBus()
        seen = []
        bus.on(seen.append)

        bus.emit_sync("telemetry", "addTypings")

        assert seen == []


class TestGlobalBus:
    def test_init_replaces_singleton(self):
        first = get_event_bus()
        fresh = init_event_bus()

        assert fresh is not first
        assert get_event_bus() is fresh
