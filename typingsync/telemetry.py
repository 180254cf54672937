"""
Telemetry - Anonymized, fire-and-forget usage signals.

Events are published on the event bus with ``intent="metric"`` under the
"telemetry" source. PII properties (plugin names the catalog does not know,
for example) are replaced by a SHA-256 digest before they leave the sink.
"""

import hashlib
from collections.abc import Callable

import structlog

from .contracts import TelemetryEvent
from .events import Event, EventBus, get_event_bus

__all__ = ["EventBusTelemetry", "NullTelemetry", "anonymize", "log_telemetry"]

logger = structlog.get_logger(__name__)

TELEMETRY_SOURCE = "telemetry"


def anonymize(value: str) -> str:
    """Stable one-way digest of a PII value."""
    return hashlib.sha256(value.encode()).hexdigest()


class EventBusTelemetry:
    """Telemetry sink that publishes on the event bus."""

    def __init__(self, bus: EventBus | None = None, enabled: bool = True) -> None:
        self._bus = bus
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def send(self, event: TelemetryEvent) -> None:
        if not self._enabled:
            return

        try:
            data = dict(event.properties)
            data.update({key: anonymize(value) for key, value in event.pii_properties.items()})
            bus = self._bus or get_event_bus()
            bus.emit_sync(TELEMETRY_SOURCE, event.name, data, intent="metric")
        except Exception as e:
            logger.warning("telemetry_send_failed", telemetry_event=event.name, error=str(e))


class NullTelemetry:
    """Drops every event."""

    def send(self, event: TelemetryEvent) -> None:
        pass


def log_telemetry(bus: EventBus) -> Callable[[], None]:
    """Write telemetry events to the debug log. Returns the unsubscribe function."""

    def handler(event: Event) -> None:
        logger.debug("telemetry_event", telemetry_event=event.topic, **event.data)

    return bus.on(handler, source=TELEMETRY_SOURCE, intent="metric")
