"""
Telemetry Protocol - Fire-and-forget reporting.

Sinks must never raise into the caller and never block it; reconciliation
control flow does not depend on whether an event was delivered.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

__all__ = ["TelemetryEvent", "TelemetrySinkProtocol"]


@dataclass(slots=True)
class TelemetryEvent:
    """Named event with plain and personally identifying properties.

    PII properties are anonymized by the sink before they leave the process.
    """

    name: str
    properties: dict[str, Any] = field(default_factory=dict)
    pii_properties: dict[str, str] = field(default_factory=dict)

    def set_pii_property(self, key: str, value: str) -> None:
        """Attach a value that must be anonymized before sending."""
        self.pii_properties[key] = value


@runtime_checkable
class TelemetrySinkProtocol(Protocol):
    """Receives telemetry events."""

    def send(self, event: TelemetryEvent) -> None:
        """Report an event. Must not raise."""
        ...
