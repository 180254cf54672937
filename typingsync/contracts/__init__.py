"""
Contracts (Protocols) for cordova-typings-sync.

These protocols define the interfaces that collaborators must satisfy.
Using Protocol enables structural subtyping - no inheritance required.
"""

from .errors import CatalogError, CatalogFormatError, CatalogNotFoundError, ManifestReadError
from .installer import InstallResult, TypingsInstallerProtocol
from .telemetry import TelemetryEvent, TelemetrySinkProtocol

__all__ = [
    "CatalogError",
    "CatalogFormatError",
    "CatalogNotFoundError",
    "InstallResult",
    "ManifestReadError",
    "TelemetryEvent",
    "TelemetrySinkProtocol",
    "TypingsInstallerProtocol",
]
