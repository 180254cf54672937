"""Errors raised by the reading layer and handled by the reconciler."""

from pathlib import Path

__all__ = ["CatalogError", "CatalogFormatError", "CatalogNotFoundError", "ManifestReadError"]


class CatalogError(Exception):
    """Base class for catalog loading failures."""


class CatalogNotFoundError(CatalogError):
    """Raised when the catalog resource is absent from the installation."""


class CatalogFormatError(CatalogError):
    """Raised when the catalog resource cannot be parsed."""


class ManifestReadError(Exception):
    """Raised when the project's plugin manifest cannot be read."""

    def __init__(self, manifest_path: Path, reason: str):
        self.manifest_path = manifest_path
        self.reason = reason
        super().__init__(f"Cannot read plugin manifest '{manifest_path}': {reason}")
