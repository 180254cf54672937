"""
Typings Catalog - Static mapping from plugin identifier to declaration file.

The catalog ships with the package as ``data/pluginTypings.json``:

    {
        "cordova": {"typingFile": "cordova/cordova.d.ts"},
        "cordova-plugin-camera": {"typingFile": "cordova/plugins/Camera.d.ts"}
    }

Typing files are paths relative to the project's typings directory. The
reserved "cordova" entry describes the host runtime typings and is installed
whatever plugins the project has.
"""

import json
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

from .contracts import CatalogError, CatalogFormatError, CatalogNotFoundError
from .paths import canonical_typing_id

__all__ = [
    "SELF_TYPINGS_KEY",
    "TypingDescriptor",
    "TypingsCatalog",
    "load_catalog",
]

logger = structlog.get_logger(__name__)

SELF_TYPINGS_KEY = "cordova"


@dataclass(slots=True, frozen=True)
class TypingDescriptor:
    """Catalog entry for one plugin."""

    plugin: str
    typing_file: str


class TypingsCatalog:
    """Immutable plugin -> typing descriptor mapping.

    Example:
        catalog = TypingsCatalog.from_file(path)

        if "cordova-plugin-camera" in catalog:
            print(catalog.typing_for("cordova-plugin-camera"))

        desired, unknown = catalog.desired_for(installed_plugins)
    """

    __slots__ = ("_entries", "_path")

    def __init__(self, entries: dict[str, TypingDescriptor], path: Path | None = None) -> None:
        self._entries = dict(entries)
        self._path = path

    @classmethod
    def from_dict(cls, data: Any, path: Path | None = None) -> "TypingsCatalog":
        """Build a catalog from the decoded JSON resource.

        Raises:
            CatalogFormatError: If the root is not an object or an entry
                lacks a string ``typingFile``
        """
        if not isinstance(data, dict):
            raise CatalogFormatError(f"Catalog root must be an object, got {type(data).__name__}")

        entries = {}
        for plugin, raw in data.items():
            typing_file = raw.get("typingFile") if isinstance(raw, dict) else None
            if not isinstance(typing_file, str) or not typing_file:
                raise CatalogFormatError(f"Catalog entry {plugin!r} has no typingFile")
            entries[plugin] = TypingDescriptor(plugin, canonical_typing_id(typing_file))

        return cls(entries, path)

    @classmethod
    def from_file(cls, path: Path) -> "TypingsCatalog":
        """Load the catalog resource.

        Raises:
            CatalogNotFoundError: If the resource is missing
            CatalogFormatError: If the resource is not a valid catalog
            CatalogError: If the resource exists but cannot be read
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise CatalogNotFoundError(f"Catalog not found: {path}") from e
        except json.JSONDecodeError as e:
            raise CatalogFormatError(f"Catalog is not valid JSON: {path}: {e}") from e
        except UnicodeDecodeError as e:
            raise CatalogFormatError(f"Catalog is not UTF-8: {path}: {e}") from e
        except OSError as e:
            raise CatalogError(f"Cannot read catalog {path}: {e}") from e

        return cls.from_dict(data, path)

    @property
    def path(self) -> Path | None:
        """Resource the catalog was loaded from, if any."""
        return self._path

    @property
    def self_typing(self) -> str | None:
        """Typing file of the reserved host-runtime entry."""
        entry = self._entries.get(SELF_TYPINGS_KEY)
        return entry.typing_file if entry else None

    def typing_for(self, plugin: str) -> str | None:
        """Typing file for a plugin, or None for unknown plugins."""
        entry = self._entries.get(plugin)
        return entry.typing_file if entry else None

    def desired_for(self, plugins: Iterable[str]) -> tuple[set[str], list[str]]:
        """Map installed plugins to typing files.

        Returns:
            (desired typing files, unknown plugins in input order)
        """
        desired: set[str] = set()
        unknown: list[str] = []
        for plugin in plugins:
            typing_file = self.typing_for(plugin)
            if typing_file is None:
                if plugin not in unknown:
                    unknown.append(plugin)
                continue
            desired.add(typing_file)
        return desired, unknown

    def __contains__(self, plugin: object) -> bool:
        return plugin in self._entries

    def __iter__(self) -> Iterator[TypingDescriptor]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)


def load_catalog(path: Path) -> TypingsCatalog | None:
    """Load the catalog, or None when typings support is unavailable.

    A missing, unreadable or malformed resource is logged, never raised: callers skip
    all reconciliation work when this returns None.
    """
    try:
        catalog = TypingsCatalog.from_file(path)
    except CatalogNotFoundError:
        logger.error("catalog_missing", path=str(path))
        return None
    except CatalogFormatError as e:
        logger.error("catalog_invalid", path=str(path), error=str(e))
        return None
    except CatalogError as e:
        logger.error("catalog_unreadable", path=str(path), error=str(e))
        return None

    if catalog.self_typing is None:
        logger.warning("catalog_self_entry_missing", key=SELF_TYPINGS_KEY, path=str(path))

    logger.debug("catalog_loaded", path=str(path), entries=len(catalog))
    return catalog
