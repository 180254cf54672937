"""
Project Layout - Where a Cordova project keeps plugins and typings.

    <root>/config.xml                         marks the project root
    <root>/plugins/fetch.json                 installed plugins manifest
    <root>/.vscode/typings/                   typings target directory
        cordova/plugins/                      Cordova plugin typings (primary)
        cordova-ionic/plugins/                Ionic plugin typings (secondary)
"""

import json
from dataclasses import dataclass
from pathlib import Path

import structlog

from .contracts import ManifestReadError

__all__ = [
    "CONFIG_XML_FILENAME",
    "PLUGINS_FETCH_FILENAME",
    "ProjectLayout",
    "find_project_root",
    "read_installed_plugins",
]

logger = structlog.get_logger(__name__)

CONFIG_XML_FILENAME = "config.xml"
PLUGINS_FOLDERNAME = "plugins"
PLUGINS_FETCH_FILENAME = "fetch.json"
VSCODE_FOLDERNAME = ".vscode"
TYPINGS_FOLDERNAME = "typings"
TYPINGS_CORDOVA_FOLDERNAME = "cordova"
TYPINGS_CORDOVA_IONIC_FOLDERNAME = "cordova-ionic"
TYPINGS_PLUGINS_FOLDERNAME = "plugins"


@dataclass(frozen=True)
class ProjectLayout:
    """Resolved paths for one project root."""

    root: Path

    @classmethod
    def for_root(cls, root: Path | str) -> "ProjectLayout":
        return cls(Path(root).resolve())

    @property
    def plugins_dir(self) -> Path:
        return self.root / PLUGINS_FOLDERNAME

    @property
    def fetch_json(self) -> Path:
        """Plugin manifest; changes here mean plugins were added or removed."""
        return self.plugins_dir / PLUGINS_FETCH_FILENAME

    @property
    def typings_dir(self) -> Path:
        """Target directory every typing file is installed under."""
        return self.root / VSCODE_FOLDERNAME / TYPINGS_FOLDERNAME

    @property
    def cordova_plugin_typings(self) -> Path:
        return self.typings_dir / TYPINGS_CORDOVA_FOLDERNAME / TYPINGS_PLUGINS_FOLDERNAME

    @property
    def ionic_plugin_typings(self) -> Path:
        return self.typings_dir / TYPINGS_CORDOVA_IONIC_FOLDERNAME / TYPINGS_PLUGINS_FOLDERNAME

    def ensure_typings_dir(self) -> Path:
        """Create the typings target directory if needed and return it."""
        self.typings_dir.mkdir(parents=True, exist_ok=True)
        return self.typings_dir


def find_project_root(start: Path | str) -> Path | None:
    """Walk up from start to the first directory containing config.xml."""
    current = Path(start).resolve()
    if current.is_file():
        current = current.parent

    for candidate in (current, *current.parents):
        if (candidate / CONFIG_XML_FILENAME).is_file():
            return candidate

    logger.debug("project_root_not_found", start=str(start))
    return None


def read_installed_plugins(root: Path | str) -> list[str]:
    """List installed plugin identifiers from plugins/fetch.json.

    A missing manifest means no plugins are installed.

    Raises:
        ManifestReadError: If the manifest exists but cannot be read or parsed
    """
    manifest_path = ProjectLayout.for_root(root).fetch_json

    try:
        with open(manifest_path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.debug("plugin_manifest_missing", path=str(manifest_path))
        return []
    except json.JSONDecodeError as e:
        raise ManifestReadError(manifest_path, f"invalid JSON: {e}") from e
    except UnicodeDecodeError as e:
        raise ManifestReadError(manifest_path, f"not UTF-8: {e}") from e
    except OSError as e:
        raise ManifestReadError(manifest_path, str(e)) from e

    if not isinstance(data, dict):
        raise ManifestReadError(manifest_path, f"expected an object, got {type(data).__name__}")

    plugins = list(data.keys())
    logger.debug("installed_plugins_loaded", count=len(plugins), plugins=plugins)
    return plugins
