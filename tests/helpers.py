"""Test doubles and project builders shared across test modules."""

import json
from pathlib import Path

from typingsync.contracts import InstallResult, TelemetryEvent
from typingsync.project import ProjectLayout

CATALOG_DATA = {
    "cordova": {"typingFile": "cordova/cordova.d.ts"},
    "cordova-plugin-camera": {"typingFile": "cordova/plugins/Camera.d.ts"},
    "cordova-plugin-device": {"typingFile": "cordova/plugins/Device.d.ts"},
    "ionic-plugin-keyboard": {"typingFile": "cordova-ionic/plugins/keyboard.d.ts"},
}


class RecordingTelemetry:
    """Telemetry sink that keeps every event."""

    def __init__(self):
        self.events: list[TelemetryEvent] = []

    def send(self, event):
        self.events.append(event)

    def named(self, name):
        return [e for e in self.events if e.name == name]


class FailingTelemetry:
    """Telemetry sink whose transport is down."""

    def send(self, event):
        raise RuntimeError("sink down")


class RecordingInstaller:
    """Installer double that records calls and writes empty files."""

    def __init__(self):
        self.calls: list[tuple[Path, list[str]]] = []

    def install(self, target_dir, typing_files):
        self.calls.append((target_dir, list(typing_files)))
        result = InstallResult()
        for typing_file in typing_files:
            dest = target_dir / typing_file
            if dest.exists():
                result.skipped.append(typing_file)
                continue
            dest.parent.mkdir(parents=True, exist_ok=True)
            dest.write_text("")
            result.installed.append(typing_file)
        return result


def write_fetch_json(root: Path, plugins: list[str]) -> Path:
    """Write plugins/fetch.json the way Cordova does (keyed by plugin id)."""
    fetch_json = ProjectLayout.for_root(root).fetch_json
    fetch_json.parent.mkdir(parents=True, exist_ok=True)
    data = {plugin: {"source": {"type": "registry", "id": plugin}, "is_top_level": True} for plugin in plugins}
    fetch_json.write_text(json.dumps(data, indent=4))
    return fetch_json


def materialize(root: Path, typing_files: list[str]) -> None:
    """Create typing files under the project's typings directory."""
    typings_dir = ProjectLayout.for_root(root).typings_dir
    for typing_file in typing_files:
        path = typings_dir / typing_file
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"// {typing_file}\n")


def materialized(root: Path) -> set[str]:
    """All typing files currently under the typings directory."""
    typings_dir = ProjectLayout.for_root(root).typings_dir
    if not typings_dir.exists():
        return set()
    return {p.relative_to(typings_dir).as_posix() for p in typings_dir.rglob("*") if p.is_file()}
