"""Shared test fixtures."""

import json
import tempfile
from pathlib import Path

import pytest
from helpers import CATALOG_DATA, RecordingTelemetry

from typingsync.catalog import TypingsCatalog
from typingsync.config import SyncConfig
from typingsync.installer import BundledTypingsInstaller


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as d:
        yield Path(d).resolve()


@pytest.fixture
def catalog():
    return TypingsCatalog.from_dict(CATALOG_DATA)


@pytest.fixture
def catalog_file(temp_dir):
    path = temp_dir / "pluginTypings.json"
    path.write_text(json.dumps(CATALOG_DATA))
    return path


@pytest.fixture
def bundle_dir(temp_dir):
    """Bundled typings source with a file for every catalog entry."""
    bundle = temp_dir / "bundle"
    for entry in CATALOG_DATA.values():
        path = bundle / entry["typingFile"]
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"// bundled {entry['typingFile']}\n")
    return bundle


@pytest.fixture
def project(temp_dir):
    """Empty Cordova project (config.xml only)."""
    root = temp_dir / "app"
    root.mkdir()
    (root / "config.xml").write_text('<?xml version="1.0"?><widget id="io.test.app"/>')
    return root


@pytest.fixture
def telemetry():
    return RecordingTelemetry()


@pytest.fixture
def installer(bundle_dir, telemetry):
    return BundledTypingsInstaller(bundle_dir, telemetry)


@pytest.fixture
def config(catalog_file, bundle_dir):
    """Test configuration pointing at the temp catalog and bundle."""
    return SyncConfig(
        log_level="DEBUG",
        poll_interval=0.05,
        catalog_path=catalog_file,
        typings_source_dir=bundle_dir,
        telemetry_enabled=True,
    )
