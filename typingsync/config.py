"""
Centralized configuration for cordova-typings-sync.

Configuration sources (priority order):
1. Environment variables (TYPINGS_*)
2. Default values

Environment variables:
- TYPINGS_LOG_LEVEL: Log level (default: INFO)
- TYPINGS_LOG_FORMAT: "console" or "json" (default: console)
- TYPINGS_POLL_INTERVAL: Seconds between manifest checks (default: 1.0)
- TYPINGS_CATALOG_PATH: Plugin typings catalog (default: packaged pluginTypings.json)
- TYPINGS_SOURCE_DIR: Bundled declaration files (default: packaged typings/)
- TYPINGS_TELEMETRY: Publish telemetry events (default: true)
"""

import os
from dataclasses import dataclass
from pathlib import Path

__all__ = ["SyncConfig", "config", "DATA_DIR", "DEFAULT_CATALOG_PATH", "DEFAULT_SOURCE_DIR"]

DATA_DIR = Path(__file__).parent / "data"
DEFAULT_CATALOG_PATH = DATA_DIR / "pluginTypings.json"
DEFAULT_SOURCE_DIR = DATA_DIR / "typings"


def _get_env(key: str, default: str) -> str:
    """Get environment variable with TYPINGS_ prefix."""
    return os.environ.get(f"TYPINGS_{key}", default)


def _get_env_float(key: str, default: float) -> float:
    """Get float environment variable."""
    return float(_get_env(key, str(default)))


def _get_env_bool(key: str, default: bool) -> bool:
    """Get boolean environment variable."""
    val = os.environ.get(f"TYPINGS_{key}")
    if val is None:
        return default
    return val.lower() in ("true", "1", "yes", "on")


def _get_env_path(key: str, default: Path) -> Path:
    """Get path environment variable."""
    val = os.environ.get(f"TYPINGS_{key}")
    return Path(val) if val else default


@dataclass(frozen=True)
class SyncConfig:
    """Immutable sync configuration."""

    log_level: str = _get_env("LOG_LEVEL", "INFO")
    log_format: str = _get_env("LOG_FORMAT", "console")

    # Manifest polling
    poll_interval: float = _get_env_float("POLL_INTERVAL", 1.0)

    catalog_path: Path = _get_env_path("CATALOG_PATH", DEFAULT_CATALOG_PATH)
    typings_source_dir: Path = _get_env_path("SOURCE_DIR", DEFAULT_SOURCE_DIR)

    telemetry_enabled: bool = _get_env_bool("TELEMETRY", True)


# Global singleton
config = SyncConfig()
