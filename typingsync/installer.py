"""
Typings Installer - Copy bundled declaration files into a project.

Installs are idempotent: a typing file that already exists in the target
directory is left untouched, whatever its content. Each file is handled on
its own, so one missing bundle file never blocks the others.
"""

import shutil
from pathlib import Path

import structlog

from .contracts import InstallResult, TelemetryEvent, TelemetrySinkProtocol
from .paths import canonical_typing_id, resolve_typing_path

__all__ = ["BundledTypingsInstaller"]

logger = structlog.get_logger(__name__)


class BundledTypingsInstaller:
    """Installs typing files from a bundled source directory.

    Example:
        installer = BundledTypingsInstaller(config.typings_source_dir, telemetry)
        result = installer.install(layout.ensure_typings_dir(), ["cordova/cordova.d.ts"])
    """

    def __init__(self, source_dir: Path, telemetry: TelemetrySinkProtocol | None = None) -> None:
        self._source_dir = source_dir
        self._telemetry = telemetry

    @property
    def source_dir(self) -> Path:
        return self._source_dir

    def install(self, target_dir: Path, typing_files: list[str]) -> InstallResult:
        """Copy each typing file from the bundle unless already present."""
        result = InstallResult()

        for typing_file in typing_files:
            typing_id = canonical_typing_id(typing_file)
            try:
                src = resolve_typing_path(self._source_dir, typing_id)
                dest = resolve_typing_path(target_dir, typing_id)
            except ValueError as e:
                logger.warning("typing_path_rejected", typing_file=typing_file, error=str(e))
                result.failed[typing_id] = str(e)
                continue

            if dest.exists():
                result.skipped.append(typing_id)
                continue

            try:
                dest.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(src, dest)
            except FileNotFoundError:
                logger.warning("bundled_typing_missing", typing_file=typing_id, source=str(src))
                result.failed[typing_id] = "not in bundle"
                continue
            except OSError as e:
                logger.warning("typing_install_failed", typing_file=typing_id, error=str(e))
                result.failed[typing_id] = str(e)
                continue

            result.installed.append(typing_id)
            logger.debug("typing_installed", typing_file=typing_id, dest=str(dest))

        if result.installed:
            logger.info("typings_installed", count=len(result.installed), files=result.installed)
            if self._telemetry is not None:
                try:
                    self._telemetry.send(
                        TelemetryEvent("addTypings", {"addedTypeDefinitions": result.installed})
                    )
                except Exception as e:
                    logger.warning("telemetry_send_failed", telemetry_event="addTypings", error=str(e))

        return result
