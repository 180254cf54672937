"""
Typings Reconciler - Keep a project's typing files in line with its plugins.

One pass:
1. Read installed plugins from plugins/fetch.json
2. Map them through the catalog (plus the host runtime typings)
3. Snapshot the typing files on disk
4. Install what is missing and delete what is stale, both computed from
   the same snapshot

Nothing is remembered between passes, so a pass after a crash or a manual
edit simply converges again. Passes for the same project root never overlap.
"""

import asyncio
import weakref
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from .catalog import TypingsCatalog
from .contracts import (
    CatalogError,
    CatalogNotFoundError,
    InstallResult,
    ManifestReadError,
    TelemetryEvent,
    TelemetrySinkProtocol,
    TypingsInstallerProtocol,
)
from .events import EventBus
from .project import ProjectLayout, read_installed_plugins
from .scanner import DeclaredTypingsScanner
from .telemetry import NullTelemetry

__all__ = ["ReconcilePlan", "ReconcileResult", "TypingsReconciler"]

logger = structlog.get_logger(__name__)


@dataclass
class ReconcilePlan:
    """Set differences for one pass, before any side effect."""

    desired: set[str] = field(default_factory=set)
    current: set[str] = field(default_factory=set)
    unknown_plugins: list[str] = field(default_factory=list)
    bootstrap: bool = False

    @property
    def to_install(self) -> list[str]:
        return sorted(self.desired - self.current)

    @property
    def to_remove(self) -> list[str]:
        # Bootstrap passes never delete
        if self.bootstrap:
            return []
        return sorted(self.current - self.desired)


@dataclass
class ReconcileResult:
    """What one pass did.

    Attributes:
        root: Project root the pass ran for
        installed: Typing files written
        removed: Stale typing files deleted
        failed: Stale typing file -> reason it could not be deleted
        install_failed: Typing file -> reason it could not be installed
        unknown_plugins: Installed plugins without catalog entry
        bootstrap: Primary typings folder did not exist yet
        aborted: Pass stopped before touching the filesystem
        error: Reason for an aborted pass
    """

    root: Path
    installed: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)
    install_failed: dict[str, str] = field(default_factory=dict)
    unknown_plugins: list[str] = field(default_factory=list)
    bootstrap: bool = False
    aborted: bool = False
    error: str | None = None

    @property
    def changed(self) -> bool:
        return bool(self.installed or self.removed)

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": str(self.root),
            "installed": self.installed,
            "removed": self.removed,
            "failed": self.failed,
            "install_failed": self.install_failed,
            "unknown_plugins": self.unknown_plugins,
            "bootstrap": self.bootstrap,
            "aborted": self.aborted,
            "error": self.error,
        }


class TypingsReconciler:
    """Diffs installed plugins against materialized typings and applies it.

    Example:
        reconciler = TypingsReconciler(catalog, installer, telemetry)

        await reconciler.install_self_typings(root)
        result = await reconciler.reconcile(root)
        print(result.installed, result.removed)
    """

    def __init__(
        self,
        catalog: TypingsCatalog | None,
        installer: TypingsInstallerProtocol,
        telemetry: TelemetrySinkProtocol | None = None,
        scanner: DeclaredTypingsScanner | None = None,
        bus: EventBus | None = None,
    ) -> None:
        self._catalog = catalog
        self._installer = installer
        self._telemetry = telemetry or NullTelemetry()
        self._scanner = scanner or DeclaredTypingsScanner()
        self._bus = bus
        # Entries live only while a pass for that root holds the lock
        self._locks: weakref.WeakValueDictionary[Path, asyncio.Lock] = weakref.WeakValueDictionary()

    @property
    def catalog(self) -> TypingsCatalog | None:
        return self._catalog

    def _lock_for(self, root: Path) -> asyncio.Lock:
        lock = self._locks.get(root)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[root] = lock
        return lock

    async def install_self_typings(self, root: Path | str) -> InstallResult:
        """Install the host runtime typings, whatever plugins are installed."""
        layout = ProjectLayout.for_root(root)
        if self._catalog is None or self._catalog.self_typing is None:
            logger.warning("self_typings_unavailable", root=str(layout.root))
            return InstallResult()

        async with self._lock_for(layout.root):
            return await self._install(layout, [self._catalog.self_typing])

    async def plan(self, root: Path | str) -> ReconcilePlan:
        """Compute a pass without applying it.

        Raises:
            ManifestReadError: If installed plugins cannot be read
            CatalogNotFoundError: If no catalog is available
        """
        layout = ProjectLayout.for_root(root)
        async with self._lock_for(layout.root):
            return await self._plan(layout)

    async def reconcile(self, root: Path | str) -> ReconcileResult:
        """Run one reconciliation pass. Never raises for expected failures."""
        layout = ProjectLayout.for_root(root)
        async with self._lock_for(layout.root):
            result = await self._run_pass(layout)

        if self._bus is not None:
            await self._bus.emit("reconciler", "pass.completed", result.to_dict())
        return result

    async def _plan(self, layout: ProjectLayout) -> ReconcilePlan:
        if self._catalog is None:
            raise CatalogNotFoundError("plugin typings catalog is not available")

        installed = await asyncio.to_thread(read_installed_plugins, layout.root)
        desired, unknown = self._catalog.desired_for(installed)
        if self._catalog.self_typing is not None:
            desired.add(self._catalog.self_typing)

        if not layout.cordova_plugin_typings.exists():
            return ReconcilePlan(desired, set(), unknown, bootstrap=True)

        current = set(await self._scanner.scan(layout))
        return ReconcilePlan(desired, current, unknown)

    async def _run_pass(self, layout: ProjectLayout) -> ReconcileResult:
        result = ReconcileResult(layout.root)
        log = logger.bind(root=str(layout.root))

        try:
            plan = await self._plan(layout)
        except (CatalogError, ManifestReadError) as e:
            log.error("reconcile_aborted", error=str(e))
            result.aborted = True
            result.error = str(e)
            return result

        result.bootstrap = plan.bootstrap
        result.unknown_plugins = plan.unknown_plugins
        for plugin in plan.unknown_plugins:
            self._report_unknown_plugin(plugin)

        to_install = plan.to_install
        to_remove = plan.to_remove
        log.debug(
            "reconcile_planned",
            bootstrap=plan.bootstrap,
            to_install=to_install,
            to_remove=to_remove,
        )

        # Both sides come from the same snapshot and touch disjoint files
        install_result, (removed, failed) = await asyncio.gather(
            self._install(layout, to_install),
            asyncio.to_thread(self._remove, layout.typings_dir, to_remove),
        )

        result.installed = install_result.installed
        result.install_failed = install_result.failed
        result.removed = removed
        result.failed = failed

        if result.changed or result.failed or result.install_failed:
            log.info(
                "reconcile_completed",
                installed=len(result.installed),
                removed=len(result.removed),
                failed=len(result.failed) + len(result.install_failed),
            )
        else:
            log.debug("reconcile_completed_no_changes")
        return result

    async def _install(self, layout: ProjectLayout, typing_files: list[str]) -> InstallResult:
        if not typing_files:
            return InstallResult()

        try:
            target_dir = await asyncio.to_thread(layout.ensure_typings_dir)
            return await asyncio.to_thread(self._installer.install, target_dir, typing_files)
        except Exception as e:
            logger.error("typings_install_failed", root=str(layout.root), error=str(e))
            return InstallResult(failed={typing_file: str(e) for typing_file in typing_files})

    def _remove(self, target_dir: Path, typing_files: list[str]) -> tuple[list[str], dict[str, str]]:
        removed: list[str] = []
        failed: dict[str, str] = {}

        for typing_file in typing_files:
            file_to_delete = target_dir / typing_file
            try:
                file_to_delete.unlink()
            except OSError as e:
                logger.warning("typing_delete_failed", path=str(file_to_delete), error=str(e))
                failed[typing_file] = str(e)
                continue
            removed.append(typing_file)
            logger.debug("typing_removed", typing_file=typing_file)

        return removed, failed

    def _report_unknown_plugin(self, plugin: str) -> None:
        event = TelemetryEvent("unknownPlugin")
        event.set_pii_property("plugin", plugin)
        try:
            self._telemetry.send(event)
        except Exception as e:
            logger.warning("telemetry_send_failed", telemetry_event=event.name, error=str(e))
