"""
Sync Service - Wires catalog, installer, reconciler and watcher for a project.

Activation mirrors what an editor does when it opens a Cordova project:
load the catalog once, install the host runtime typings, bring plugin typings
up to date, then keep them in sync as plugins come and go.
"""

from pathlib import Path

import structlog

from .catalog import load_catalog
from .config import SyncConfig
from .events import EventBus, get_event_bus
from .installer import BundledTypingsInstaller
from .project import ProjectLayout
from .reconciler import ReconcileResult, TypingsReconciler
from .telemetry import EventBusTelemetry, NullTelemetry
from .watcher import ManifestWatcher

__all__ = ["TypingsSyncService", "build_reconciler"]

logger = structlog.get_logger(__name__)


def build_reconciler(config: SyncConfig, bus: EventBus | None = None) -> TypingsReconciler | None:
    """Create a reconciler from configuration.

    Returns None when the catalog is unavailable; typings support is then
    disabled and no reconciliation should run.
    """
    catalog = load_catalog(config.catalog_path)
    if catalog is None:
        return None

    bus = bus or get_event_bus()
    telemetry = EventBusTelemetry(bus) if config.telemetry_enabled else NullTelemetry()
    installer = BundledTypingsInstaller(config.typings_source_dir, telemetry)
    return TypingsReconciler(catalog, installer, telemetry, bus=bus)


class TypingsSyncService:
    """Keeps one project's typings in sync for as long as it is active.

    Example:
        service = TypingsSyncService(root, config)
        if await service.activate():
            ...
            await service.deactivate()
    """

    def __init__(
        self,
        root: Path | str,
        config: SyncConfig,
        bus: EventBus | None = None,
        reconciler: TypingsReconciler | None = None,
    ) -> None:
        self._layout = ProjectLayout.for_root(root)
        self._config = config
        self._bus = bus or get_event_bus()
        self._reconciler = reconciler
        self._watcher: ManifestWatcher | None = None

    @property
    def root(self) -> Path:
        return self._layout.root

    @property
    def watcher(self) -> ManifestWatcher | None:
        return self._watcher

    @property
    def active(self) -> bool:
        return self._watcher is not None and self._watcher.running

    async def activate(self) -> bool:
        """Install initial typings and start watching.

        Returns:
            False if typings support is unavailable (catalog missing)
        """
        if self.active:
            return True

        if self._reconciler is None:
            self._reconciler = build_reconciler(self._config, self._bus)
        if self._reconciler is None:
            logger.warning("typings_sync_disabled", root=str(self.root))
            return False

        await self._reconciler.install_self_typings(self.root)
        initial: ReconcileResult = await self._reconciler.reconcile(self.root)

        self._watcher = ManifestWatcher(
            self.root,
            self._reconciler,
            poll_interval=self._config.poll_interval,
            bus=self._bus,
        )
        await self._watcher.start()

        logger.info(
            "typings_sync_activated",
            root=str(self.root),
            installed=len(initial.installed),
            removed=len(initial.removed),
        )
        return True

    async def deactivate(self) -> None:
        """Stop watching. Typing files stay where they are."""
        if self._watcher is not None:
            await self._watcher.stop()
            self._watcher = None
        await self._bus.drain()
        logger.info("typings_sync_deactivated", root=str(self.root))
