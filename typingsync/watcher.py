"""
Manifest Watcher - Re-run reconciliation when plugins/fetch.json changes.

Cordova rewrites plugins/fetch.json whenever a plugin is added or removed,
so watching that one file is enough.

Features:
- Periodic manifest hash checking (configurable interval)
- Created / changed / deleted classification
- One reconciliation pass per event, run by a single consumer so passes
  for the project never overlap
- External event sources can inject events with notify()
"""

import asyncio
import hashlib
from enum import Enum
from pathlib import Path

import structlog

from .events import EventBus
from .project import ProjectLayout
from .reconciler import ReconcileResult, TypingsReconciler

__all__ = ["ManifestEvent", "ManifestTracker", "ManifestWatcher"]

logger = structlog.get_logger(__name__)


class ManifestEvent(str, Enum):
    """Kind of change observed on the manifest file."""

    CREATED = "created"
    CHANGED = "changed"
    DELETED = "deleted"


class ManifestTracker:
    """Tracks the manifest content hash for change detection."""

    def __init__(self, manifest_path: Path) -> None:
        self._path = manifest_path
        self._hash: str | None = None

    @property
    def path(self) -> Path:
        return self._path

    def compute_hash(self) -> str | None:
        """Hash of the manifest content, None if it doesn't exist."""
        try:
            content = self._path.read_bytes()
        except FileNotFoundError:
            return None
        return hashlib.sha256(content).hexdigest()[:16]

    def prime(self) -> None:
        """Record the current state without reporting it as a change."""
        self._hash = self.compute_hash()

    def poll(self) -> ManifestEvent | None:
        """Compare with the last seen state and return the change, if any."""
        new_hash = self.compute_hash()
        old_hash = self._hash
        self._hash = new_hash

        if new_hash == old_hash:
            return None
        if old_hash is None:
            return ManifestEvent.CREATED
        if new_hash is None:
            return ManifestEvent.DELETED
        return ManifestEvent.CHANGED


class ManifestWatcher:
    """Watches one project's plugin manifest and triggers reconciliation.

    Example:
        watcher = ManifestWatcher(root, reconciler, poll_interval=1.0)
        await watcher.start()
        ...
        await watcher.stop()
    """

    def __init__(
        self,
        root: Path | str,
        reconciler: TypingsReconciler,
        poll_interval: float = 1.0,
        bus: EventBus | None = None,
    ) -> None:
        self._layout = ProjectLayout.for_root(root)
        self._reconciler = reconciler
        self._poll_interval = poll_interval
        self._bus = bus
        self._tracker = ManifestTracker(self._layout.fetch_json)
        self._queue: asyncio.Queue[ManifestEvent] = asyncio.Queue()
        self._running = False
        self._poll_task: asyncio.Task | None = None
        self._consumer_task: asyncio.Task | None = None
        self._passes = 0
        self._last_result: ReconcileResult | None = None

    @property
    def root(self) -> Path:
        return self._layout.root

    @property
    def running(self) -> bool:
        return self._running

    @property
    def passes(self) -> int:
        """Reconciliation passes run so far."""
        return self._passes

    @property
    def last_result(self) -> ReconcileResult | None:
        return self._last_result

    async def start(self) -> None:
        """Start polling and the reconciliation consumer."""
        if self._running:
            return

        self._tracker.prime()
        self._running = True
        self._consumer_task = asyncio.create_task(self._consume_loop())
        self._poll_task = asyncio.create_task(self._poll_loop())
        logger.info(
            "manifest_watch_started",
            path=str(self._tracker.path),
            interval=self._poll_interval,
        )

    async def stop(self) -> None:
        """Stop polling. A pass in progress is cancelled with the consumer."""
        self._running = False
        for task in (self._poll_task, self._consumer_task):
            if task is None:
                continue
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._poll_task = None
        self._consumer_task = None
        logger.info("manifest_watch_stopped", path=str(self._tracker.path))

    def notify(self, kind: ManifestEvent = ManifestEvent.CHANGED) -> None:
        """Queue a manifest event; each queued event causes one pass."""
        self._queue.put_nowait(kind)

    async def wait_idle(self) -> None:
        """Wait until every queued event has been reconciled."""
        await self._queue.join()

    async def check_once(self) -> ManifestEvent | None:
        """Poll the manifest once and queue the change, if any."""
        event = await asyncio.to_thread(self._tracker.poll)
        if event is not None:
            logger.info("manifest_event", kind=event.value, path=str(self._tracker.path))
            if self._bus is not None:
                await self._bus.emit(
                    "watcher",
                    f"manifest.{event.value}",
                    {"root": str(self.root), "path": str(self._tracker.path)},
                )
            self.notify(event)
        return event

    async def _poll_loop(self) -> None:
        while self._running:
            try:
                await asyncio.sleep(self._poll_interval)
                await self.check_once()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("manifest_watch_error", error=str(e))

    async def _consume_loop(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                self._last_result = await self._reconciler.reconcile(self.root)
                self._passes += 1
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error("reconcile_failed", kind=event.value, error=str(e))
            finally:
                self._queue.task_done()
