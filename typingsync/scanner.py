"""
Declared Typings Scanner - What typing files are on disk right now.

Scans the Cordova (primary) and Ionic (secondary) plugin typings folders.
The result is always a fresh snapshot; nothing is remembered between passes.
"""

import asyncio
from pathlib import Path

import structlog

from .paths import relative_typing_id
from .project import ProjectLayout

__all__ = ["DeclaredTypingsScanner"]

logger = structlog.get_logger(__name__)


class DeclaredTypingsScanner:
    """Lists materialized typing identifiers for a project.

    Example:
        scanner = DeclaredTypingsScanner()
        current = await scanner.scan(ProjectLayout.for_root(root))
        # ["cordova/plugins/Camera.d.ts", "cordova-ionic/plugins/keyboard.d.ts"]
    """

    async def scan(self, layout: ProjectLayout) -> list[str]:
        """Scan both folders.

        Returns [] without touching the secondary folder when the primary
        folder does not exist (nothing has been installed yet).
        """
        if not layout.cordova_plugin_typings.exists():
            logger.debug("primary_typings_folder_missing", path=str(layout.cordova_plugin_typings))
            return []

        cordova, ionic = await asyncio.gather(
            asyncio.to_thread(self._list_folder, layout.typings_dir, layout.cordova_plugin_typings),
            asyncio.to_thread(self._list_folder, layout.typings_dir, layout.ionic_plugin_typings),
        )
        return cordova + ionic

    def _list_folder(self, target_dir: Path, folder: Path) -> list[str]:
        """List files in one folder; read failures count as an empty folder."""
        try:
            files = [entry for entry in sorted(folder.iterdir()) if entry.is_file()]
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.warning("typings_folder_read_failed", path=str(folder), error=str(e))
            return []

        return [relative_typing_id(target_dir, entry) for entry in files]
