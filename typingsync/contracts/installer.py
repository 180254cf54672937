"""
Installer Protocol - Contract for materializing declaration files.

The reconciler decides WHICH typing files a project needs; an installer
decides HOW they end up on disk (copy from a bundle, download, symlink).
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable

__all__ = ["InstallResult", "TypingsInstallerProtocol"]


@dataclass
class InstallResult:
    """Outcome of one install call.

    Attributes:
        installed: Typing files written by this call
        skipped: Typing files already present (idempotent no-op)
        failed: Typing file -> reason for files that could not be written
    """

    installed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)


@runtime_checkable
class TypingsInstallerProtocol(Protocol):
    """Ensures declaration files exist under a target directory.

    Installing a typing file that is already present must be a no-op,
    never an error.

    Example:
        class BundleInstaller:
            def install(self, target_dir, typing_files):
                for typing_file in typing_files:
                    dest = target_dir / typing_file
                    if not dest.exists():
                        shutil.copyfile(self._bundle / typing_file, dest)
                return InstallResult(installed=list(typing_files))
    """

    def install(self, target_dir: Path, typing_files: list[str]) -> InstallResult:
        """Install typing files (relative to target_dir)."""
        ...
