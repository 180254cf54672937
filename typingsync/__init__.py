"""
cordova-typings-sync - Keep Cordova plugin type declarations in sync.

Watches a Cordova project's plugins/fetch.json and installs or removes the
matching TypeScript declaration files under .vscode/typings so editors see
exactly the plugins the project uses.
"""

__version__ = "1.0.0"

from .config import SyncConfig, config

__all__ = [
    "__version__",
    "SyncConfig",
    "config",
]
