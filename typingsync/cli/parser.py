"""
CLI Parser - Argument parser for the typings-sync command.

Defines all subcommands and their arguments.
"""

import argparse

from .. import __version__

__all__ = ["create_parser"]


def _add_project_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="Project directory or any directory inside it (default: current directory)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="typings-sync",
        description="Keep Cordova plugin type declarations in sync with installed plugins",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: TYPINGS_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # sync
    sync_parser = subparsers.add_parser("sync", help="Run one reconciliation pass")
    _add_project_argument(sync_parser)

    # status
    status_parser = subparsers.add_parser("status", help="Show what a pass would change")
    _add_project_argument(status_parser)

    # watch
    watch_parser = subparsers.add_parser("watch", help="Watch plugins/fetch.json and stay in sync")
    _add_project_argument(watch_parser)
    watch_parser.add_argument(
        "-i", "--interval",
        type=float,
        default=None,
        help="Seconds between manifest checks (default: TYPINGS_POLL_INTERVAL or 1.0)",
    )

    # catalog
    subparsers.add_parser("catalog", help="List plugins with known typings")

    return parser
