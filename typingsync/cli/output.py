"""
CLI Output - Human-readable and JSON rendering of results.
"""

import json
import sys
from typing import Any

from ..catalog import TypingsCatalog
from ..reconciler import ReconcilePlan, ReconcileResult

__all__ = ["print_catalog", "print_error", "print_json", "print_plan", "print_result"]


def print_error(message: str) -> None:
    """Print error message to stderr."""
    print(f"Error: {message}", file=sys.stderr)


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, sort_keys=True))


def print_result(result: ReconcileResult) -> None:
    """Pretty-print what a pass did."""
    print(f"Project: {result.root}")
    if result.aborted:
        print(f"  Aborted: {result.error}")
        return

    if result.bootstrap:
        print("  First run: typings folder created")
    for typing_file in result.installed:
        print(f"  + {typing_file}")
    for typing_file in result.removed:
        print(f"  - {typing_file}")
    for typing_file, reason in sorted({**result.install_failed, **result.failed}.items()):
        print(f"  ! {typing_file}: {reason}")
    if result.unknown_plugins:
        print(f"  Plugins without typings: {', '.join(result.unknown_plugins)}")
    if not result.changed:
        print("  Typings are up to date")


def print_plan(root: Any, plan: ReconcilePlan, to_install: list[str]) -> None:
    """Pretty-print pending changes (to_install: files actually missing)."""
    print(f"Project: {root}")
    to_remove = plan.to_remove
    for typing_file in to_install:
        print(f"  + {typing_file}")
    for typing_file in to_remove:
        print(f"  - {typing_file}")
    if plan.unknown_plugins:
        print(f"  Plugins without typings: {', '.join(plan.unknown_plugins)}")
    if not to_install and not to_remove:
        print("  Nothing to do")


def print_catalog(catalog: TypingsCatalog) -> None:
    width = max((len(entry.plugin) for entry in catalog), default=0)
    for entry in sorted(catalog, key=lambda e: e.plugin):
        print(f"{entry.plugin:<{width}}  {entry.typing_file}")
