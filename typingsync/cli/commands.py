"""
CLI Commands - Handlers for sync, status, watch and catalog.
"""

import argparse
import asyncio
from dataclasses import replace
from pathlib import Path

from ..catalog import load_catalog
from ..config import SyncConfig
from ..contracts import CatalogError, ManifestReadError
from ..events import init_event_bus
from ..lifecycle import SignalHandler
from ..project import ProjectLayout, find_project_root
from ..service import TypingsSyncService, build_reconciler
from ..telemetry import log_telemetry
from .output import print_catalog, print_error, print_json, print_plan, print_result

__all__ = ["COMMANDS", "run_command"]

COMMANDS = {"sync", "status", "watch", "catalog"}


def resolve_project_root(path: str | None) -> Path | None:
    """Find the Cordova project containing path (default: cwd)."""
    start = Path(path) if path else Path.cwd()
    root = find_project_root(start)
    if root is None:
        print_error(f"No Cordova project (config.xml) found at or above {start}")
    return root


def run_command(command: str, args: argparse.Namespace, config: SyncConfig) -> int:
    """Run the specified command.

    Returns:
        Exit code
    """
    if command == "catalog":
        return handle_catalog(args, config)

    root = resolve_project_root(args.path)
    if root is None:
        return 1

    if command == "sync":
        return asyncio.run(handle_sync(root, args, config))
    elif command == "status":
        return asyncio.run(handle_status(root, args, config))
    elif command == "watch":
        if args.interval is not None:
            config = replace(config, poll_interval=args.interval)
        return asyncio.run(handle_watch(root, config))

    print_error(f"Unknown command: {command}")
    return 1


def handle_catalog(args: argparse.Namespace, config: SyncConfig) -> int:
    catalog = load_catalog(config.catalog_path)
    if catalog is None:
        print_error(f"Typings catalog not available: {config.catalog_path}")
        return 1

    if args.json:
        print_json({entry.plugin: entry.typing_file for entry in catalog})
    else:
        print_catalog(catalog)
    return 0


async def handle_sync(root: Path, args: argparse.Namespace, config: SyncConfig) -> int:
    bus = init_event_bus()
    log_telemetry(bus)
    reconciler = build_reconciler(config, bus)
    if reconciler is None:
        print_error(f"Typings catalog not available: {config.catalog_path}")
        return 1

    await reconciler.install_self_typings(root)
    result = await reconciler.reconcile(root)
    await bus.drain()

    if args.json:
        print_json(result.to_dict())
    else:
        print_result(result)
    return 1 if result.aborted else 0


async def handle_status(root: Path, args: argparse.Namespace, config: SyncConfig) -> int:
    reconciler = build_reconciler(config, init_event_bus())
    if reconciler is None:
        print_error(f"Typings catalog not available: {config.catalog_path}")
        return 1

    try:
        plan = await reconciler.plan(root)
    except (CatalogError, ManifestReadError) as e:
        print_error(str(e))
        return 1

    typings_dir = ProjectLayout.for_root(root).typings_dir
    missing = [t for t in plan.to_install if not (typings_dir / t).exists()]

    if args.json:
        print_json({
            "root": str(root),
            "install": missing,
            "remove": plan.to_remove,
            "unknown_plugins": plan.unknown_plugins,
        })
    else:
        print_plan(root, plan, missing)
    return 0


async def handle_watch(root: Path, config: SyncConfig) -> int:
    bus = init_event_bus()
    log_telemetry(bus)
    service = TypingsSyncService(root, config, bus=bus)
    if not await service.activate():
        print_error(f"Typings catalog not available: {config.catalog_path}")
        return 1

    handler = SignalHandler()
    handler.register_async(service.deactivate)
    handler.setup()
    print(f"Watching {ProjectLayout.for_root(root).fetch_json} (Ctrl+C to stop)")
    await handler.wait_for_shutdown()
    return 0
