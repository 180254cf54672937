"""
CLI Main - Entry point for the `typings-sync` command.

Usage:
    typings-sync sync [PATH]        Run one reconciliation pass
    typings-sync status [PATH]      Show what a pass would change
    typings-sync watch [PATH]       Keep typings in sync until interrupted
    typings-sync catalog            List plugins with known typings
"""

import sys

from ..config import SyncConfig
from ..log import configure_logging
from .commands import run_command
from .output import print_error
from .parser import create_parser

__all__ = ["main"]


def main(args: list[str] | None = None) -> int:
    """Main entry point for the typings-sync CLI.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code
    """
    if args is None:
        args = sys.argv[1:]

    parser = create_parser()
    parsed = parser.parse_args(args)

    config = SyncConfig()
    configure_logging(parsed.log_level or config.log_level, config.log_format)

    if parsed.command is None:
        parser.print_help()
        return 0

    try:
        return run_command(parsed.command, parsed, config)
    except KeyboardInterrupt:
        return 130
    except Exception as e:
        print_error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
