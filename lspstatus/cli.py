"""
CLI — Command interface

    lspstatus status snapshot.yaml --catalog http://localhost:8888/lsp
    lspstatus status snapshot.yaml --catalog sessions.json --format json
    lspstatus config --set display.symbols ascii
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from .config import ConfigManager
from .presentation.symbols import get_symbols
from .commands.status import StatusCommand
from .commands.config_cmd import ConfigCommand
from . import __version__


class StatusCLI:
    """Shared resources for command handlers."""

    def __init__(self, project_dir: Path):
        self.project_dir = Path(project_dir)
        self.config_manager = ConfigManager(self.project_dir)
        self.config = self.config_manager.load()

        # Initialize symbols based on config
        self.symbols = get_symbols(self.config.display.symbols)

        # Command handlers
        self.status_cmd = StatusCommand(self)
        self.config_cmd = ConfigCommand(self)


def configure_logging(verbose: int = 0) -> None:
    """WARNING by default, INFO with -v, DEBUG with -vv."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv=None) -> int:
    """
    Main entry point for the lspstatus CLI.

    Parser definitions and dispatch logic are in individual command modules.
    """
    parser = argparse.ArgumentParser(
        description="lspstatus -- Language server connection status"
    )

    parser.add_argument(
        '--project', '-p',
        default=os.environ.get("LSPSTATUS_PROJECT_PATH", "."),
        help='Project directory holding .lspstatus/config.yaml (default: LSPSTATUS_PROJECT_PATH or current)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='count',
        default=0,
        help='Log more (-v info, -vv debug)'
    )
    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'lspstatus {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    from .commands import register_all, dispatch
    register_all(subparsers)

    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if not args.command:
        parser.print_help()
        return 0

    cli = StatusCLI(Path(args.project))

    try:
        return dispatch(args.command, cli, args) or 0
    except KeyError as e:
        print(f"Error: {e}")
        parser.print_help()
        return 2


if __name__ == '__main__':
    sys.exit(main())
