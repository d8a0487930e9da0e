"""
ConfigCommand — Show and change configuration
"""

from ..commands.base import BaseCommand


class ConfigCommand(BaseCommand):
    """Command for configuration display and modification."""

    def show_config(self):
        print(self.config_manager.display())
        return 0

    def set_config(self, key: str, value: str, scope: str = "project") -> int:
        """
        Set a configuration value.

        Args:
            key: Dot-separated key (e.g., "catalog.url")
            value: Value to set
            scope: "project" or "user"
        """
        error = self.config_manager.set(key, value, scope)
        if error:
            print(f"Error: {error}")
            return 1

        print(f"Set {key} = {value} ({scope})")
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND_NAME = 'config'


def register_parser(subparsers):
    """Register config command parser."""
    p = subparsers.add_parser('config', help='Show or set configuration')
    p.add_argument('--set', nargs=2, metavar=('KEY', 'VALUE'),
                   help='Set a value (e.g., --set catalog.url http://host:8888/lsp)')
    p.add_argument('--user', action='store_true',
                   help='Write to user config instead of project config')
    return p


def handle(cli, args):
    """Handle config command dispatch."""
    if getattr(args, 'set', None):
        key, value = args.set
        scope = "user" if args.user else "project"
        return cli.config_cmd.set_config(key, value, scope)
    return cli.config_cmd.show_config()
