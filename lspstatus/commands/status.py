"""
StatusCommand — Show connection status for a document snapshot

Loads a snapshot (document tree + connection flags), fetches the server
catalog, and prints what the status bar and its popup would show.
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

from ..commands.base import BaseCommand
from ..core.snapshot import SnapshotError, load_snapshot
from ..model import AggregationModel, StatusView
from ..presentation.symbols import safe_print
from ..presentation.template import render_status_view
from ..services.catalog import get_fetcher


class StatusCommand(BaseCommand):
    """Command for displaying aggregated connection status."""

    def build_view(self, snapshot: Path, catalog: Optional[str] = None) -> StatusView:
        """
        Load the snapshot and catalog and compute the status view.

        Raises:
            SnapshotError: If the snapshot cannot be loaded
        """
        max_depth = self.config.traversal.max_depth
        root, registry = load_snapshot(snapshot, max_depth=max_depth)

        model = AggregationModel(max_depth=max_depth)
        model.attach(root, registry)

        fetcher = get_fetcher(catalog or self.config.catalog.url, timeout=self.config.catalog.timeout)
        asyncio.run(model.load_catalog(fetcher))

        return model.view()

    def status(self, snapshot: Path, catalog: Optional[str] = None,
               full: bool = False, format: Optional[str] = None) -> int:
        """
        Print status for a snapshot.

        Args:
            snapshot: Snapshot file (YAML or JSON)
            catalog: Catalog URL or file (config catalog.url if None)
            full: If True, expand collapsed sections
            format: "auto" or "json" (config display.format if None)

        Returns:
            Exit code
        """
        try:
            view = self.build_view(snapshot, catalog)
        except SnapshotError as e:
            print(f"Error: {e}")
            return 1

        format = format or self.config.display.format
        if format == "json":
            print(json.dumps(view.to_dict(), indent=2))
        else:
            safe_print(render_status_view(view, symbols=self.symbols, full=full))
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

def register_parser(subparsers):
    """Register status command parser."""
    p = subparsers.add_parser(
        'status',
        help='Show language server status for a document snapshot',
        description='Aggregate connection state of a document tree and its embedded '
                    'documents, and match their languages against available servers.'
    )
    p.add_argument('snapshot', type=Path,
                   help='Snapshot file describing documents and connections (YAML or JSON)')
    p.add_argument('--catalog', '-c',
                   help='Catalog URL or file (default: catalog.url from config)')
    p.add_argument('--full', action='store_true',
                   help='Expand collapsed sections')
    p.add_argument('--format', '-f', choices=['auto', 'json'],
                   help='Output format (overrides config)')
    return p


def handle(cli, args):
    """Handle status command dispatch."""
    return cli.status_cmd.status(
        snapshot=args.snapshot,
        catalog=getattr(args, 'catalog', None),
        full=getattr(args, 'full', False),
        format=getattr(args, 'format', None),
    )
