"""
Core — Data layer

- Documents: virtual document tree and traversal
- Connections: per-document connection registry
- Sessions: language server session catalog
- Signals: payload-free change notifications
- Snapshot: load a tree and its connections from a file
"""

from .signals import Signal
from .documents import VirtualDocument, collect_documents, collect_languages, DEFAULT_MAX_DEPTH
from .connections import Connection, ConnectionRegistry, REGISTRY_SIGNALS
from .sessions import ServerSession, SessionCatalog, CatalogFormatError
from .snapshot import SnapshotError, load_snapshot, snapshot_from_dict

__all__ = [
    "Signal",
    "VirtualDocument", "collect_documents", "collect_languages", "DEFAULT_MAX_DEPTH",
    "Connection", "ConnectionRegistry", "REGISTRY_SIGNALS",
    "ServerSession", "SessionCatalog", "CatalogFormatError",
    "SnapshotError", "load_snapshot", "snapshot_from_dict",
]
