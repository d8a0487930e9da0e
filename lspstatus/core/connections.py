"""
Connections — Per-document language server connections

Each virtual document talks to its language server over its own
connection. A connection goes through two phases: the link is
established (connected), then the initialize handshake completes
(initialized). Either flag can be reset when the registry force-closes
a connection.

ConnectionRegistry is the authoritative list of documents the connection
layer knows about. It may lag behind or run ahead of the document tree
while connections are opened and torn down, and a connection can outlive
its document for a grace period after the document is closed.

Any object offering the same read-side surface (documents, connections
and the five signals) can stand in for ConnectionRegistry.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from .documents import VirtualDocument
from .signals import Signal

logger = logging.getLogger(__name__)


# Registry channels, in the order they are subscribed
REGISTRY_SIGNALS = (
    "connected",
    "initialized",
    "disconnected",
    "closed",
    "documents_changed",
)


@dataclass
class Connection:
    """Connection state for one document."""
    id_path: str
    connected: bool = False
    initialized: bool = False

    @property
    def is_ready(self) -> bool:
        return self.connected and self.initialized


class ConnectionRegistry:
    """
    In-memory registry of documents and their connections.

    Mutators emit the matching signal after the state change, so slots
    always read the new state.
    """

    def __init__(self):
        self.documents: Dict[str, VirtualDocument] = {}
        self.connections: Dict[str, Connection] = {}

        self.connected = Signal("connected")
        self.initialized = Signal("initialized")
        self.disconnected = Signal("disconnected")
        self.closed = Signal("closed")
        self.documents_changed = Signal("documents_changed")

    # -------------------------------------------------------------------------
    # Documents
    # -------------------------------------------------------------------------

    def register_document(self, document: VirtualDocument) -> None:
        """Start tracking a document. Re-registering an id_path replaces it."""
        self.documents[document.id_path] = document
        self.documents_changed.emit()

    def unregister_document(self, id_path: str) -> bool:
        """
        Stop tracking a document. Its connection, if any, is left open
        until closed explicitly.
        """
        if self.documents.pop(id_path, None) is None:
            return False
        self.documents_changed.emit()
        return True

    # -------------------------------------------------------------------------
    # Connection lifecycle
    # -------------------------------------------------------------------------

    def get(self, id_path: str) -> Optional[Connection]:
        return self.connections.get(id_path)

    def connect(self, id_path: str) -> Connection:
        """Mark the connection for id_path as established, creating it if needed."""
        connection = self.connections.get(id_path)
        if connection is None:
            connection = Connection(id_path=id_path)
            self.connections[id_path] = connection
        connection.connected = True
        logger.debug("Connected %s", id_path)
        self.connected.emit()
        return connection

    def mark_initialized(self, id_path: str) -> Connection:
        """
        Record a completed initialize handshake.

        Raises:
            KeyError: If no connection exists for id_path
        """
        connection = self.connections[id_path]
        connection.initialized = True
        logger.debug("Initialized %s", id_path)
        self.initialized.emit()
        return connection

    def disconnect(self, id_path: str) -> bool:
        """
        Drop the link but keep the connection entry.

        The initialized flag is left as is; it is cleared when the
        connection is closed.
        """
        connection = self.connections.get(id_path)
        if connection is None:
            return False
        connection.connected = False
        logger.debug("Disconnected %s", id_path)
        self.disconnected.emit()
        return True

    def close(self, id_path: str) -> bool:
        """Tear the connection down and forget it."""
        if self.connections.pop(id_path, None) is None:
            return False
        logger.debug("Closed %s", id_path)
        self.closed.emit()
        return True

    def signals(self) -> Dict[str, Signal]:
        """Registry channels by name."""
        return {name: getattr(self, name) for name in REGISTRY_SIGNALS}
