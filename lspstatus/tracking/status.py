"""
Status — Reduce per-document connection state to one status code

Lifecycle of the aggregate:
    waiting      → No documents detected yet
    connecting   → At least one document has no established connection
    initializing → Every document connected, at least one not initialized
    initialized  → Every document connected and initialized

The status is never stored. It is recomputed from the registry on every
read, so it cannot drift from the connections it describes.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from ..core.connections import Connection
from ..core.documents import VirtualDocument


class StatusCode(Enum):
    """Aggregate connection status."""
    WAITING = "waiting"
    CONNECTING = "connecting"
    INITIALIZING = "initializing"
    INITIALIZED = "initialized"


class DocumentConnectionStatus(Enum):
    """Connection status of a single document, for drill-down."""
    INITIALIZED = "initialized"
    CONNECTED = "connected"
    NOT_CONNECTED = "not connected"


@dataclass
class ConnectionStatus:
    """Reduced status plus the document sets it was derived from."""
    status: StatusCode
    detected_documents: List[VirtualDocument] = field(default_factory=list)
    connected_documents: List[VirtualDocument] = field(default_factory=list)
    initialized_documents: List[VirtualDocument] = field(default_factory=list)
    open_connections: List[Connection] = field(default_factory=list)

    @property
    def detected_count(self) -> int:
        return len(self.detected_documents)

    @property
    def unconnected_documents(self) -> List[VirtualDocument]:
        """Detected documents without an established connection, in detection order."""
        connected = set(self.connected_documents)
        return [doc for doc in self.detected_documents if doc not in connected]

    @property
    def uninitialized_documents(self) -> List[VirtualDocument]:
        """Detected documents whose server has not completed initialization."""
        initialized = set(self.initialized_documents)
        return [doc for doc in self.detected_documents if doc not in initialized]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "detected": [doc.id_path for doc in self.detected_documents],
            "connected": [doc.id_path for doc in self.connected_documents],
            "initialized": [doc.id_path for doc in self.initialized_documents],
            "open_connections": [conn.id_path for conn in self.open_connections],
        }


def reduce_status(registry) -> ConnectionStatus:
    """
    Compute the aggregate status from a connection registry.

    Detected documents come from the registry's document map, not from
    the tree: the registry is authoritative about what is being served.
    Open connections are counted over all connections and may outnumber
    detected documents while a closed document's connection is still in
    its grace period; they never affect the status code.

    Args:
        registry: Object with `documents` (id_path -> document) and
                  `connections` (id_path -> connection) mappings

    Returns:
        ConnectionStatus with the status code and supporting sets
    """
    detected: List[VirtualDocument] = list(dict.fromkeys(registry.documents.values()))
    connected: List[VirtualDocument] = []
    initialized: List[VirtualDocument] = []

    for id_path, document in registry.documents.items():
        connection = registry.connections.get(id_path)
        if connection is None:
            continue
        if connection.connected and document not in connected:
            connected.append(document)
        if connection.initialized and document not in initialized:
            initialized.append(document)

    open_connections = [conn for conn in registry.connections.values() if conn.connected]

    if not detected:
        status = StatusCode.WAITING
    elif len(initialized) == len(detected):
        status = StatusCode.INITIALIZED
    elif len(connected) == len(detected):
        status = StatusCode.INITIALIZING
    else:
        status = StatusCode.CONNECTING

    return ConnectionStatus(
        status=status,
        detected_documents=detected,
        connected_documents=connected,
        initialized_documents=initialized,
        open_connections=open_connections,
    )


def document_connection_status(registry, document: VirtualDocument) -> DocumentConnectionStatus:
    """Label one document's connection: initialized, connected, or not connected."""
    connection = registry.connections.get(document.id_path)
    if connection is None:
        return DocumentConnectionStatus.NOT_CONNECTED
    if connection.initialized:
        return DocumentConnectionStatus.INITIALIZED
    if connection.connected:
        return DocumentConnectionStatus.CONNECTED
    return DocumentConnectionStatus.NOT_CONNECTED
