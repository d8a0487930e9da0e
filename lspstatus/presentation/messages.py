"""
Messages — Human-readable text for a reduced status

Pure mapping from a ConnectionStatus (or its absence) to an icon key, a
short label for the status bar, and a long explanation for its tooltip.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from ..core.documents import VirtualDocument
from ..tracking.status import ConnectionStatus, StatusCode


NOT_INITIALIZED_TEXT = "not initialized"
NOT_INITIALIZED_ICON = "stop"

ICON_BY_STATUS: Dict[StatusCode, str] = {
    StatusCode.WAITING: "refresh",
    StatusCode.INITIALIZED: "running",
    StatusCode.INITIALIZING: "refresh",
    StatusCode.CONNECTING: "refresh",
}

SHORT_MESSAGE_BY_STATUS: Dict[StatusCode, str] = {
    StatusCode.WAITING: "Waiting...",
    StatusCode.INITIALIZED: "Fully initialized",
    StatusCode.INITIALIZING: "Partially initialized",
    StatusCode.CONNECTING: "Connecting...",
}


@dataclass(frozen=True)
class StatusText:
    """Display strings for one status reading."""
    icon_key: str
    short_text: str
    long_text: str


def _join_ids(documents: Iterable[VirtualDocument]) -> str:
    return ", ".join(document.id_path for document in documents)


def long_message(status: ConnectionStatus) -> str:
    """Explain a status, naming the documents that hold it back."""
    total = status.detected_count
    plural = "s" if total > 1 else ""

    if status.status == StatusCode.WAITING:
        return "Waiting for documents initialization..."

    if status.status == StatusCode.INITIALIZED:
        return f"Fully connected & initialized ({total} virtual document{plural})"

    if status.status == StatusCode.INITIALIZING:
        # Servers for these documents did not answer the initialize request
        uninitialized = status.uninitialized_documents
        return (
            f"Fully connected, but {len(uninitialized)}/{total} virtual document{plural} "
            f"stuck uninitialized: {_join_ids(uninitialized)}"
        )

    unconnected = status.unconnected_documents
    return (
        f"{len(status.connected_documents)}/{total} virtual document{plural} connected "
        f"({len(status.open_connections)} connections; waiting for: {_join_ids(unconnected)})"
    )


def format_status(status: Optional[ConnectionStatus]) -> StatusText:
    """
    Build display text for a status.

    Args:
        status: Reduced status, or None when no document is attached

    Returns:
        StatusText with icon key, short and long text
    """
    if status is None:
        return StatusText(
            icon_key=NOT_INITIALIZED_ICON,
            short_text=NOT_INITIALIZED_TEXT,
            long_text=NOT_INITIALIZED_TEXT,
        )

    return StatusText(
        icon_key=ICON_BY_STATUS[status.status],
        short_text=SHORT_MESSAGE_BY_STATUS[status.status],
        long_text=long_message(status),
    )
