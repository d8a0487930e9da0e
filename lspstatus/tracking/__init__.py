"""
Tracking — State derived from documents, connections and sessions

- Status: reduce connection state to one status code
- Reconciler: match document languages to server sessions
"""

from .status import (
    StatusCode, DocumentConnectionStatus, ConnectionStatus,
    reduce_status, document_connection_status,
)
from .reconciler import LanguageReconciler, DocumentsByServer

__all__ = [
    "StatusCode", "DocumentConnectionStatus", "ConnectionStatus",
    "reduce_status", "document_connection_status",
    "LanguageReconciler", "DocumentsByServer",
]
