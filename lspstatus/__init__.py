"""
lspstatus — Language server connection status

Aggregates the connection state of a document and the documents embedded
in it (cells or fragments in other languages), and reconciles their
languages with the servers the backend can run.

Usage:
    lspstatus status snapshot.yaml
    lspstatus status snapshot.yaml --catalog http://localhost:8888/lsp
    lspstatus config
"""

__version__ = "0.1.0"

# Core layer (data)
from .core.documents import VirtualDocument, collect_documents, collect_languages
from .core.connections import Connection, ConnectionRegistry
from .core.sessions import ServerSession, SessionCatalog, CatalogFormatError
from .core.signals import Signal

# Tracking layer
from .tracking.reconciler import LanguageReconciler
from .tracking.status import StatusCode, ConnectionStatus, reduce_status

# Presentation layer
from .presentation.messages import StatusText, format_status

# Model
from .model import AggregationModel, StatusMessage, StatusView

# Config (stays at root)
from .config import Config, ConfigManager, get_config

__all__ = [
    # Core
    'VirtualDocument', 'collect_documents', 'collect_languages',
    'Connection', 'ConnectionRegistry',
    'ServerSession', 'SessionCatalog', 'CatalogFormatError',
    'Signal',
    # Tracking
    'LanguageReconciler',
    'StatusCode', 'ConnectionStatus', 'reduce_status',
    # Presentation
    'StatusText', 'format_status',
    # Model
    'AggregationModel', 'StatusMessage', 'StatusView',
    # Config
    'Config', 'ConfigManager', 'get_config',
]
