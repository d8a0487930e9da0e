"""
Model — Live connection status for one document tree

AggregationModel ties a document tree, its connection registry and the
server catalog together. It never caches derived state: every read walks
the tree and the registry again. Registry notifications only bump a
version counter and tell observers to re-read.

Usage:
    model = AggregationModel()
    model.changed.connect(refresh_status_bar)
    model.attach(notebook_document, registry)
    await model.load_catalog(CatalogFetcher(url))

    view = model.view()
    print(view.text.short_text)
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

from .core.connections import REGISTRY_SIGNALS
from .core.documents import DEFAULT_MAX_DEPTH, VirtualDocument
from .core.sessions import ServerSession, SessionCatalog
from .core.signals import Signal
from .presentation.messages import StatusText, format_status
from .tracking.reconciler import DocumentsByServer, LanguageReconciler
from .tracking.status import (
    ConnectionStatus, DocumentConnectionStatus, StatusCode,
    document_connection_status, reduce_status,
)

logger = logging.getLogger(__name__)


class StatusMessage:
    """
    Free-form feature status text (e.g. "Renaming symbol...") with a
    change signal.
    """

    def __init__(self, message: str = ""):
        self._message = message
        self.changed = Signal("status_message_changed")

    @property
    def message(self) -> str:
        return self._message

    def set(self, message: str) -> None:
        if message != self._message:
            self._message = message
            self.changed.emit()


@dataclass(frozen=True)
class DocumentEntry:
    """A document served by a running session, with its connection label."""
    id_path: str
    status: DocumentConnectionStatus

    @property
    def is_initialized(self) -> bool:
        return self.status == DocumentConnectionStatus.INITIALIZED


@dataclass(frozen=True)
class RunningGroup:
    """Documents of one language served by one session."""
    session: ServerSession
    language: str
    documents: Tuple[DocumentEntry, ...] = ()


@dataclass(frozen=True)
class StatusView:
    """Read-only snapshot of everything a status renderer needs."""
    text: StatusText
    status: Optional[ConnectionStatus] = None
    feature_message: str = ""
    servers_available_not_in_use: Tuple[ServerSession, ...] = ()
    running: Tuple[RunningGroup, ...] = ()
    missing_languages: Tuple[str, ...] = ()
    catalog_available: bool = False

    @property
    def attached(self) -> bool:
        return self.status is not None

    @property
    def status_code(self) -> Optional[StatusCode]:
        return self.status.status if self.status else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.to_dict() if self.status else None,
            "icon": self.text.icon_key,
            "short_message": self.text.short_text,
            "long_message": self.text.long_text,
            "feature_message": self.feature_message,
            "catalog_available": self.catalog_available,
            "available": [session.to_dict() for session in self.servers_available_not_in_use],
            "running": [
                {
                    "server": group.session.display_name,
                    "language": group.language,
                    "documents": [
                        {"id_path": entry.id_path, "status": entry.status.value}
                        for entry in group.documents
                    ],
                }
                for group in self.running
            ],
            "missing": list(self.missing_languages),
        }


class AggregationModel:
    """
    Status model for the document tree currently in focus.

    Holds at most one attached (root, registry) pair. Observers subscribe
    to `changed`; it carries no payload and observers call view() or the
    convenience properties to re-read.
    """

    def __init__(self, catalog: Optional[SessionCatalog] = None,
                 max_depth: int = DEFAULT_MAX_DEPTH):
        self.changed = Signal("model_changed")
        self.max_depth = max_depth

        self._root: Optional[VirtualDocument] = None
        self._registry = None
        self._status_message: Optional[StatusMessage] = None
        self._catalog = catalog if catalog is not None else SessionCatalog.unavailable()
        self._catalog_requested = False

        self._version = 0
        self._batch_depth = 0
        self._dirty = False

    # -------------------------------------------------------------------------
    # Attachment
    # -------------------------------------------------------------------------

    @property
    def root(self) -> Optional[VirtualDocument]:
        return self._root

    @property
    def registry(self):
        return self._registry

    @property
    def attached(self) -> bool:
        return self._root is not None and self._registry is not None

    @property
    def version(self) -> int:
        """Bumped on every change notification; equal versions read equal state."""
        return self._version

    def attach(self, root: VirtualDocument, registry,
               status_message: Optional[StatusMessage] = None) -> None:
        """
        Point the model at a new document tree.

        The previous registry's channels are all disconnected before the
        new ones are connected, so no notification is ever attributed to
        a tree that is no longer attached.
        """
        self._disconnect_sources()
        self._root = root
        self._registry = registry
        self._status_message = status_message
        self._connect_sources()
        logger.debug("Attached %s", root.id_path)
        self._on_change()

    def detach(self) -> None:
        """Drop the attached tree; the model reads as "not initialized"."""
        if self._root is None and self._registry is None:
            return
        self._disconnect_sources()
        self._root = None
        self._registry = None
        self._status_message = None
        logger.debug("Detached")
        self._on_change()

    def _sources(self) -> List[Signal]:
        signals: List[Signal] = []
        if self._registry is not None:
            signals.extend(getattr(self._registry, name) for name in REGISTRY_SIGNALS)
        if self._status_message is not None:
            signals.append(self._status_message.changed)
        return signals

    def _connect_sources(self) -> None:
        for signal in self._sources():
            signal.connect(self._on_change)

    def _disconnect_sources(self) -> None:
        for signal in self._sources():
            signal.disconnect(self._on_change)

    # -------------------------------------------------------------------------
    # Change propagation
    # -------------------------------------------------------------------------

    def _on_change(self) -> None:
        self._version += 1
        if self._batch_depth:
            self._dirty = True
            return
        self.changed.emit()

    @contextmanager
    def batch(self) -> Iterator[None]:
        """
        Coalesce notifications: observers hear one `changed` when the
        outermost batch exits, if anything changed inside it.
        """
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._dirty:
                self._dirty = False
                self.changed.emit()

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    @property
    def catalog(self) -> SessionCatalog:
        return self._catalog

    def set_catalog(self, catalog: Optional[SessionCatalog]) -> None:
        """Replace the catalog; None means unavailable."""
        self._catalog = catalog if catalog is not None else SessionCatalog.unavailable()
        self._on_change()

    async def load_catalog(self, fetcher) -> SessionCatalog:
        """
        Fetch the catalog once for this model's lifetime.

        Later calls return the current catalog without fetching again,
        even when the first fetch failed. A fetcher that raises leaves the
        catalog unavailable; the error is logged, never propagated.
        """
        if self._catalog_requested:
            return self._catalog
        self._catalog_requested = True
        try:
            catalog = await fetcher.fetch()
        except Exception as exc:
            logger.warning("Catalog fetch failed: %s", exc)
            catalog = SessionCatalog.unavailable()
        self.set_catalog(catalog)
        return self._catalog

    # -------------------------------------------------------------------------
    # Derived views (recomputed on every read)
    # -------------------------------------------------------------------------

    def _reconciler(self) -> LanguageReconciler:
        return LanguageReconciler(self._root, self._catalog, max_depth=self.max_depth)

    @property
    def status(self) -> Optional[ConnectionStatus]:
        if not self.attached:
            return None
        return reduce_status(self._registry)

    @property
    def detected_languages(self) -> List[str]:
        return self._reconciler().detected_languages

    @property
    def supported_languages(self) -> Set[str]:
        return self._reconciler().supported_languages

    @property
    def documents_by_server(self) -> DocumentsByServer:
        return self._reconciler().documents_by_server

    @property
    def servers_available_not_in_use(self) -> List[ServerSession]:
        return self._reconciler().servers_available_not_in_use

    @property
    def missing_languages(self) -> List[str]:
        return self._reconciler().missing_languages

    @property
    def feature_message(self) -> str:
        if not self.attached or self._status_message is None:
            return ""
        return self._status_message.message

    @property
    def status_icon(self) -> str:
        return format_status(self.status).icon_key

    @property
    def short_message(self) -> str:
        return format_status(self.status).short_text

    @property
    def long_message(self) -> str:
        return format_status(self.status).long_text

    def view(self) -> StatusView:
        """Recompute everything and return it as one immutable snapshot."""
        status = self.status
        text = format_status(status)
        reconciler = self._reconciler()

        running: List[RunningGroup] = []
        for session, by_language in reconciler.documents_by_server.items():
            for language, documents in by_language.items():
                entries = tuple(
                    DocumentEntry(
                        id_path=document.id_path,
                        status=document_connection_status(self._registry, document),
                    )
                    for document in documents
                )
                running.append(RunningGroup(session=session, language=language, documents=entries))

        return StatusView(
            text=text,
            status=status,
            feature_message=self.feature_message,
            servers_available_not_in_use=tuple(reconciler.servers_available_not_in_use),
            running=tuple(running),
            missing_languages=tuple(reconciler.missing_languages),
            catalog_available=self._catalog.available,
        )
