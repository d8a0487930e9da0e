"""
Tests for status reduction

Covers:
- The four status codes and their priority order
- Open connections outliving their documents
- Per-document connection labels
"""

import pytest

from lspstatus.core.connections import Connection, ConnectionRegistry
from lspstatus.core.documents import VirtualDocument
from lspstatus.tracking.status import (
    DocumentConnectionStatus, StatusCode,
    document_connection_status, reduce_status,
)


class TestReduction:

    def test_no_documents_is_waiting(self):
        """An empty registry waits, whatever its connections say."""
        registry = ConnectionRegistry()
        registry.connections["stale"] = Connection("stale", connected=True, initialized=True)
        assert reduce_status(registry).status == StatusCode.WAITING

    def test_all_initialized(self, status_factory):
        root = status_factory.document("a", "python", status_factory.document("b", "r"))
        registry = status_factory.registry(root, {"a": "initialized", "b": "initialized"})
        assert reduce_status(registry).status == StatusCode.INITIALIZED

    def test_all_connected_some_uninitialized(self, status_factory):
        root = status_factory.document("a", "python", status_factory.document("b", "julia"))
        registry = status_factory.registry(root, {"a": "initialized", "b": "connected"})
        assert reduce_status(registry).status == StatusCode.INITIALIZING

    def test_some_unconnected(self, status_factory):
        root = status_factory.document("a", "python", status_factory.document("b", "julia"))
        registry = status_factory.registry(root, {"a": "initialized", "b": "connecting"})
        assert reduce_status(registry).status == StatusCode.CONNECTING

    def test_missing_connection_counts_as_unconnected(self, status_factory):
        root = status_factory.document("a", "python", status_factory.document("b", "julia"))
        registry = status_factory.registry(root, {"a": "connected"})
        status = reduce_status(registry)
        assert status.status == StatusCode.CONNECTING
        assert [d.id_path for d in status.unconnected_documents] == ["b"]

    def test_initialized_checked_before_connected(self, status_factory):
        """
        Initialized-but-disconnected documents: both the initialized and
        the connecting conditions hold; initialized wins.
        """
        root = status_factory.document("a", "python")
        registry = status_factory.registry(root)
        registry.connections["a"] = Connection("a", connected=False, initialized=True)

        status = reduce_status(registry)

        assert len(status.connected_documents) < status.detected_count
        assert status.status == StatusCode.INITIALIZED


class TestOpenConnections:

    def test_lingering_connection_counted_but_not_detected(self, status_factory):
        """A connection for a closed document is open but not detected."""
        root = status_factory.document("a", "python")
        registry = status_factory.registry(root, {"a": "initialized", "closed.py": "connected"})

        status = reduce_status(registry)

        assert [c.id_path for c in status.open_connections] == ["a", "closed.py"]
        assert status.detected_count == 1
        assert status.status == StatusCode.INITIALIZED

    def test_disconnected_not_open(self, status_factory):
        root = status_factory.document("a", "python")
        registry = status_factory.registry(root, {"a": "connecting"})
        assert reduce_status(registry).open_connections == []


class TestPurity:

    def test_repeated_reads_identical(self, status_factory):
        root = status_factory.notebook()
        registry = status_factory.registry(root, {"nb.ipynb": "initialized", "nb.ipynb/r-1": "connected"})
        assert reduce_status(registry).to_dict() == reduce_status(registry).to_dict()

    def test_uses_registry_documents_not_tree(self, status_factory):
        """Documents the registry has not picked up yet do not count."""
        root = status_factory.notebook()
        registry = ConnectionRegistry()
        registry.documents["nb.ipynb"] = root
        registry.connections["nb.ipynb"] = Connection("nb.ipynb", connected=True, initialized=True)

        status = reduce_status(registry)

        assert status.detected_count == 1
        assert status.status == StatusCode.INITIALIZED


class TestDocumentConnectionStatus:

    @pytest.mark.parametrize("flags,expected", [
        (None, DocumentConnectionStatus.NOT_CONNECTED),
        ((False, False), DocumentConnectionStatus.NOT_CONNECTED),
        ((True, False), DocumentConnectionStatus.CONNECTED),
        ((True, True), DocumentConnectionStatus.INITIALIZED),
    ])
    def test_labels(self, flags, expected):
        registry = ConnectionRegistry()
        document = VirtualDocument("a", "python")
        if flags is not None:
            registry.connections["a"] = Connection("a", connected=flags[0], initialized=flags[1])
        assert document_connection_status(registry, document) == expected
