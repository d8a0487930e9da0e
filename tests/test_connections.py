"""
Tests for ConnectionRegistry — connection lifecycle and notifications
"""

import pytest

from lspstatus.core.connections import REGISTRY_SIGNALS, Connection, ConnectionRegistry
from lspstatus.core.documents import VirtualDocument


class TestLifecycle:
    """Connection flags through connect, initialize, disconnect and close."""

    def test_connect_creates_connection(self):
        registry = ConnectionRegistry()
        connection = registry.connect("a")
        assert connection.connected is True
        assert connection.initialized is False
        assert registry.get("a") is connection

    def test_mark_initialized(self):
        registry = ConnectionRegistry()
        registry.connect("a")
        connection = registry.mark_initialized("a")
        assert connection.is_ready

    def test_mark_initialized_without_connection(self):
        """Initializing an unknown connection is a caller error."""
        with pytest.raises(KeyError):
            ConnectionRegistry().mark_initialized("missing")

    def test_disconnect_keeps_entry(self):
        """Disconnect clears the link but the connection stays listed."""
        registry = ConnectionRegistry()
        registry.connect("a")
        registry.mark_initialized("a")

        assert registry.disconnect("a") is True
        connection = registry.get("a")
        assert connection.connected is False
        assert connection.initialized is True

    def test_close_forgets_connection(self):
        registry = ConnectionRegistry()
        registry.connect("a")
        assert registry.close("a") is True
        assert registry.get("a") is None
        assert registry.close("a") is False

    def test_disconnect_unknown(self):
        assert ConnectionRegistry().disconnect("a") is False


class TestNotifications:
    """Each mutator emits its own channel."""

    @pytest.mark.parametrize("action,channel", [
        (lambda r: r.connect("a"), "connected"),
        (lambda r: r.mark_initialized("a"), "initialized"),
        (lambda r: r.disconnect("a"), "disconnected"),
        (lambda r: r.close("a"), "closed"),
        (lambda r: r.register_document(VirtualDocument("b", "r")), "documents_changed"),
        (lambda r: r.unregister_document("a"), "documents_changed"),
    ])
    def test_channel_emitted(self, recorder, action, channel):
        registry = ConnectionRegistry()
        registry.documents["a"] = VirtualDocument("a", "python")
        registry.connections["a"] = Connection("a", connected=True)

        getattr(registry, channel).connect(recorder)
        action(registry)

        assert recorder.calls == 1

    def test_unregister_unknown_is_silent(self, recorder):
        registry = ConnectionRegistry()
        registry.documents_changed.connect(recorder)
        assert registry.unregister_document("nope") is False
        assert recorder.calls == 0

    def test_unregister_leaves_connection_open(self):
        """Closing a document does not tear its connection down."""
        registry = ConnectionRegistry()
        registry.register_document(VirtualDocument("a", "python"))
        registry.connect("a")
        registry.unregister_document("a")
        assert "a" not in registry.documents
        assert registry.get("a").connected is True

    def test_signals_by_name(self):
        registry = ConnectionRegistry()
        signals = registry.signals()
        assert tuple(signals) == REGISTRY_SIGNALS
        assert signals["closed"] is registry.closed
