from __future__ import annotations

from signal_relay.infrastructure.memory.presence_registry import PresenceRegistry
from tests.conftest import FakeConnection


def test_bind_and_lookup():
    registry = PresenceRegistry()
    conn = FakeConnection()

    registry.bind("doc1", conn)

    assert registry.lookup("doc1") is conn
    assert registry.lookup("pat1") is None
    assert len(registry) == 1


def test_rebind_replaces_and_stale_unbind_is_noop():
    registry = PresenceRegistry()
    c1, c2 = FakeConnection(), FakeConnection()

    registry.bind("doc1", c1)
    registry.bind("doc1", c2)

    assert registry.lookup("doc1") is c2
    assert registry.unbind("doc1", c1) is False
    assert registry.lookup("doc1") is c2
    assert len(registry) == 1


def test_unbind_current_connection_removes_entry():
    registry = PresenceRegistry()
    conn = FakeConnection()
    registry.bind("doc1", conn)

    assert registry.unbind("doc1", conn) is True
    assert registry.lookup("doc1") is None
    assert "doc1" not in registry


def test_unbind_unknown_identity():
    registry = PresenceRegistry()
    assert registry.unbind("ghost", FakeConnection()) is False
