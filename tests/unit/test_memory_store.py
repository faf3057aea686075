"""
Unit tests for InMemoryKeyValueStore.

Expired entries must behave exactly like keys that were never written.
"""

import pytest

from src.adapters.store.memory import InMemoryKeyValueStore


class TestStringValues:
    """Tests for set / get / get_and_delete / delete."""

    def test_set_then_get(self, store: InMemoryKeyValueStore) -> None:
        store.set("k", "v", 10)
        assert store.get("k") == "v"

    def test_get_missing_returns_none(self, store: InMemoryKeyValueStore) -> None:
        assert store.get("missing") is None

    def test_entry_expires(self, store: InMemoryKeyValueStore, clock) -> None:
        """An entry is gone once its TTL has elapsed."""
        store.set("k", "v", 10)
        clock.advance(10)
        assert store.get("k") is None

    def test_entry_alive_just_before_expiry(self, store: InMemoryKeyValueStore, clock) -> None:
        store.set("k", "v", 10)
        clock.advance(9.9)
        assert store.get("k") == "v"

    def test_set_overwrites_value_and_ttl(self, store: InMemoryKeyValueStore, clock) -> None:
        store.set("k", "old", 5)
        clock.advance(4)
        store.set("k", "new", 5)
        clock.advance(4)
        assert store.get("k") == "new"

    def test_get_and_delete_returns_value_once(self, store: InMemoryKeyValueStore) -> None:
        store.set("k", "v", 10)
        assert store.get_and_delete("k") == "v"
        assert store.get_and_delete("k") is None
        assert store.get("k") is None

    def test_get_and_delete_expired(self, store: InMemoryKeyValueStore, clock) -> None:
        store.set("k", "v", 10)
        clock.advance(11)
        assert store.get_and_delete("k") is None

    def test_delete_missing_is_noop(self, store: InMemoryKeyValueStore) -> None:
        store.delete("missing")

    def test_non_positive_ttl_rejected(self, store: InMemoryKeyValueStore) -> None:
        with pytest.raises(ValueError):
            store.set("k", "v", 0)

    def test_remaining_ttl_helper(self, store: InMemoryKeyValueStore, clock, remaining_ttl) -> None:
        store.set("k", "v", 10)
        clock.advance(3)
        assert remaining_ttl("k") == pytest.approx(7)
        assert remaining_ttl("missing") is None


class TestHashValues:
    """Tests for hash_create / hash_get_all / hash_set_if_exists."""

    def test_hash_round_trip(self, store: InMemoryKeyValueStore) -> None:
        store.hash_create("h", {"email": "a@konkuk.ac.kr", "verified": "0"}, 10)
        assert store.hash_get_all("h") == {"email": "a@konkuk.ac.kr", "verified": "0"}

    def test_hash_get_all_returns_copy(self, store: InMemoryKeyValueStore) -> None:
        store.hash_create("h", {"a": "1"}, 10)
        snapshot = store.hash_get_all("h")
        snapshot["a"] = "2"
        assert store.hash_get_all("h") == {"a": "1"}

    def test_hash_expires(self, store: InMemoryKeyValueStore, clock) -> None:
        store.hash_create("h", {"a": "1"}, 10)
        clock.advance(10)
        assert store.hash_get_all("h") == {}

    def test_hash_set_if_exists_updates_field(self, store: InMemoryKeyValueStore) -> None:
        store.hash_create("h", {"verified": "0"}, 10)
        assert store.hash_set_if_exists("h", "verified", "1") is True
        assert store.hash_get_all("h") == {"verified": "1"}

    def test_hash_set_if_exists_keeps_ttl(self, store: InMemoryKeyValueStore, clock) -> None:
        """Updating a field never extends the hash's lifetime."""
        store.hash_create("h", {"verified": "0"}, 10)
        clock.advance(8)
        store.hash_set_if_exists("h", "verified", "1")
        clock.advance(2)
        assert store.hash_get_all("h") == {}

    def test_hash_set_if_exists_does_not_resurrect(self, store: InMemoryKeyValueStore, clock) -> None:
        store.hash_create("h", {"verified": "0"}, 10)
        clock.advance(10)
        assert store.hash_set_if_exists("h", "verified", "1") is False
        assert store.hash_get_all("h") == {}

    def test_string_reads_ignore_hashes(self, store: InMemoryKeyValueStore) -> None:
        store.hash_create("h", {"a": "1"}, 10)
        assert store.get("h") is None
        assert store.get_and_delete("h") is None


class TestExpiredEntryEviction:
    """Writes sweep out expired keys that are never read again."""

    def test_set_evicts_unread_expired_strings(self, store: InMemoryKeyValueStore, clock) -> None:
        store.set("auth:signup:jti:never-clicked", "a@konkuk.ac.kr", 10)
        clock.advance(10)

        store.set("other", "v", 10)

        assert "auth:signup:jti:never-clicked" not in store._entries
        assert "other" in store._entries

    def test_hash_create_evicts_unread_expired_hashes(
        self, store: InMemoryKeyValueStore, clock
    ) -> None:
        store.hash_create("auth:signup:session:abandoned", {"verified": "0"}, 10)
        clock.advance(10)

        store.hash_create("auth:signup:session:fresh", {"verified": "0"}, 10)

        assert list(store._entries) == ["auth:signup:session:fresh"]

    def test_live_entries_survive_sweep(self, store: InMemoryKeyValueStore, clock) -> None:
        store.set("a", "1", 10)
        clock.advance(5)
        store.set("b", "2", 10)

        assert store.get("a") == "1"
        assert store.get("b") == "2"

    def test_abandoned_signups_do_not_accumulate(
        self, store: InMemoryKeyValueStore, clock
    ) -> None:
        """Size stays bounded by what is live, not by what was ever written."""
        for i in range(100):
            store.set(f"auth:signup:jti:{i}", "a@konkuk.ac.kr", 10)
            clock.advance(5)

        assert len(store._entries) <= 2


def test_ping(store: InMemoryKeyValueStore) -> None:
    assert store.ping() is True
