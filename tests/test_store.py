"""Tests for the content-addressed string store."""

import threading
from datetime import timezone

import pytest

from string_analyzer.errors import ConflictError, NotFoundError
from string_analyzer.services.analyzer import analyze_string, compute_sha256


class TestInsert:
    def test_insert_returns_record(self, store):
        record = store.insert("abc")

        assert record.id == compute_sha256("abc")
        assert record.value == "abc"
        assert record.properties == analyze_string("abc")
        assert record.created_at.tzinfo is not None

    def test_duplicate_rejected(self, store):
        store.insert("abc")

        with pytest.raises(ConflictError):
            store.insert("abc")

        assert store.count() == 1

    def test_case_differs_is_new_content(self, store):
        store.insert("abc")
        store.insert("ABC")

        assert store.count() == 2

    def test_value_stored_without_normalization(self, store):
        record = store.insert("  Mixed Case\t")
        assert store.get("  Mixed Case\t").value == record.value == "  Mixed Case\t"


class TestGet:
    def test_round_trip(self, store):
        store.insert("round trip")
        record = store.get("round trip")

        assert record is not None
        assert record.value == "round trip"
        assert record.properties == analyze_string("round trip")

    def test_missing(self, store):
        assert store.get("nope") is None

    def test_get_by_id(self, store):
        inserted = store.insert("by id")
        assert store.get_by_id(inserted.id) == inserted

    def test_created_at_not_recomputed(self, store):
        inserted = store.insert("stamp")
        assert store.get("stamp").created_at == inserted.created_at
        assert inserted.created_at.utcoffset() == timezone.utc.utcoffset(None)


class TestDelete:
    def test_delete_then_get(self, store):
        store.insert("gone")
        store.delete("gone")

        assert store.get("gone") is None

    def test_delete_twice(self, store):
        store.insert("gone")
        store.delete("gone")

        with pytest.raises(NotFoundError):
            store.delete("gone")

    def test_delete_missing_leaves_store_unchanged(self, store):
        store.insert("keep")

        with pytest.raises(NotFoundError):
            store.delete("other")

        assert store.count() == 1

    def test_reinsert_after_delete(self, store):
        store.insert("again")
        store.delete("again")
        store.insert("again")

        assert store.count() == 1


class TestEnumerate:
    def test_insertion_order(self, store):
        for value in ["zeta", "alpha", "mid"]:
            store.insert(value)

        assert [r.value for r in store.enumerate()] == ["zeta", "alpha", "mid"]

    def test_order_after_delete(self, store):
        for value in ["one", "two", "three"]:
            store.insert(value)
        store.delete("two")
        store.insert("four")

        assert [r.value for r in store.enumerate()] == ["one", "three", "four"]

    def test_empty(self, store):
        assert store.enumerate() == []


class TestConcurrency:
    def test_concurrent_duplicate_inserts(self, store):
        """Only one of many racing inserts of the same string succeeds."""
        results = []

        def worker():
            try:
                store.insert("race")
                results.append("ok")
            except ConflictError:
                results.append("conflict")

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count("ok") == 1
        assert results.count("conflict") == 7
        assert store.count() == 1
