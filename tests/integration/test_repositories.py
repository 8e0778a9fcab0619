# File: tests/integration/test_repositories.py
"""
Integration tests for the event stores.
"""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from postgrest.exceptions import APIError

from conftest import at, make_event
from lanecal.core.ranges import TimeRange
from lanecal.data import JsonEventRepository, SupabaseEventRepository
from lanecal.domain import EventConflictError, StorageError


# ==================== JSON Store ====================

class TestJsonEventRepository:
    """Tests for the file-backed store."""

    def test_insert_get_and_range(self, repository, day_events):
        for event in day_events:
            repository.insert(event)
        assert repository.get("b") == day_events[1]
        assert [event.id for event in repository.list_range(at(3, 10), at(3, 12))] == ["b", "c"]

    def test_find_overlapping_excludes_id(self, repository, day_events):
        for event in day_events:
            repository.insert(event)
        found = repository.find_overlapping(at(3, 9, 45), at(3, 10, 15), exclude_id="a")
        assert {event.id for event in found} == {"b", "c"}

    def test_duplicate_insert_fails(self, repository):
        event = make_event("a", at(3, 9), at(3, 10))
        repository.insert(event)
        with pytest.raises(StorageError):
            repository.insert(event)

    def test_failed_transaction_is_not_written(self, repository, app_settings):
        repository.insert(make_event("a", at(3, 9), at(3, 10)))
        with pytest.raises(RuntimeError):
            with repository.transaction():
                repository.insert(make_event("b", at(3, 11), at(3, 12)))
                raise RuntimeError("boom")
        assert repository.get("b") is None
        assert JsonEventRepository(app_settings.storage.local_path).get("b") is None

    def test_delete(self, repository):
        repository.insert(make_event("a", at(3, 9), at(3, 10)))
        assert repository.delete("a") is True
        assert repository.delete("a") is False

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "events.json"
        path.write_text("{broken")
        with pytest.raises(StorageError):
            JsonEventRepository(path).get("a")


# ==================== Supabase Store ====================

@pytest.fixture
def table():
    """Chainable PostgREST query builder stub."""
    query = MagicMock()
    for method in ("select", "lt", "gt", "eq", "neq", "order", "limit", "insert", "update", "delete"):
        getattr(query, method).return_value = query
    return query


@pytest.fixture
def supabase_repo(table):
    gateway = MagicMock()
    gateway.table.return_value = table
    return SupabaseEventRepository(gateway=gateway, table_name="calendar_events")


class TestSupabaseEventRepository:
    """Tests for the PostgREST-backed store."""

    def test_list_range_queries_overlap(self, supabase_repo, table):
        event = make_event("a", at(3, 9), at(3, 10))
        table.execute.return_value = MagicMock(data=[event.to_record()])
        assert supabase_repo.list_range(at(3), at(4)) == [event]
        table.lt.assert_called_with("starts_at", at(4).isoformat())
        table.gt.assert_called_with("ends_at", at(3).isoformat())

    def test_find_overlapping_excludes_id(self, supabase_repo, table):
        table.execute.return_value = MagicMock(data=[])
        supabase_repo.find_overlapping(at(3), at(4), exclude_id="a")
        table.neq.assert_called_with("id", "a")

    def test_exclusion_violation_is_conflict(self, supabase_repo, table):
        table.execute.side_effect = APIError({"code": "23P01", "message": "conflicting key value"})
        with pytest.raises(EventConflictError):
            supabase_repo.insert(make_event("a", at(3, 9), at(3, 10)))

    def test_other_errors_are_storage_errors(self, supabase_repo, table):
        table.execute.side_effect = APIError({"code": "42P01", "message": "relation does not exist"})
        with pytest.raises(StorageError):
            supabase_repo.get("a")


class TestJsonWriteFailure:
    """Tests for a disk write that fails after the store was modified."""

    def test_failed_write_is_rolled_back(self, repository, monkeypatch):
        repository.insert(make_event("a", at(3, 9), at(3, 10)))

        def refuse(self, data):
            raise OSError("disk full")

        with monkeypatch.context() as patched:
            patched.setattr(Path, "write_bytes", refuse)
            with pytest.raises(StorageError):
                repository.insert(make_event("b", at(3, 11), at(3, 12)))

        assert repository.get("b") is None
        assert repository.find_overlapping(at(3, 11), at(3, 12)) == []
        repository.insert(make_event("c", at(3, 13), at(3, 14)))
        assert [event.id for event in repository.list_range(at(3), at(4))] == ["a", "c"]

    def test_failed_create_frees_the_slot(self, service, monkeypatch):
        payload = {"title": "X", "start": "2024-06-01T10:00:00Z", "end": "2024-06-01T11:00:00Z"}

        def refuse(self, data):
            raise OSError("disk full")

        with monkeypatch.context() as patched:
            patched.setattr(Path, "write_bytes", refuse)
            with pytest.raises(StorageError):
                service.create_event(payload)

        assert service.list_events(TimeRange(at(1), at(2))) == []
        assert service.create_event(payload).title == "X"
