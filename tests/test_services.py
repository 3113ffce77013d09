import pytest

from shiptivity_api.errors import (
    InvalidIdentifier,
    InvalidPriority,
    InvalidStatus,
    NoFieldsToUpdate,
    RecordNotFound,
    StoreError,
)
from shiptivity_api.repositories import InMemoryRepository
from shiptivity_api.services import get_client, list_clients, update_client


def seed():
    return [
        {"id": 1, "name": "A", "description": "a", "status": "backlog", "priority": 1},
        {"id": 2, "name": "B", "description": "b", "status": "complete", "priority": 3},
    ]


class RecordingRepository(InMemoryRepository):
    """In-memory store that records every write attempt."""

    def __init__(self, clients=()):
        super().__init__(clients)
        self.writes = []

    def update_fields(self, client_id, changes):
        self.writes.append((client_id, dict(changes)))
        return super().update_fields(client_id, changes)


class VanishingRepository(InMemoryRepository):
    """Simulates the client being deleted between validation and write."""

    def update_fields(self, client_id, changes):
        with self._lock:
            self._items.pop(client_id, None)
        return super().update_fields(client_id, changes)


class TestUpdateClient:
    def test_applies_only_supplied_fields(self):
        repo = RecordingRepository(seed())
        board = update_client(repo, "1", {"status": "in-progress"})
        assert repo.writes == [(1, {"status": "in-progress"})]
        assert board[0] == {"id": 1, "name": "A", "description": "a", "status": "in-progress", "priority": 1}
        assert board[1] == seed()[1]

    def test_returns_whole_collection(self):
        repo = RecordingRepository(seed())
        board = update_client(repo, 2, {"priority": 1})
        assert [c["id"] for c in board] == [1, 2]
        assert board == repo.list()

    def test_priority_string_is_stored_as_int(self):
        repo = RecordingRepository(seed())
        update_client(repo, "2", {"priority": "4"})
        assert repo.writes == [(2, {"priority": 4})]

    @pytest.mark.parametrize("partial,error", [
        ({"status": "done", "priority": 2}, InvalidStatus),
        ({"status": "complete", "priority": 0}, InvalidPriority),
        ({}, NoFieldsToUpdate),
        ({"status": None, "priority": None}, NoFieldsToUpdate),
        ({"name": "ignored"}, NoFieldsToUpdate),
    ])
    def test_rejected_update_writes_nothing(self, partial, error):
        repo = RecordingRepository(seed())
        with pytest.raises(error):
            update_client(repo, "1", partial)
        assert repo.writes == []
        assert repo.list() == seed()

    def test_identifier_checked_before_fields(self):
        repo = RecordingRepository(seed())
        with pytest.raises(InvalidIdentifier):
            update_client(repo, "x", {})
        with pytest.raises(RecordNotFound):
            update_client(repo, "99", {"status": "bogus"})
        assert repo.writes == []

    def test_record_removed_before_write(self):
        repo = VanishingRepository(seed())
        with pytest.raises(RecordNotFound):
            update_client(repo, "1", {"status": "complete"})
        assert [c["id"] for c in repo.list()] == [2]

    def test_store_error_propagates(self):
        class BrokenRepository(InMemoryRepository):
            def get(self, client_id):
                raise StoreError(long_message="database is locked")

        with pytest.raises(StoreError) as info:
            update_client(BrokenRepository(seed()), "1", {"status": "complete"})
        assert info.value.long_message == "database is locked"


class TestQueries:
    def test_list_all_and_filtered(self):
        repo = InMemoryRepository(seed())
        assert [c["id"] for c in list_clients(repo)] == [1, 2]
        assert [c["id"] for c in list_clients(repo, "complete")] == [2]
        assert list_clients(repo, "in-progress") == []

    def test_list_invalid_status(self):
        with pytest.raises(InvalidStatus):
            list_clients(InMemoryRepository(seed()), "done")

    def test_get_client(self):
        repo = InMemoryRepository(seed())
        assert get_client(repo, "2")["name"] == "B"
        with pytest.raises(RecordNotFound):
            get_client(repo, "3")


class TestInMemoryRepository:
    def test_returns_copies(self):
        repo = InMemoryRepository(seed())
        item = repo.get(1)
        item["status"] = "complete"
        assert repo.get(1)["status"] == "backlog"

    def test_rejects_unknown_columns(self):
        repo = InMemoryRepository(seed())
        with pytest.raises(ValueError):
            repo.update_fields(1, {"name": "nope"})

    def test_empty_changes_rejected(self):
        repo = InMemoryRepository(seed())
        with pytest.raises(ValueError):
            repo.update_fields(1, {})
