"""
Unit tests for the in-memory persistence collaborator.
"""

import pytest

from service_authz.app.adapters.repository import InMemoryRepository
from shared.errors import NotFoundError


class TestInMemoryRepository:
    """Test cases for InMemoryRepository."""

    @pytest.fixture
    def repository(self):
        return InMemoryRepository("employees")

    def test_create_assigns_sequential_ids(self, repository):
        first = repository.create({"firstName": "Frodo"})
        second = repository.create({"firstName": "Sam"})

        assert (first["id"], second["id"]) == (1, 2)
        assert [r["firstName"] for r in repository.list()] == ["Frodo", "Sam"]

    def test_returned_records_are_copies(self, repository):
        created = repository.create({"firstName": "Frodo"})
        created["firstName"] = "Gollum"

        assert repository.read(created["id"])["firstName"] == "Frodo"

    def test_update_replaces_record(self, repository):
        created = repository.create({"firstName": "Frodo", "role": "burglar"})

        updated = repository.update(created["id"], {"firstName": "Bilbo"})

        assert updated == {"firstName": "Bilbo", "id": created["id"]}

    def test_missing_ids(self, repository):
        with pytest.raises(NotFoundError):
            repository.read(1)
        with pytest.raises(NotFoundError):
            repository.update(1, {})
        with pytest.raises(NotFoundError):
            repository.delete(1)

    def test_delete(self, repository):
        created = repository.create({"firstName": "Frodo"})

        repository.delete(created["id"])

        assert repository.list() == []
