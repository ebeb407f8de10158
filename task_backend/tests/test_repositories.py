import threading

import pytest
from pydantic import ValidationError

from src.api.db import SQLiteRepository
from src.api.errors import StoreError
from src.api.repositories import InMemoryRepository, get_repository
from src.api.schemas import TaskCreate, TaskUpdate
from src.api.settings import Settings


@pytest.fixture(params=["memory", "sqlite"])
def repo(request, tmp_path):
    if request.param == "sqlite":
        r = SQLiteRepository(str(tmp_path / "tasks.db"))
    else:
        r = InMemoryRepository()
    yield r
    r.close()


def make(repo, title="Title", description="Description"):
    return repo.create(TaskCreate(title=title, description=description))


class TestRepositoryContract:
    def test_list_empty(self, repo):
        assert repo.list() == []

    def test_create_assigns_id_and_starts_incomplete(self, repo):
        first = make(repo, "a", "b")
        second = make(repo)
        assert first == {"id": 1, "title": "a", "description": "b", "completed": False}
        assert second["id"] == 2

    def test_get(self, repo):
        created = make(repo)
        assert repo.get(created["id"]) == created
        assert repo.get(999) is None

    def test_update_replaces_all_fields(self, repo):
        created = make(repo)
        updated = repo.update(created["id"], TaskUpdate(title="t2", description="d2", completed=True))
        assert updated == {"id": created["id"], "title": "t2", "description": "d2", "completed": True}
        assert repo.get(created["id"]) == updated

    def test_update_missing_returns_none(self, repo):
        assert repo.update(42, TaskUpdate(title="t", description="d", completed=False)) is None
        assert repo.list() == []

    def test_delete(self, repo):
        created = make(repo)
        assert repo.delete(created["id"]) is True
        assert repo.get(created["id"]) is None
        assert repo.delete(created["id"]) is False

    def test_ids_never_reused(self, repo):
        make(repo)
        second = make(repo)
        repo.delete(second["id"])
        third = make(repo)
        assert third["id"] == 3

    @pytest.mark.parametrize("task_id", [2**63, -(2**63) - 1, 10**30])
    def test_ids_outside_integer_range_are_not_found(self, repo, task_id):
        make(repo)
        assert repo.get(task_id) is None
        assert repo.update(task_id, TaskUpdate(title="t", description="d", completed=True)) is None
        assert repo.delete(task_id) is False
        assert len(repo.list()) == 1

    def test_list_in_id_order(self, repo):
        for i in range(5):
            make(repo, title=f"T{i}")
        repo.delete(3)
        assert [t["id"] for t in repo.list()] == [1, 2, 4, 5]

    def test_returned_records_are_copies(self, repo):
        created = make(repo)
        created["title"] = "mutated"
        assert repo.get(created["id"])["title"] == "Title"

    def test_concurrent_creates_get_unique_ids(self, repo):
        def worker():
            for _ in range(20):
                make(repo)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        ids = [t["id"] for t in repo.list()]
        assert len(ids) == 80
        assert len(set(ids)) == 80


class TestSQLiteRepository:
    def test_persists_across_reopen(self, tmp_path):
        path = str(tmp_path / "nested" / "tasks.db")
        r = SQLiteRepository(path)
        make(r, "kept")
        r.close()

        reopened = SQLiteRepository(path)
        try:
            assert [t["title"] for t in reopened.list()] == ["kept"]
            # AUTOINCREMENT continues after reopen
            assert make(reopened)["id"] == 2
        finally:
            reopened.close()

    def test_operations_after_close_raise_store_error(self, tmp_path):
        r = SQLiteRepository(str(tmp_path / "tasks.db"))
        r.close()
        with pytest.raises(StoreError) as exc_info:
            r.get(1)
        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Internal server error"
        assert exc_info.value.__cause__ is not None


class TestGetRepository:
    def test_memory_backend(self):
        assert isinstance(get_repository(Settings(persistence_backend="memory")), InMemoryRepository)

    def test_sqlite_backend(self, tmp_path):
        repo = get_repository(Settings(persistence_backend="sqlite", sqlite_db_path=str(tmp_path / "x.db")))
        try:
            assert isinstance(repo, SQLiteRepository)
        finally:
            repo.close()


class TestSchemas:
    @pytest.mark.parametrize("field", ["title", "description"])
    def test_create_rejects_empty_strings(self, field):
        data = {"title": "t", "description": "d", field: ""}
        with pytest.raises(ValidationError):
            TaskCreate(**data)

    def test_create_ignores_completed(self):
        payload = TaskCreate.model_validate({"title": "t", "description": "d", "completed": True})
        assert "completed" not in payload.model_dump()

    def test_update_requires_completed(self):
        with pytest.raises(ValidationError):
            TaskUpdate.model_validate({"title": "t", "description": "d"})
        assert TaskUpdate.model_validate({"title": "t", "description": "d", "completed": False}).completed is False

    @pytest.mark.parametrize("value", ["no", "off", "0", 0, 1, "yes", None])
    def test_update_accepts_only_real_booleans(self, value):
        with pytest.raises(ValidationError):
            TaskUpdate.model_validate({"title": "t", "description": "d", "completed": value})
