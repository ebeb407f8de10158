import os

import pytest
from fastapi.testclient import TestClient

# Ensure we default to memory backend for tests to avoid filesystem dependencies
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from src.api.main import create_app  # noqa: E402
from src.api.settings import Settings  # noqa: E402


@pytest.fixture
def client():
    # A fresh app per test: ids start at 1 and no state leaks between tests.
    with TestClient(create_app(Settings(persistence_backend="memory"))) as c:
        yield c


@pytest.fixture
def sqlite_client(tmp_path):
    settings = Settings(persistence_backend="sqlite", sqlite_db_path=str(tmp_path / "tasks.db"))
    with TestClient(create_app(settings)) as c:
        yield c
