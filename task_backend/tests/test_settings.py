import logging

import pytest

from src.api.logging_setup import PACKAGE_LOGGER, setup_logging
from src.api.settings import get_settings

ENV_VARS = ["PERSISTENCE_BACKEND", "SQLITE_DB_PATH", "CORS_ALLOW_ORIGINS", "LOG_LEVEL"]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    def test_defaults(self, clean_env):
        s = get_settings()
        assert s.persistence_backend == "memory"
        assert s.sqlite_db_path == "./data/tasks.db"
        assert s.cors_allow_origins == ["*"]
        assert s.log_level == "INFO"

    def test_sqlite_backend(self, clean_env):
        clean_env.setenv("PERSISTENCE_BACKEND", " SQLite ")
        clean_env.setenv("SQLITE_DB_PATH", "/tmp/x.db")
        s = get_settings()
        assert s.persistence_backend == "sqlite"
        assert s.sqlite_db_path == "/tmp/x.db"

    def test_unknown_backend_falls_back_to_memory(self, clean_env):
        clean_env.setenv("PERSISTENCE_BACKEND", "postgres")
        assert get_settings().persistence_backend == "memory"

    def test_origins_list(self, clean_env):
        clean_env.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test,,")
        assert get_settings().cors_allow_origins == ["http://a.test", "http://b.test"]

    @pytest.mark.parametrize("raw,expected", [("debug", "DEBUG"), ("WARNING", "WARNING"), ("loud", "INFO")])
    def test_log_level(self, clean_env, raw, expected):
        clean_env.setenv("LOG_LEVEL", raw)
        assert get_settings().log_level == expected


class TestLoggingSetup:
    def test_repeated_setup_keeps_one_handler(self):
        setup_logging("INFO")
        logger = setup_logging("DEBUG")
        ours = [h for h in logger.handlers if getattr(h, "_task_backend_handler", False)]
        assert len(ours) == 1
        assert logger.name == PACKAGE_LOGGER
        assert logger.level == logging.DEBUG
        setup_logging("INFO")
