"""Configuration & Bootstrap — tests for Settings and the composition root.

Tests cover:
    - defaults when nothing is configured
    - TASKDATA_* environment overrides, clone_mode case-insensitive
    - create_app wires a working service against a temporary database
"""

from taskdata.bootstrap import create_app, create_task_service
from taskdata.config import Settings
from taskdata.core.domain_types import CloneMode
from taskdata.models.task import Task


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("TASKDATA_DATABASE_URL", raising=False)
    settings = Settings(_env_file=None)
    assert settings.database_url == "sqlite:///tasks.sqlite3"
    assert settings.database_echo is False
    assert settings.sqlite_wal is True
    assert settings.clone_mode is CloneMode.LEGACY
    assert settings.log_level == "INFO"
    assert settings.log_format == "json"


def test_settings_env_override(monkeypatch):
    monkeypatch.setenv("TASKDATA_DATABASE_URL", "sqlite:///other.db")
    monkeypatch.setenv("TASKDATA_CLONE_MODE", "ATOMIC")
    monkeypatch.setenv("TASKDATA_LOG_FORMAT", "text")
    settings = Settings(_env_file=None)
    assert settings.database_url == "sqlite:///other.db"
    assert settings.clone_mode is CloneMode.ATOMIC
    assert settings.log_format == "text"


def test_create_app_end_to_end(tmp_path):
    settings = Settings(
        _env_file=None,
        database_url=f"sqlite:///{tmp_path / 'app.sqlite3'}",
        clone_mode="atomic",
    )
    app = create_app(settings)
    try:
        assert app.service.clone_mode is CloneMode.ATOMIC
        assert app.db.health_check()

        task = Task(title="from bootstrap")
        app.service.save(task)
        copy = app.service.clone(task)
        assert app.service.count_tasks() == 2
        assert app.service.fetch_by_id(copy.id).title == "from bootstrap"
    finally:
        app.close()


def test_create_task_service_returns_service(tmp_path):
    settings = Settings(
        _env_file=None, database_url=f"sqlite:///{tmp_path / 'svc.sqlite3'}",
    )
    service = create_task_service(settings)
    assert service.count_tasks() == 0
