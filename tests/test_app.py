from __future__ import annotations

import json
import logging

import pytest

from mytodo.app import build_app
from mytodo.conf import Settings, settings
from mytodo.log import JSONFormatter, setup_logging
from mytodo.todo.storage import FileTaskStorage, MemoryTaskStorage


def test_build_app_wires_file_storage_from_settings() -> None:
    todo_app = build_app(settings)

    assert isinstance(todo_app.storage, FileTaskStorage)
    assert todo_app.storage.path == settings.DATA_FILE
    assert todo_app.store.storage is todo_app.storage
    assert todo_app.binding.store is todo_app.store


def test_build_app_in_memory_is_independent_per_call() -> None:
    first = build_app(settings, in_memory=True)
    first.binding.add_task("only here")

    second = build_app(settings, in_memory=True)

    assert isinstance(first.storage, MemoryTaskStorage)
    assert second.binding.tasks == ()


def test_build_app_survives_corrupt_data_file() -> None:
    settings.DATA_FILE.write_text("{broken", encoding="utf-8")

    todo_app = build_app(settings)

    assert todo_app.store.tasks == []
    assert todo_app.binding.load() is False
    assert (todo_app.binding.error_message or "").startswith("Failed to load tasks:")


def test_settings_read_prefixed_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("MYTODO_STORAGE_KEY", "work")
    monkeypatch.setenv("MYTODO_LOG_LEVEL", "debug")
    monkeypatch.setenv("MYTODO_LOG_DIR", str(tmp_path / "custom-logs"))

    s = Settings()

    assert s.STORAGE_KEY == "work"
    assert s.LOG_LEVEL == "DEBUG"
    assert s.LOG_DIR.is_dir()
    assert s.log_file.parent == s.LOG_DIR


def test_settings_reject_unknown_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MYTODO_LOG_LEVEL", "chatty")
    with pytest.raises(ValueError):
        Settings()


def test_json_formatter_emits_one_json_object() -> None:
    record = logging.LogRecord("mytodo.x", logging.INFO, __file__, 1, "hello %s", ("you",), None)

    data = json.loads(JSONFormatter().format(record))

    assert data["level"] == "INFO"
    assert data["logger"] == "mytodo.x"
    assert data["message"] == "hello you"


def test_setup_logging_writes_jsonl_file(tmp_path) -> None:
    log_file = tmp_path / "logs" / "test.jsonl"
    logger = setup_logging("ERROR", log_file)

    logging.getLogger("mytodo.todo.store").info("stored")
    for h in logger.handlers:
        h.flush()

    lines = log_file.read_text(encoding="utf-8").splitlines()
    assert json.loads(lines[-1])["message"] == "stored"
    assert len(setup_logging("ERROR", log_file).handlers) == 2
