from __future__ import annotations

import logging
from pathlib import Path

import pytest

from ideprune.caches import cache_tasks, history_task
from ideprune.models import CACHE_DIR, HISTORY_DIR


def test_cache_tasks_only_for_existing_directories(tmp_path: Path) -> None:
    (tmp_path / "data" / "logs").mkdir(parents=True)
    (tmp_path / "data" / "clp").mkdir()
    (tmp_path / "data" / "CachedExtensionVSIXs").write_text("not a directory")

    tasks = cache_tasks(tmp_path)

    assert [t.path.name for t in tasks] == ["logs", "clp"]
    assert {t.kind for t in tasks} == {CACHE_DIR}
    assert tasks[0].label == "cache directory logs"


def test_cache_tasks_without_data_dir(tmp_path: Path) -> None:
    assert cache_tasks(tmp_path) == []


def test_history_task_requires_flag(tmp_path: Path) -> None:
    history = tmp_path / "data" / "User" / "History"
    history.mkdir(parents=True)

    assert history_task(tmp_path, clean_history=False) is None

    task = history_task(tmp_path, clean_history=True)
    assert task is not None
    assert task.path == history
    assert task.kind == HISTORY_DIR


def test_missing_history_is_informational(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="ideprune")

    assert history_task(tmp_path, clean_history=True) is None

    records = [r for r in caplog.records if "History directory not found" in r.getMessage()]
    assert records and all(r.levelno == logging.INFO for r in records)
