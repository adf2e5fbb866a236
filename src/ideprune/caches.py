from __future__ import annotations

import logging
from pathlib import Path

from ideprune.models import CACHE_DIR, HISTORY_DIR, DeletionTask
from ideprune.versions import is_directory

LOGGER = logging.getLogger(__name__)

CACHE_DIRS = ("logs", "CachedExtensionVSIXs", "clp")
HISTORY_PARTS = ("User", "History")


def cache_tasks(server_root: Path) -> list[DeletionTask]:
    data_dir = server_root / "data"
    tasks: list[DeletionTask] = []
    for name in CACHE_DIRS:
        path = data_dir / name
        if is_directory(path):
            tasks.append(DeletionTask(path=path, label=f"cache directory {name}", kind=CACHE_DIR))
    return tasks


def history_task(server_root: Path, clean_history: bool) -> DeletionTask | None:
    """The User/History task, only when history cleanup was asked for."""
    if not clean_history:
        return None
    path = server_root.joinpath("data", *HISTORY_PARTS)
    if not is_directory(path):
        LOGGER.info("Step 4: History directory not found (%s), skipping.", path)
        return None
    LOGGER.warning("Step 4: Cleaning history directory: %s", path)
    return DeletionTask(path=path, label="history directory", kind=HISTORY_DIR)
