"""Companion files an old server version leaves in the server root."""

from __future__ import annotations

import logging
from pathlib import Path

from ideprune.models import SIBLING_FILE, DeletionTask
from ideprune.versions import is_regular_file

LOGGER = logging.getLogger(__name__)


def locate_siblings(
    server_root: Path,
    identity: str,
    ide: str,
    kept_identity: str | None = None,
) -> list[DeletionTask]:
    if ide == "cursor":
        # .<hash>.log, .<hash>.pid, .<hash>.token, ...
        prefix = f".{identity}"
        # A longer kept identity starting with this one owns its own files.
        kept_prefix = None
        if kept_identity and len(kept_identity) > len(identity):
            kept_prefix = f".{kept_identity}"

        def matches(name: str) -> bool:
            if kept_prefix is not None and name.startswith(kept_prefix):
                return False
            return name.startswith(prefix)

    elif ide == "vscode":
        names = {f"code-{identity}", f".cli.{identity}.log"}

        def matches(name: str) -> bool:
            return name in names

    else:
        raise ValueError(f"Unknown IDE type: {ide}")

    try:
        children = sorted(server_root.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        LOGGER.warning("Cannot list %s: %s", server_root, exc)
        return []

    tasks: list[DeletionTask] = []
    for child in children:
        if not matches(child.name) or not is_regular_file(child, follow_symlinks=False):
            continue
        tasks.append(DeletionTask(path=child, label="old associated file", kind=SIBLING_FILE))
    return tasks
