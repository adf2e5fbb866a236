from __future__ import annotations

import os
from pathlib import Path

from ideprune.config import PROTECTED_DIRS
from ideprune.errors import EMPTY_PATH, OUTSIDE_SERVER_ROOT, PROTECTED_ROOT, PathDenied


def authorize(path: Path | str, server_root: Path | str, home_dir: Path | str) -> None:
    """Raise PathDenied unless ``path`` may be deleted.

    Containment is lexical: ``..`` segments are collapsed but symlinks are not
    followed, so a link inside the root is judged by where it sits, not by
    what it points to.
    """
    raw = str(path)
    if not raw:
        raise PathDenied(raw, EMPTY_PATH)

    target = _normalize(raw)
    if target in PROTECTED_DIRS or target == _normalize(str(home_dir)):
        raise PathDenied(raw, PROTECTED_ROOT)

    root = _normalize(str(server_root))
    if not _is_within(Path(root), Path(target)):
        raise PathDenied(raw, OUTSIDE_SERVER_ROOT)


def _normalize(raw: str) -> str:
    return os.path.normpath(os.path.abspath(raw))


def _is_within(base: Path, target: Path) -> bool:
    return base in target.parents
