from __future__ import annotations

from pathlib import Path

import pytest

from ideprune.errors import EMPTY_PATH, OUTSIDE_SERVER_ROOT, PROTECTED_ROOT, PathDenied
from ideprune.safety import authorize

HOME = Path("/home/dev")
ROOT = HOME / ".vscode-server"


def _reason(path: Path | str, root: Path | str = ROOT, home: Path | str = HOME) -> str:
    with pytest.raises(PathDenied) as excinfo:
        authorize(path, root, home)
    return excinfo.value.reason


def test_authorizes_descendants() -> None:
    authorize(ROOT / "bin" / "abc1234", ROOT, HOME)
    authorize(ROOT / ".abc1234.log", ROOT, HOME)


def test_denies_empty_path() -> None:
    assert _reason("") == EMPTY_PATH


@pytest.mark.parametrize("root", [ROOT, Path("/"), HOME])
def test_denies_home_and_filesystem_root_for_any_server_root(root: Path) -> None:
    assert _reason("/", root=root) == PROTECTED_ROOT
    assert _reason(HOME, root=root) == PROTECTED_ROOT
    assert _reason(str(HOME) + "/", root=root) == PROTECTED_ROOT


def test_denies_system_directories() -> None:
    assert _reason("/usr", root="/") == PROTECTED_ROOT
    assert _reason("/etc", root="/") == PROTECTED_ROOT


def test_denies_server_root_itself() -> None:
    assert _reason(ROOT) == OUTSIDE_SERVER_ROOT


def test_denies_paths_outside_server_root(tmp_path: Path) -> None:
    outside = tmp_path / "real-file"
    outside.write_text("exists on disk")

    assert _reason(outside) == OUTSIDE_SERVER_ROOT
    assert _reason(HOME / ".vscode-server-old" / "bin") == OUTSIDE_SERVER_ROOT
    assert _reason(ROOT / ".." / ".bashrc") == OUTSIDE_SERVER_ROOT


def test_denial_message_names_path() -> None:
    with pytest.raises(PathDenied, match="outside_server_root"):
        authorize("/tmp/x", ROOT, HOME)
