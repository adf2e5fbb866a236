from __future__ import annotations

from pathlib import Path

import pytest

from ideprune.config import load_config, resolve_server_root
from ideprune.errors import ConfigurationError


def test_default_root_is_under_home(tmp_path: Path) -> None:
    (tmp_path / ".vscode-server").mkdir()
    (tmp_path / ".cursor-server").mkdir()

    assert resolve_server_root("vscode", environ={}, home=tmp_path) == (tmp_path / ".vscode-server").resolve()
    assert resolve_server_root("cursor", environ={}, home=tmp_path) == (tmp_path / ".cursor-server").resolve()


def test_environment_override_wins(tmp_path: Path) -> None:
    custom = tmp_path / "custom"
    custom.mkdir()
    (tmp_path / ".cursor-server").mkdir()

    root = resolve_server_root("cursor", environ={"MY_CURSOR_SERVER_DIR": str(custom)}, home=tmp_path)

    assert root == custom.resolve()


def test_override_for_other_ide_is_ignored(tmp_path: Path) -> None:
    (tmp_path / ".vscode-server").mkdir()

    root = resolve_server_root("vscode", environ={"MY_CURSOR_SERVER_DIR": "/nowhere"}, home=tmp_path)

    assert root.name == ".vscode-server"


def test_symlinked_root_is_resolved(tmp_path: Path) -> None:
    real = tmp_path / "real-server"
    real.mkdir()
    (tmp_path / ".vscode-server").symlink_to(real, target_is_directory=True)

    assert resolve_server_root("vscode", environ={}, home=tmp_path) == real.resolve()


def test_missing_root_is_a_configuration_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Main directory not found"):
        resolve_server_root("vscode", environ={}, home=tmp_path)


def test_root_must_be_a_directory(tmp_path: Path) -> None:
    (tmp_path / ".vscode-server").write_text("not a directory")

    with pytest.raises(ConfigurationError):
        resolve_server_root("vscode", environ={}, home=tmp_path)


@pytest.mark.parametrize("protected", ["/", "/usr", "/etc"])
def test_protected_roots_are_refused(tmp_path: Path, protected: str) -> None:
    with pytest.raises(ConfigurationError, match="system critical"):
        resolve_server_root("vscode", environ={"MY_VSCODE_SERVER_DIR": protected}, home=tmp_path)


def test_home_as_root_is_refused(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="system critical"):
        resolve_server_root("vscode", environ={"MY_VSCODE_SERVER_DIR": str(tmp_path)}, home=tmp_path)


def test_unknown_ide(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Unknown IDE"):
        resolve_server_root("emacs", environ={}, home=tmp_path)


def test_load_config_carries_flags(tmp_path: Path) -> None:
    (tmp_path / ".cursor-server").mkdir()

    config = load_config("cursor", dry_run=True, clean_history=True, environ={}, home=tmp_path)

    assert config.ide == "cursor"
    assert config.dry_run is True
    assert config.clean_history is True
    assert config.verbose is False
    assert config.home_dir == tmp_path
    assert config.server_root == (tmp_path / ".cursor-server").resolve()
