"""Runtime configuration: which IDE, which server root, which flags."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from ideprune.errors import ConfigurationError
from ideprune.versions import is_directory

LOGGER = logging.getLogger(__name__)

IDE_TYPES = ("vscode", "cursor")
IDE_NAMES = {"vscode": "VS Code", "cursor": "Cursor"}
DEFAULT_SERVER_DIRS = {"vscode": ".vscode-server", "cursor": ".cursor-server"}
SERVER_DIR_ENV = {"vscode": "MY_VSCODE_SERVER_DIR", "cursor": "MY_CURSOR_SERVER_DIR"}
PROTECTED_DIRS = frozenset(
    {"/", "/bin", "/sbin", "/usr", "/etc", "/var", "/home", "/root"}
)


@dataclass(frozen=True)
class CleanupConfig:
    ide: str
    server_root: Path
    home_dir: Path
    dry_run: bool = False
    verbose: bool = False
    clean_history: bool = False


def resolve_server_root(
    ide: str,
    environ: Mapping[str, str] | None = None,
    home: Path | None = None,
) -> Path:
    if ide not in IDE_TYPES:
        raise ConfigurationError(f"Unknown IDE type: {ide}")
    environ = os.environ if environ is None else environ
    home = Path.home() if home is None else home

    override = environ.get(SERVER_DIR_ENV[ide], "")
    if override:
        candidate = Path(override).expanduser()
    else:
        candidate = home / DEFAULT_SERVER_DIRS[ide]
    LOGGER.info("Using server main directory: %s", candidate)

    try:
        root = candidate.resolve()
    except (OSError, RuntimeError) as exc:
        raise ConfigurationError(f"Cannot resolve server directory {candidate}: {exc}") from exc
    if not is_directory(root):
        raise ConfigurationError(
            f"Main directory not found: {root}. Please confirm the IDE server is "
            f"installed, or set {SERVER_DIR_ENV[ide]} to the correct path."
        )
    if str(root) in PROTECTED_DIRS or root == home.resolve():
        raise ConfigurationError(
            f"Refusing to operate on system critical directory: {root}"
        )
    return root


def load_config(
    ide: str = "vscode",
    *,
    dry_run: bool = False,
    verbose: bool = False,
    clean_history: bool = False,
    environ: Mapping[str, str] | None = None,
    home: Path | None = None,
) -> CleanupConfig:
    home = Path.home() if home is None else home
    server_root = resolve_server_root(ide, environ=environ, home=home)
    return CleanupConfig(
        ide=ide,
        server_root=server_root,
        home_dir=home,
        dry_run=dry_run,
        verbose=verbose,
        clean_history=clean_history,
    )
