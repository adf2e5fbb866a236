"""Recognize version-bearing directory names and scan them into entries."""

from __future__ import annotations

import logging
import os
import re
import stat
from pathlib import Path

from ideprune.models import SERVER_GROUP, ExtensionVersion, ServerVersion, VersionEntry

LOGGER = logging.getLogger(__name__)

RESERVED_SERVER_NAMES = {"multiplex-server", "cli", "stable", "insiders", "latest"}
# Patterns are applied with fullmatch.
COMMIT_HASH_RE = re.compile(r"[a-f0-9]{7,40}")
COMMIT_HASH_SUFFIX_RE = re.compile(r"[a-f0-9]{7,40}-[0-9A-Za-z._-]+")
# Greedy base: the split happens at the rightmost "-<digits>.<digits>.<digits>".
EXTENSION_RE = re.compile(r"(.+)-([0-9]+\.[0-9]+\.[0-9]+.*)")


def classify_server_name(name: str) -> ServerVersion | None:
    if name in RESERVED_SERVER_NAMES:
        return None
    if COMMIT_HASH_RE.fullmatch(name) or COMMIT_HASH_SUFFIX_RE.fullmatch(name):
        return ServerVersion(identity=name)
    return None


def classify_extension_name(name: str) -> ExtensionVersion | None:
    match = EXTENSION_RE.fullmatch(name)
    if match is None:
        return None
    return ExtensionVersion(base=match.group(1), version=match.group(2))


def read_mtime(path: Path) -> float:
    """Modification time of ``path``, or 0.0 (oldest) when it cannot be read."""
    try:
        return os.stat(path, follow_symlinks=False).st_mtime
    except OSError as exc:
        LOGGER.warning("Cannot read modification time of %s (%s); treating as oldest", path, exc)
        return 0.0


def is_directory(path: Path, follow_symlinks: bool = True) -> bool:
    """Like Path.is_dir, but an entry that cannot be inspected is skipped with a warning."""
    return _has_mode(path, stat.S_ISDIR, follow_symlinks)


def is_regular_file(path: Path, follow_symlinks: bool = True) -> bool:
    return _has_mode(path, stat.S_ISREG, follow_symlinks)


def _has_mode(path: Path, check, follow_symlinks: bool) -> bool:
    try:
        mode = os.stat(path, follow_symlinks=follow_symlinks).st_mode
    except (FileNotFoundError, NotADirectoryError):
        return False
    except OSError as exc:
        LOGGER.warning("Cannot inspect %s (%s); skipping", path, exc)
        return False
    return check(mode)


def scan_server_versions(bin_dir: Path) -> list[VersionEntry]:
    entries: list[VersionEntry] = []
    for child in _child_dirs(bin_dir):
        parsed = classify_server_name(child.name)
        if parsed is None:
            LOGGER.debug("Skipping non-version directory: %s (not a valid commit hash)", child.name)
            continue
        LOGGER.debug("Found valid server version: %s", child.name)
        entries.append(
            VersionEntry(
                identity=parsed.identity,
                group_key=SERVER_GROUP,
                path=child,
                modified_at=read_mtime(child),
            )
        )
    return entries


def scan_extension_versions(extensions_dir: Path) -> list[VersionEntry]:
    entries: list[VersionEntry] = []
    for child in _child_dirs(extensions_dir):
        parsed = classify_extension_name(child.name)
        if parsed is None:
            LOGGER.debug("Skipping extension directory without a version suffix: %s", child.name)
            continue
        entries.append(
            VersionEntry(
                identity=parsed.version,
                group_key=parsed.base,
                path=child,
                modified_at=read_mtime(child),
            )
        )
    return entries


def _child_dirs(directory: Path) -> list[Path]:
    try:
        children = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        LOGGER.warning("Cannot list %s: %s", directory, exc)
        return []
    return [child for child in children if is_directory(child, follow_symlinks=False)]
