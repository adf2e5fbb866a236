from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

SERVER_GROUP = "server"

SERVER_VERSION = "server_version"
SIBLING_FILE = "sibling_file"
EXTENSION_VERSION = "extension_version"
CACHE_DIR = "cache_dir"
HISTORY_DIR = "history_dir"


@dataclass(frozen=True)
class ServerVersion:
    identity: str


@dataclass(frozen=True)
class ExtensionVersion:
    base: str
    version: str


@dataclass(frozen=True)
class VersionEntry:
    identity: str
    group_key: str
    path: Path
    modified_at: float


@dataclass(frozen=True)
class RetentionDecision:
    group_key: str
    kept: VersionEntry
    removed: tuple[VersionEntry, ...] = ()

    @property
    def size(self) -> int:
        return 1 + len(self.removed)


@dataclass(frozen=True)
class DeletionTask:
    path: Path
    label: str
    kind: str  # one of the *_VERSION / *_FILE / *_DIR constants above


@dataclass(frozen=True)
class Outcome:
    path: str
    kind: str
    label: str
    status: str  # "removed", "previewed", "denied", "missing" or "failed"
    executed: bool
    error: str | None = None


@dataclass(frozen=True)
class GroupSummary:
    group_key: str
    kind: str  # "server" or "extension"
    size: int
    kept: str
    removed: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Plan:
    server_root: str
    ide: str
    binaries_dir: str | None
    tasks: list[DeletionTask]
    groups: list[GroupSummary]


@dataclass(frozen=True)
class Report:
    server_root: str
    binaries_dir: str | None
    ide: str
    dry_run: bool
    outcomes: list[Outcome]
    groups: list[GroupSummary]

    @property
    def failures(self) -> list[Outcome]:
        return [o for o in self.outcomes if o.status == "failed"]

    @property
    def denials(self) -> list[Outcome]:
        return [o for o in self.outcomes if o.status == "denied"]

    @property
    def ok(self) -> bool:
        return not self.failures
