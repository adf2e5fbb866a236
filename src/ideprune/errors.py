from __future__ import annotations

EMPTY_PATH = "empty_path"
PROTECTED_ROOT = "protected_root"
OUTSIDE_SERVER_ROOT = "outside_server_root"


class IdePruneError(Exception):
    """Base class for errors raised by ideprune."""


class ConfigurationError(IdePruneError):
    """The server root cannot be used; raised before anything is deleted."""


class PathDenied(IdePruneError):
    """A single deletion target was refused by the path safety guard."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Refusing to delete {path!r}: {reason}")
        self.path = path
        self.reason = reason
