"""Reclaim disk space from VS Code / Cursor remote server installations."""

__version__ = "0.1.0"
