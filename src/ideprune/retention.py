from __future__ import annotations

from collections.abc import Iterable

from ideprune.models import RetentionDecision, VersionEntry


def resolve(entries: Iterable[VersionEntry]) -> dict[str, RetentionDecision]:
    """Keep the newest entry of every group and mark the rest for removal.

    Entries are ordered newest first; equal timestamps fall back to the path
    so the result does not depend on scan order or timestamp resolution.
    Groups with a single entry are returned with nothing to remove.
    """
    groups: dict[str, list[VersionEntry]] = {}
    for entry in entries:
        groups.setdefault(entry.group_key, []).append(entry)

    decisions: dict[str, RetentionDecision] = {}
    for group_key in sorted(groups):
        ordered = sorted(groups[group_key], key=lambda e: (-e.modified_at, str(e.path)))
        decisions[group_key] = RetentionDecision(
            group_key=group_key,
            kept=ordered[0],
            removed=tuple(ordered[1:]),
        )
    return decisions
