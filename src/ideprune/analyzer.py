from __future__ import annotations

import json
import logging
import os
import shutil
import stat
from dataclasses import asdict
from pathlib import Path

from ideprune.caches import cache_tasks, history_task
from ideprune.config import IDE_NAMES, CleanupConfig
from ideprune.errors import PathDenied
from ideprune.models import (
    EXTENSION_VERSION,
    SERVER_GROUP,
    SERVER_VERSION,
    DeletionTask,
    GroupSummary,
    Outcome,
    Plan,
    Report,
    RetentionDecision,
)
from ideprune.retention import resolve
from ideprune.safety import authorize
from ideprune.siblings import locate_siblings
from ideprune.versions import is_directory, scan_extension_versions, scan_server_versions

LOGGER = logging.getLogger(__name__)

BINARIES_DIRS = (("bin",), ("cli", "servers"))


def locate_binaries_dir(root: Path) -> Path | None:
    for parts in BINARIES_DIRS:
        candidate = root.joinpath(*parts)
        if is_directory(candidate):
            return candidate
        LOGGER.debug("Service directory not found in %s", candidate)
    return None


def analyze(config: CleanupConfig) -> Plan:
    """Scan the server root and list every deletion a run would attempt.

    Nothing on disk is modified here; the plan is handed to execute_plan.
    """
    root = config.server_root
    LOGGER.info("Target IDE: %s", IDE_NAMES.get(config.ide, config.ide))
    tasks: list[DeletionTask] = []
    groups: list[GroupSummary] = []

    binaries_dir = locate_binaries_dir(root)
    tasks.extend(_plan_server_versions(config, binaries_dir, groups))
    tasks.extend(_plan_extension_versions(root / "extensions", groups))
    tasks.extend(_plan_data_dir(config))

    return Plan(
        server_root=str(root),
        ide=config.ide,
        binaries_dir=str(binaries_dir) if binaries_dir is not None else None,
        tasks=tasks,
        groups=groups,
    )


def _plan_server_versions(
    config: CleanupConfig,
    binaries_dir: Path | None,
    groups: list[GroupSummary],
) -> list[DeletionTask]:
    LOGGER.info("Step 1: Cleaning up old Server versions...")
    if binaries_dir is None:
        LOGGER.info(
            "Step 1: Server Binaries directory not found (neither in bin/ nor cli/servers/), skipping."
        )
        return []

    decision = resolve(scan_server_versions(binaries_dir)).get(SERVER_GROUP)
    if decision is None:
        LOGGER.info("No Server versions found in %s.", binaries_dir)
        return []
    groups.append(_summarize(decision, "server"))
    if not decision.removed:
        LOGGER.info("Only one Server version exists, no cleanup needed.")
        return []

    LOGGER.info("Keeping latest Server package: %s", decision.kept.identity)
    tasks: list[DeletionTask] = []
    for entry in decision.removed:
        LOGGER.info("Preparing to delete old version: %s", entry.identity)
        tasks.append(DeletionTask(path=entry.path, label="old Server package", kind=SERVER_VERSION))
        tasks.extend(
            locate_siblings(
                config.server_root,
                entry.identity,
                config.ide,
                kept_identity=decision.kept.identity,
            )
        )
    return tasks


def _plan_extension_versions(extensions_dir: Path, groups: list[GroupSummary]) -> list[DeletionTask]:
    if not is_directory(extensions_dir):
        LOGGER.info("Step 2: Extensions directory not found (%s), skipping.", extensions_dir)
        return []
    LOGGER.info("Step 2: Cleaning up old extension versions...")

    tasks: list[DeletionTask] = []
    for base_name, decision in resolve(scan_extension_versions(extensions_dir)).items():
        groups.append(_summarize(decision, "extension"))
        if not decision.removed:
            LOGGER.debug('"%s" has only one version, no cleanup needed.', base_name)
            continue
        LOGGER.info('Found multiple versions of "%s", keeping latest: %s', base_name, decision.kept.path.name)
        for entry in decision.removed:
            tasks.append(
                DeletionTask(path=entry.path, label="old extension version", kind=EXTENSION_VERSION)
            )
    if not tasks:
        LOGGER.info("No duplicate extension versions need cleanup.")
    return tasks


def _plan_data_dir(config: CleanupConfig) -> list[DeletionTask]:
    data_dir = config.server_root / "data"
    LOGGER.info("Step 3: Scanning data directory: %s", data_dir)
    if not is_directory(data_dir):
        LOGGER.info("Step 3: data directory not found, skipping.")
        return []

    tasks = cache_tasks(config.server_root)
    if not tasks:
        LOGGER.info("No cache directories need cleanup.")
    history = history_task(config.server_root, config.clean_history)
    if history is not None:
        tasks.append(history)
    return tasks


def _summarize(decision: RetentionDecision, kind: str) -> GroupSummary:
    return GroupSummary(
        group_key=decision.group_key,
        kind=kind,
        size=decision.size,
        kept=decision.kept.path.name,
        removed=[entry.path.name for entry in decision.removed],
    )


def execute_plan(plan: Plan, config: CleanupConfig) -> Report:
    """Authorize every task, then remove it or record it as a preview.

    A denied or failed task never stops the tasks after it.
    """
    if config.dry_run:
        LOGGER.warning("Running in preview mode, no files will actually be deleted")
    outcomes = [_execute_task(task, config) for task in plan.tasks]
    return Report(
        server_root=plan.server_root,
        binaries_dir=plan.binaries_dir,
        ide=plan.ide,
        dry_run=config.dry_run,
        outcomes=outcomes,
        groups=plan.groups,
    )


def _execute_task(task: DeletionTask, config: CleanupConfig) -> Outcome:
    path = task.path

    def outcome(status: str, executed: bool = False, error: str | None = None) -> Outcome:
        return Outcome(
            path=str(path),
            kind=task.kind,
            label=task.label,
            status=status,
            executed=executed,
            error=error,
        )

    try:
        authorize(path, config.server_root, config.home_dir)
    except PathDenied as exc:
        LOGGER.warning("%s", exc)
        return outcome("denied", error=exc.reason)

    try:
        os.lstat(path)
    except (FileNotFoundError, NotADirectoryError):
        LOGGER.debug("%s does not exist, skipping: %s", task.label, path)
        return outcome("missing")
    except OSError as exc:
        if config.dry_run:
            # dry runs never report failures
            LOGGER.warning("Cannot inspect %s: %s", path, exc)
            return outcome("previewed", error=str(exc))
        LOGGER.error("Cannot inspect %s: %s", path, exc)
        return outcome("failed", error=str(exc))

    if config.dry_run:
        LOGGER.info("[DRY RUN] Will delete %s: %s", task.label, path.name)
        return outcome("previewed")

    LOGGER.info("Deleting %s: %s", task.label, path.name)
    try:
        _remove(path)
    except OSError as exc:
        LOGGER.error("Failed to delete %s: %s", path, exc)
        return outcome("failed", error=str(exc))
    LOGGER.debug("Successfully deleted: %s", path)
    return outcome("removed", executed=True)


def _remove(path: Path) -> None:
    if stat.S_ISDIR(os.lstat(path).st_mode):
        shutil.rmtree(path)
    else:
        path.unlink()


def run(config: CleanupConfig) -> Report:
    return execute_plan(analyze(config), config)


def write_report(path: Path, report: Report) -> None:
    payload = asdict(report)
    payload["ok"] = report.ok
    path.write_text(json.dumps(payload, indent=2, sort_keys=True) + "\n")


def render_report(report: Report) -> str:
    mode = "preview" if report.dry_run else "cleanup"
    lines = [
        f"# IDE server {mode}",
        "",
        f"Root: {report.server_root}",
        f"IDE: {IDE_NAMES.get(report.ide, report.ide)}",
        f"Binaries: {report.binaries_dir or '(not found)'}",
        f"Tasks: {len(report.outcomes)}",
        "",
        "## Versions",
    ]
    if not report.groups:
        lines.append("- (none)")
    for group in report.groups:
        lines.append(f"- [{group.kind}] {group.group_key}: {group.size} version(s), keep {group.kept}")
        for name in group.removed:
            lines.append(f"  - remove {name}")
    lines.append("")
    lines.append("## Deletions")
    if not report.outcomes:
        lines.append("- (none)")
    for item in report.outcomes:
        line = f"- [{item.status}] {item.label}: {item.path}"
        if item.error:
            line += f" ({item.error})"
        lines.append(line)
    lines.append("")
    return "\n".join(lines)
