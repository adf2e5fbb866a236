from __future__ import annotations

import argparse
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from ideprune import __version__
from ideprune.config import SERVER_DIR_ENV, load_config
from ideprune.errors import ConfigurationError
from ideprune.models import Report

STATUS_STYLES = {
    "removed": "green",
    "previewed": "cyan",
    "missing": "dim",
    "denied": "yellow",
    "failed": "red",
}

EPILOG = f"""\
environment variables:
  {SERVER_DIR_ENV["vscode"]:<24}Custom VS Code Server directory path
  {SERVER_DIR_ENV["cursor"]:<24}Custom Cursor Server directory path

examples:
  ideprune --dry-run              Preview what will be cleaned
  ideprune --cursor --history     Clean Cursor including history
  ideprune --vscode --verbose     Clean VS Code with verbose output
"""


def main(
    argv: Iterable[str] | None = None,
    environ: Mapping[str, str] | None = None,
    home: Path | None = None,
) -> int:
    parser = argparse.ArgumentParser(
        prog="ideprune",
        description="Clean up old server versions, extensions and caches of an IDE server.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    ide = parser.add_mutually_exclusive_group()
    ide.add_argument(
        "-V",
        "--vscode",
        dest="ide",
        action="store_const",
        const="vscode",
        help="Clean VS Code Server related content (default)",
    )
    ide.add_argument(
        "-C",
        "--cursor",
        dest="ide",
        action="store_const",
        const="cursor",
        help="Clean Cursor IDE Server related content",
    )
    parser.set_defaults(ide="vscode")
    parser.add_argument(
        "-H",
        "--history",
        action="store_true",
        help="Clean User/History directory (Warning: will delete file history)",
    )
    parser.add_argument(
        "-d",
        "--dry-run",
        action="store_true",
        help="Preview mode, only show what will be deleted without actually deleting",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output mode")
    parser.add_argument(
        "--report",
        default=None,
        help="Write a JSON report of the run to this file",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args(list(argv) if argv is not None else None)
    configure_logging(args.verbose)

    try:
        config = load_config(
            args.ide,
            dry_run=args.dry_run,
            verbose=args.verbose,
            clean_history=args.history,
            environ=environ,
            home=home,
        )
    except ConfigurationError as exc:
        raise SystemExit(str(exc)) from exc

    report_path = Path(args.report).resolve() if args.report else None
    if report_path is not None and config.server_root in report_path.parents:
        raise SystemExit(f"Refusing to write the report inside the server directory: {report_path}")

    from ideprune.analyzer import run, write_report

    report = run(config)
    print_report(report)
    if report_path is not None:
        write_report(report_path, report)

    if report.dry_run:
        print("Preview mode completed! Remove --dry-run to actually clean up.")
    elif report.ok:
        print("All cleanup steps completed!")
    else:
        print(f"Cleanup finished with {len(report.failures)} failed deletion(s).")
    return 0 if report.ok else 1


def configure_logging(verbose: bool) -> None:
    logger = logging.getLogger("ideprune")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def print_report(report: Report) -> None:
    console = Console(highlight=False, soft_wrap=True)
    console.rule("Versions")
    console.print(f"  [dim]Binaries: {escape(report.binaries_dir or '(not found)')}[/]")
    if not report.groups:
        console.print("  [dim]No versioned directories found.[/]")
    for group in report.groups:
        console.print(
            f"  [bold]{escape(group.group_key)}[/] ({group.kind}): "
            f"{group.size} version(s), keeping [green]{escape(group.kept)}[/]"
        )
        for name in group.removed:
            console.print(f"    [red]-[/] {escape(name)}")
    console.rule("Deletions")
    if not report.outcomes:
        console.print("  [dim]Nothing to clean up.[/]")
    for item in report.outcomes:
        style = STATUS_STYLES.get(item.status, "white")
        line = f"  [{style}]{item.status:<9}[/] {escape(item.label)}: {escape(item.path)}"
        if item.error:
            line += f" [dim]({escape(item.error)})[/]"
        console.print(line)


if __name__ == "__main__":
    raise SystemExit(main())
