"""Command line interface for daggy."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence, TextIO

from .commands import find_git_root
from .config import DaggyConfig, VariantConfig
from .develop import develop_modules, raise_for_failures
from .errors import DaggyError, InvalidInputError, NotFoundError
from .scaffold import ModuleScaffolder
from .sync import ChangeRecord, generate_summary, inspect_changes, sync_changes
from .sync.operations import ALL_VARIANTS


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="daggy",
        description="Scaffold modules from templates and sync hand edits back into them",
    )
    parser.add_argument(
        "--root",
        type=Path,
        help="Repository root. Defaults to the git top level of the current directory",
    )
    parser.add_argument("--config", type=Path, help="Path to a daggy.toml or pyproject.toml")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity")
    subparsers = parser.add_subparsers(dest="command", required=True)

    create_parser = subparsers.add_parser("create", help="create a new module from a template")
    create_parser.add_argument("module", help="Hyphenated module name, e.g. my-module")
    create_parser.add_argument("--type", dest="module_type", default="full", help="Module variant to render")
    create_parser.add_argument(
        "--skip-toolchain",
        action="store_true",
        help="Only render files, do not run dagger or go",
    )

    for command, summary in (
        ("inspect", "report template drift of the reference modules"),
        ("sync", "write reference module edits back into the templates"),
    ):
        sub = subparsers.add_parser(command, help=summary)
        sub.add_argument(
            "--type",
            dest="inspect_type",
            default=ALL_VARIANTS,
            help="Variant to process: a configured variant name or 'all'",
        )
        sub.add_argument("--detailed", action="store_true", help="Include diffs in the report")
        if command == "sync":
            sub.add_argument("--dry-run", action="store_true", help="Report changes without writing them")
            sub.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")

    subparsers.add_parser("develop", help="run 'dagger develop' in every module")
    return parser


def _resolve_root(args: argparse.Namespace) -> Path:
    if args.root is not None:
        root = args.root.expanduser().resolve()
        if not root.is_dir():
            raise NotFoundError(f"repository root {root} does not exist")
        return root
    return find_git_root(Path.cwd())


def _prompt(stdin: TextIO, stdout: TextIO):
    def confirm(variant: VariantConfig, changes: Sequence[ChangeRecord]) -> bool:
        stdout.write(f"Do you want to proceed with the sync of {variant.name}? (y/N): ")
        stdout.flush()
        return stdin.readline().strip().lower() == "y"

    return confirm


def _handle_create(args: argparse.Namespace, root: Path, config: DaggyConfig) -> int:
    scaffolder = ModuleScaffolder(config, run_toolchain=not args.skip_toolchain)
    module = scaffolder.create(args.module, args.module_type, root)
    print(f"Module \"{module.name}\" initialized successfully at {module.path}")
    print("Add it to the release workflow once the module is ready for release.")
    return 0


def _handle_inspect(args: argparse.Namespace, root: Path, config: DaggyConfig) -> int:
    for report in inspect_changes(root, args.inspect_type, detailed=args.detailed, config=config):
        if not report.has_changes:
            print(f"No changes detected for {report.variant} module type")
            continue
        print(f"Changes detected for {report.variant} module type:")
        sys.stdout.write(generate_summary(report.changes, args.detailed))
    return 0


def _handle_sync(args: argparse.Namespace, root: Path, config: DaggyConfig) -> int:
    confirm = None if args.yes else _prompt(sys.stdin, sys.stdout)
    reports = sync_changes(
        root,
        args.inspect_type,
        dry_run=args.dry_run,
        detailed=args.detailed,
        confirm=confirm,
        config=config,
    )
    for report in reports:
        if not report.has_changes:
            print(f"No changes detected for {report.variant} module type")
            continue
        print(f"Changes for {report.variant} module type:")
        sys.stdout.write(generate_summary(report.changes, args.detailed))
        if args.dry_run:
            print(f"Dry run: changes would be synced for {report.variant} module type")
        elif report.applied:
            print(f"Changes synced successfully for {report.variant} module type")
        else:
            print(f"Sync cancelled for {report.variant} module type")
    return 0


def _handle_develop(args: argparse.Namespace, root: Path, config: DaggyConfig) -> int:
    report = develop_modules(root)
    for module in report.succeeded:
        print(f"Developed module: {module}")
    for module, reason in report.failed.items():
        print(f"Failed to develop module: {module} ({reason})")
    raise_for_failures(report)
    print(f"dagger develop completed for all {report.total} modules")
    return 0


_HANDLERS = {
    "create": _handle_create,
    "inspect": _handle_inspect,
    "sync": _handle_sync,
    "develop": _handle_develop,
}


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    handler = _HANDLERS[args.command]

    try:
        root = _resolve_root(args)
        config = DaggyConfig.load(args.config, root=root)
        return handler(args, root, config)
    except InvalidInputError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except NotFoundError as exc:
        print(f"error: {exc}", file=sys.stderr)
        if exc.hint:
            print(f"hint: {exc.hint}", file=sys.stderr)
        return 1
    except (DaggyError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
