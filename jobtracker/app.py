import argparse
from pathlib import Path
from typing import List, Optional

from . import __version__
from .database import SqliteJobStore
from .env import Settings, load_env
from .errors import JobTrackerError
from .export import export_to_file
from .logger import get_logger
from .models import ExportFormat, Job


def _open_store(args: argparse.Namespace) -> SqliteJobStore:
    return SqliteJobStore(Path(args.db).expanduser())


def _print_job(job: Job) -> None:
    print(f"ID: {job.id}")
    print(f"  Title: {job.title}")
    print(f"  Description: {job.description}")
    print(f"  Created: {job.created_at.strftime('%Y-%m-%d %H:%M:%S')}")


def cmd_add(args: argparse.Namespace) -> None:
    store = _open_store(args)
    try:
        job = store.create(args.title, args.description)
    finally:
        store.close()
    print(f"Job added: {job.id}")


def cmd_show(args: argparse.Namespace) -> None:
    store = _open_store(args)
    try:
        job = store.get(args.id)
    finally:
        store.close()
    _print_job(job)


def cmd_list(args: argparse.Namespace) -> None:
    store = _open_store(args)
    try:
        jobs = store.list()
    finally:
        store.close()
    if not jobs:
        print("No jobs in store.")
        return
    print(f"Found {len(jobs)} jobs in {args.db}:\n")
    for job in jobs:
        _print_job(job)
        print()


def cmd_remove(args: argparse.Namespace) -> None:
    store = _open_store(args)
    try:
        store.delete(args.id)
    finally:
        store.close()
    print(f"Job removed: {args.id}")


def cmd_export(args: argparse.Namespace) -> None:
    fmt = ExportFormat.parse(args.format)
    target = Path(args.file) if args.file else Path(fmt.filename)
    store = _open_store(args)
    try:
        path = export_to_file(store, fmt, target)
    finally:
        store.close()
    print(f"Jobs exported successfully to {path}")


def cmd_clear(args: argparse.Namespace) -> None:
    store = _open_store(args)
    try:
        removed = store.clear()
    finally:
        store.close()
    print(f"Store cleared: {removed} jobs removed")


def main(argv: Optional[List[str]] = None):
    # Load .env if present (JOBTRACKER_DB, JOBTRACKER_LOG_LEVEL, etc.)
    load_env()
    settings = Settings.from_env()
    logger = get_logger(
        level=settings.log_level,
        log_dir=settings.log_dir,
        enable_file=settings.log_to_file,
    )

    parser = argparse.ArgumentParser(prog="jobtracker", description="Track job listings and export them as JSON or CSV")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--db", default=str(settings.db_path), help=f"Path to SQLite database (default: {settings.db_path})")

    subparsers = parser.add_subparsers(dest="command")
    add = subparsers.add_parser("add", help="Add a new job with a title and an optional description")
    add.add_argument("title", help="Job title")
    add.add_argument("description", nargs="?", default="", help="Job description")
    add.set_defaults(func=cmd_add)

    show = subparsers.add_parser("show", help="Show a single job by its id")
    show.add_argument("id", type=int, help="Job id")
    show.set_defaults(func=cmd_show)

    lst = subparsers.add_parser("list", help="List all jobs")
    lst.set_defaults(func=cmd_list)

    rm = subparsers.add_parser("remove", help="Remove a job by its id")
    rm.add_argument("id", type=int, help="Job id")
    rm.set_defaults(func=cmd_remove)

    exp = subparsers.add_parser("export", help="Export all jobs to a file")
    exp.add_argument("--format", default="json", help="Format of the exported file. Options: json, csv")
    exp.add_argument("--file", help="File to export jobs to (default: jobs.json or jobs.csv)")
    exp.set_defaults(func=cmd_export)

    clr = subparsers.add_parser("clear", help="Remove every job from the database")
    clr.set_defaults(func=cmd_clear)

    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        try:
            args.func(args)
        except JobTrackerError as e:
            logger.error(f"{args.command} failed", error=e.message)
            raise SystemExit(e.message)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
