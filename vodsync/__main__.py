#!/usr/bin/env python3
"""
CLI entry point for the vodsync worker.

The worker uploads downloaded episodes to the video store, records them in
the catalog database, pulls transcoded quality tiers back into the catalog
and (optionally) announces new episodes on Weibo. It polls forever; stop it
with Ctrl+C or SIGTERM.

Usage:
    python -m vodsync                  # Run the scheduler loop forever
    python -m vodsync --once           # Run a single cycle and exit
    python -m vodsync --status         # Show the work queues and last log line
    python -m vodsync --init-db        # Create the database tables
    python -m vodsync --local --once   # Use the local filesystem store
"""

import argparse
import signal
import sys
import threading

from rich.console import Console
from rich.table import Table

from vodsync.config import ConfigError, SyncConfig
from vodsync.db import Database
from vodsync.logger import enable_console_output, log_path_for, setup_logging
from vodsync.pipeline import build_worker, last_log_line, queue_status
from vodsync.remote import RetryCancelled

console = Console()

PIPELINE_LOGGERS = [
    "scheduler",
    "quality",
    "share",
    "upload",
    "catalog",
    "title_resolver",
    "file_matcher",
    "remote_guard",
    "storage",
    "database",
]


def parse_arguments(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Upload downloaded episodes and reconcile their remote quality tiers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Configuration is read from the environment (and .env):
  DOWNLOAD_FOLDER, REGEX_PATTERN, DATABASE_URL, STORAGE_BACKEND,
  BUCKET_NAME, BUCKET_ENDPOINT, BUCKET_KEY_ID, BUCKET_ACCESS_KEY,
  SHARE_TO_WEIBO, WEIBO_ACCESS_TOKEN, EN_SITE, ZH_SITE, RU_SITE,
  SYNC_INTERVAL_SECONDS, RETRY_BASE_DELAY, RETRY_MAX_DELAY, LOG_DIR

Examples:
  python -m vodsync --init-db
  python -m vodsync --once --verbose
  python -m vodsync --status
        """,
    )
    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--once", action="store_true", help="Run a single cycle and exit"
    )
    mode_group.add_argument(
        "--status", action="store_true", help="Show queued work and exit"
    )
    mode_group.add_argument(
        "--init-db", action="store_true", help="Create database tables and exit"
    )

    storage_group = parser.add_mutually_exclusive_group()
    storage_group.add_argument(
        "--local", action="store_true", help="Use the local filesystem video store"
    )
    storage_group.add_argument(
        "--cloud", action="store_true", help="Use the S3-compatible video store"
    )

    parser.add_argument("--env-file", help="Read settings from this .env file")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log to the console as well"
    )
    return parser.parse_args(argv)


def print_status(config: SyncConfig) -> None:
    db = Database(config.database_url)
    status = queue_status(db)
    for name, items in status.items():
        table = Table(title=f"{name} ({len(items)})")
        table.add_column("Title")
        table.add_column("Episode")
        table.add_column("Localized")
        table.add_column("Catalog id", style="dim")
        for item in items:
            table.add_row(item.title, item.episode_label, item.zh_tw or "", item.catalog_id)
        console.print(table)

    last_line = last_log_line(log_path_for("scheduler", config.log_dir))
    console.print(f"[bold]Last log:[/bold] {last_line or '(no log yet)'}")


def install_signal_handlers(cancel_event: threading.Event) -> None:
    def request_stop(signum, frame):
        console.print("[yellow]Stopping after the current step...[/yellow]")
        cancel_event.set()

    signal.signal(signal.SIGINT, request_stop)
    signal.signal(signal.SIGTERM, request_stop)


def main(argv=None) -> int:
    args = parse_arguments(argv)
    backend = "local" if args.local else "cloud" if args.cloud else None

    try:
        config = SyncConfig.from_env(
            args.env_file,
            backend=backend,
            worker=not (args.init_db or args.status),
        )
    except ConfigError as e:
        console.print(f"[red]✗ Configuration error:[/red] {e}")
        return 2

    logger = setup_logging(logger_name="scheduler", verbose=args.verbose)
    if args.verbose:
        enable_console_output(PIPELINE_LOGGERS)

    try:
        if args.init_db:
            ok = Database(config.database_url).init_database()
            console.print("✓ Database ready" if ok else "[red]✗ Database init failed[/red]")
            return 0 if ok else 1

        if args.status:
            print_status(config)
            return 0

        cancel_event = threading.Event()
        install_signal_handlers(cancel_event)
        worker = build_worker(config, cancel_event)

        if args.once:
            try:
                results = worker.run_cycle()
            except RetryCancelled as e:
                logger.info(f"Cycle interrupted: {e}")
                return 130
            console.print(results)
            return 0

        console.print("Running... (Ctrl+C to stop)")
        worker.run_forever()
        return 0

    except Exception as e:
        logger.error(f"Worker failed: {e}", exc_info=True)
        console.print(f"[red]✗ Worker failed:[/red] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
