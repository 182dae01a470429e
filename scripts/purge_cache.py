"""Cron entry point for deleting expired cache entries."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from datetime import datetime

from src.gifsearch.cache.sql import SqlCache
from src.gifsearch.config import GifSearchConfig
from src.gifsearch.db.db_init import create_session_factory
from src.gifsearch.logging import configure_logging


@dataclass(slots=True)
class PurgeSummary:
    entries_removed: int
    dry_run: bool


def perform_purge(*, dry_run: bool, reference_time: datetime | None = None) -> PurgeSummary:
    """Delete (or count, on dry run) expired cache rows."""
    config = GifSearchConfig.build_default()
    if not config.database_url:
        raise RuntimeError("GIFSEARCH_DATABASE_URL is not set")
    cache = SqlCache(create_session_factory(config.database_url))

    if dry_run:
        return PurgeSummary(entries_removed=cache.count_expired(reference_time), dry_run=True)
    return PurgeSummary(entries_removed=cache.purge_expired(reference_time), dry_run=False)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Purge expired GIF search cache entries.")
    parser.add_argument("--dry-run", action="store_true", help="Only report counts without deleting rows.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv or [])
    configure_logging()
    try:
        summary = perform_purge(dry_run=args.dry_run)
    except Exception as exc:
        print(f"purge failed: {exc}", file=sys.stderr)
        return 2

    if summary.dry_run:
        print(f"purge dry-run, entries_expired={summary.entries_removed}", file=sys.stdout)
    else:
        print(f"purge done, entries_removed={summary.entries_removed}", file=sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
