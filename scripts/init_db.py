"""Create the cache table for the configured GIF search database."""

import sys

from src.gifsearch.config import GifSearchConfig
from src.gifsearch.db.db_init import create_session_factory


def main() -> int:
    config = GifSearchConfig.build_default()
    if not config.database_url:
        print("GIFSEARCH_DATABASE_URL is not set; nothing to initialize.", file=sys.stderr)
        return 1
    create_session_factory(config.database_url)
    print("Database initialized.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
