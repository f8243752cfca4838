"""Create the configured database and apply ``database/schema.sql`` to it.

    python scripts/init_db.py                 # settings chosen by APP_ENV
    python scripts/init_db.py --env testing   # override APP_ENV for this run
"""

from __future__ import annotations

import argparse
import importlib
import logging
import os
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.timetrack_system.timetrack_system.database.bootstrap import apply_schema, list_tables

logger = logging.getLogger("init_db")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--env", choices=("development", "testing", "production"), help="settings module to use")
    parser.add_argument(
        "--schema",
        type=Path,
        default=REPO_ROOT / "database" / "schema.sql",
        help="SQL file to apply (default: database/schema.sql)",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    load_dotenv(override=False)
    if args.env:
        os.environ["APP_ENV"] = args.env

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=args.schema)
    tables = list_tables(db_config)
    logger.info(
        "%s@%s:%s/%s now has %d tables: %s",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        len(tables),
        ", ".join(sorted(tables)),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
