"""Create the database (if needed) and apply database/schema.sql.

Usage: APP_ENV=development python scripts/init_db.py [--seed]
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.timekeeper.timekeeper.database.bootstrap import (
    apply_schema,
    apply_seed_sql,
    ensure_demo_accounts,
    list_tables,
)
from src.timekeeper.timekeeper.database.connection import DBConfig

logger = logging.getLogger("init_db")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Apply the timekeeper schema")
    parser.add_argument("--seed", action="store_true", help="also load PODs and demo accounts")
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    db_config = dict(importlib.import_module(get_settings_module()).DB_CONFIG)
    target = DBConfig.from_mapping(db_config).describe()

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    if args.seed:
        apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
        ensure_demo_accounts(db_config)

    logger.info("%s ready: %s", target, ", ".join(sorted(list_tables(db_config))))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
