"""Load database/seed.sql and (re)set the demo logins on an existing schema."""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.timekeeper.timekeeper.database.bootstrap import DEMO_ACCOUNTS, apply_seed_sql, ensure_demo_accounts
from src.timekeeper.timekeeper.database.connection import DBConfig

logger = logging.getLogger("seed_db")


def main() -> int:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    db_config = dict(importlib.import_module(get_settings_module()).DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    ensure_demo_accounts(db_config)

    for _, _, email, password, role, _, _ in DEMO_ACCOUNTS:
        logger.info("%-8s %s / %s", role, email, password)
    logger.info("Seeded %s", DBConfig.from_mapping(db_config).describe())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
