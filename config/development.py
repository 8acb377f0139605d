import os

from .base import db_config_from_env, env_flag, env_int

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
DB_CONFIG = db_config_from_env()

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Days of timecard history returned when no range is given
DEFAULT_HISTORY_DAYS = env_int("DEFAULT_HISTORY_DAYS", 30)

# schema.sql only uses CREATE TABLE IF NOT EXISTS, so re-applying it is harmless
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", True)
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", False)
