import os

from .base import db_config_from_env, env_flag, env_int

# Must be provided by the environment
SECRET_KEY = os.environ["SECRET_KEY"]
DB_CONFIG = db_config_from_env(user="timekeeper")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DEFAULT_HISTORY_DAYS = env_int("DEFAULT_HISTORY_DAYS", 30)

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", False)
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", False)
