import os

from .base import db_config_from_env

SECRET_KEY = "test-secret"
DB_CONFIG = db_config_from_env(database="timekeeper_test")

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

DEFAULT_HISTORY_DAYS = 30

# Tests run against in-memory repositories
AUTO_INIT_DB = False
AUTO_SEED_DB = False
