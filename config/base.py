"""Environment parsing shared by the settings modules."""

import os


def env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw else default


def db_config_from_env(*, user: str = "root", database: str = "timekeeper") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": env_int("DB_PORT", 3306),
        "user": os.getenv("DB_USER", user),
        "password": os.getenv("DB_PASSWORD", ""),
        "database": os.getenv("DB_NAME", database),
    }
