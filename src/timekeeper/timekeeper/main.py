from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .container import Container, build_container
from .core.exceptions import DomainError
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_accounts, list_tables
from .database.connection import DBConfig

from .attendance.controller import register as register_attendance
from .dashboard.controller import register as register_dashboard
from .employees.controller import register as register_employees
from .leave.controller import register as register_leave
from .pods.controller import register as register_pods
from .tasks.controller import register as register_tasks
from .timecards.controller import register as register_timecards

logger = logging.getLogger(__name__)

_DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(err: DomainError):
        app.logger.info("%s: %s", err.kind, err)
        return jsonify({"error": err.kind, "message": str(err)}), err.http_status

    @app.errorhandler(HTTPException)
    def handle_http_error(err: HTTPException):
        return jsonify({"error": err.name.replace(" ", ""), "message": err.description}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        app.logger.exception("Unhandled error: %s", err)
        return jsonify({"error": "InternalError", "message": "Internal Server Error"}), 500


def _prepare_database(settings, db_config: dict) -> None:
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=_DATABASE_DIR / "schema.sql")
        logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=_DATABASE_DIR / "seed.sql")
        ensure_demo_accounts(db_config)
        logger.info("demo seed ready")


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["DEFAULT_HISTORY_DAYS"] = int(getattr(settings, "DEFAULT_HISTORY_DAYS", 30))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info("settings=%s db=%s", settings_module, DBConfig.from_mapping(db_config).describe())
        _prepare_database(settings, db_config)
        container = build_container(db_config=db_config)

    _register_error_handlers(app)

    register_employees(app, container)
    register_pods(app, container)
    register_timecards(app, container)
    register_attendance(app, container)
    register_leave(app, container)
    register_tasks(app, container)
    register_dashboard(app, container)

    return app
