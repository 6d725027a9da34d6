from __future__ import annotations

import importlib
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.logging_config import configure_logging, get_logger
from .container import Container, build_container
from .core.exceptions import (
    ConcurrentUpdateError,
    DomainError,
    InconsistentLedgerError,
    NotFoundError,
    PolicyViolationError,
)
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .database.connection import DBConfig
from .leave.controller import register as register_leave
from .payroll.controller import register as register_payroll
from .settings import EngineSettings
from .violations.controller import register as register_violations

logger = get_logger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def _status_for(exc: DomainError) -> int:
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, (PolicyViolationError, InconsistentLedgerError, ConcurrentUpdateError)):
        return 409
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        body = {"error": str(exc), "type": type(exc).__name__}
        if isinstance(exc, PolicyViolationError):
            body.update({"year": exc.year, "quarter": exc.quarter, "cap": exc.cap})
        return jsonify(body), _status_for(exc)


def create_app(*, container: Container | None = None, settings: EngineSettings | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    if settings is None:
        settings_module = get_settings_module()
        settings = EngineSettings.from_module(importlib.import_module(settings_module))
    configure_logging(level=settings.log_level)
    app.config["DEBUG"] = settings.debug

    if container is None:
        db_config = dict(settings.db_config)
        logger.info("starting", extra={"db": DBConfig.from_dict(db_config).describe()})
        if settings.auto_init_db:
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("schema ready", extra={"tables": len(list_tables(db_config))})
        if settings.auto_seed_db:
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
        container = build_container(settings=settings)

    register_error_handlers(app)
    register_payroll(app, container)
    register_attendance(app, container)
    register_leave(app, container)
    register_violations(app, container)

    return app
