from __future__ import annotations

import importlib
from pathlib import Path
from typing import Any, Mapping, Optional

from dotenv import load_dotenv
from flask import Flask, abort, request, send_from_directory

from config import get_settings_module

from .auth.controller import register as register_auth
from .catalog.controller import register as register_catalog
from .common.http import register_error_handlers
from .common.logger import get_logger, init_logging
from .container import Container, build_container
from .core.constants import (
    DEFAULT_ADMIN_EMAIL,
    DEFAULT_ADMIN_PASSWORD,
    DEFAULT_PG_MAX_CONN,
    DEFAULT_PG_MIN_CONN,
    DEFAULT_SQLITE_PATH,
)
from .database.bootstrap import apply_schema, ensure_default_admin, list_tables
from .database.connection import open_database
from .steps.controller import register as register_steps

logger = get_logger(__name__)

DEFAULT_PUBLIC_DIR = Path(__file__).resolve().parents[2] / "public"

_SETTING_NAMES = (
    "DATABASE_URL",
    "DATABASE_SSLMODE",
    "DATABASE_POOL_MIN",
    "DATABASE_POOL_MAX",
    "SQLITE_PATH",
    "DEFAULT_ADMIN_EMAIL",
    "DEFAULT_ADMIN_PASSWORD",
    "DEBUG",
    "TESTING",
    "LOG_LEVEL",
    "PUBLIC_DIR",
)


def load_settings(overrides: Optional[Mapping[str, Any]] = None) -> dict:
    settings_module = get_settings_module()
    module = importlib.import_module(settings_module)
    settings = {name: getattr(module, name) for name in _SETTING_NAMES if hasattr(module, name)}
    settings.update(overrides or {})
    settings["SETTINGS_MODULE"] = settings_module
    return settings


def _register_spa_fallback(app: Flask, public_dir: Path) -> None:
    methods = ["GET", "POST", "PUT", "PATCH", "DELETE"]

    @app.route("/", defaults={"path": ""}, methods=methods, endpoint="spa_fallback")
    @app.route("/<path:path>", methods=methods, endpoint="spa_fallback")
    def spa_fallback(path: str):
        if request.method != "GET" or path.startswith(("api", "admin")):
            abort(404)
        if path and (public_dir / path).is_file():
            return send_from_directory(public_dir, path)
        return send_from_directory(public_dir, "index.html")


def create_app(settings: Optional[Mapping[str, Any]] = None) -> Flask:
    load_dotenv(override=False)
    config = load_settings(settings)
    init_logging(config.get("LOG_LEVEL", "INFO"))

    public_dir = Path(config.get("PUBLIC_DIR") or DEFAULT_PUBLIC_DIR)
    app = Flask(__name__, static_folder=None)
    app.config["DEBUG"] = bool(config.get("DEBUG", False))
    app.config["TESTING"] = bool(config.get("TESTING", False))

    db = open_database(
        config.get("DATABASE_URL") or None,
        sqlite_path=config.get("SQLITE_PATH") or DEFAULT_SQLITE_PATH,
        sslmode=config.get("DATABASE_SSLMODE") or None,
        min_conn=int(config.get("DATABASE_POOL_MIN") or DEFAULT_PG_MIN_CONN),
        max_conn=int(config.get("DATABASE_POOL_MAX") or DEFAULT_PG_MAX_CONN),
    )

    # Schema and seed must be complete before any route exists; failures are fatal.
    apply_schema(db)
    ensure_default_admin(
        db,
        email=config.get("DEFAULT_ADMIN_EMAIL") or DEFAULT_ADMIN_EMAIL,
        password=config.get("DEFAULT_ADMIN_PASSWORD") or DEFAULT_ADMIN_PASSWORD,
    )
    logger.debug(f"settings={config['SETTINGS_MODULE']} tables={list_tables(db)}")

    container = build_container(db=db)
    container.auth_service.purge_expired()
    app.extensions["step_challenge"] = container

    register_error_handlers(app)
    register_catalog(app, container)
    register_steps(app, container)
    register_auth(app, container)
    _register_spa_fallback(app, public_dir)

    return app


def get_container(app: Flask) -> Container:
    return app.extensions["step_challenge"]
