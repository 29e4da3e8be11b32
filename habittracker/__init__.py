"""Habit tracker application factory and bootstrap."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Optional

from flask import Flask

from habittracker.config import STORAGE_MODE_HYBRID, config_by_name, engine_options_from_uri
from habittracker.extensions import init_extensions, jwt


def _absolute_sqlite_uri(uri: str, project_root: Path) -> str:
    """Anchor relative sqlite paths at the project root and create their folder."""
    if not uri.startswith("sqlite:///") or ":memory:" in uri:
        return uri
    db_path = project_root / uri.replace("sqlite:///", "", 1)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{db_path}"


def create_app(
    config_name: Optional[str] = None, overrides: Optional[Mapping[str, Any]] = None
) -> Flask:
    """Create and configure the habit tracker Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()
    project_root = Path(__file__).resolve().parent.parent
    instance_root = project_root / "instance"

    app = Flask(__name__, instance_path=str(instance_root), instance_relative_config=True)
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)
    if overrides:
        app.config.update(overrides)
    instance_root.mkdir(parents=True, exist_ok=True)

    # Normalize sqlite paths to absolute to avoid "unable to open database file"
    db_uri = _absolute_sqlite_uri(app.config["SQLALCHEMY_DATABASE_URI"], project_root)
    app.config["SQLALCHEMY_DATABASE_URI"] = db_uri
    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = {
        **engine_options_from_uri(db_uri),
        **(app.config.get("SQLALCHEMY_ENGINE_OPTIONS") or {}),
    }
    _configure_remote_bind(app, project_root)

    init_extensions(app)
    from habittracker.core.auth.tokens import register_token_handlers

    register_token_handlers(jwt)
    _register_blueprints(app)
    _register_error_handlers(app)
    _init_stores(app)

    @app.get("/")
    def index():
        return {
            "ok": True,
            "service": "habittracker",
            "version": app.config.get("APP_VERSION"),
            "endpoints": {
                "auth": "/auth",
                "habits": "/habits",
                "sync": "/sync",
                "health": "/health",
            },
        }, 200

    @app.get("/health")
    def health():
        from habittracker.core.storage.registry import get_stores

        return {
            "ok": True,
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": app.config.get("ENV"),
            "version": app.config.get("APP_VERSION"),
            "database": get_stores().describe(),
            "jwt_secret": "configured" if app.config.get("JWT_SECRET_KEY") else "missing",
        }, 200

    # Register CLI commands
    from habittracker.scripts.sync_habits import register_commands

    register_commands(app)

    return app


def _configure_remote_bind(app: Flask, project_root: Path) -> None:
    """Expose the cloud store as the ``remote`` bind when running hybrid."""
    from habittracker.core.storage.registry import REMOTE_BIND_KEY

    cloud_url = app.config.get("CLOUD_DATABASE_URL")
    if app.config.get("STORAGE_MODE") != STORAGE_MODE_HYBRID or not cloud_url:
        return
    cloud_url = _absolute_sqlite_uri(cloud_url, project_root)
    binds = dict(app.config.get("SQLALCHEMY_BINDS") or {})
    # Bind options do not inherit SQLALCHEMY_ENGINE_OPTIONS.
    binds[REMOTE_BIND_KEY] = {"url": cloud_url, **engine_options_from_uri(cloud_url)}
    app.config["SQLALCHEMY_BINDS"] = binds


def _init_stores(app: Flask) -> None:
    """Resolve the storage mode once and build the sync engine on top of it."""
    # Models must be imported so their tables are on the shared metadata.
    from habittracker.core.storage.registry import bootstrap_schema, build_stores
    from habittracker.core.users import models as user_models  # noqa: F401
    from habittracker.domains.habits import models as habit_models  # noqa: F401
    from habittracker.domains.sync.services import SyncEngine

    with app.app_context():
        stores = build_stores(app)
        if app.config.get("AUTO_CREATE_SCHEMA"):
            bootstrap_schema(stores)
    app.extensions["stores"] = stores
    app.extensions["sync_engine"] = SyncEngine.from_stores(stores, app.config.get("ENV"))
    app.logger.info(
        "Storage mode %s: primary=%s remote=%s", stores.mode, stores.primary, stores.remote
    )


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from habittracker.core.auth.controllers import auth_bp  # local import to avoid circulars
    from habittracker.domains.habits.controllers.habit_api import habit_api_bp
    from habittracker.domains.sync.controllers.sync_api import sync_api_bp

    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(habit_api_bp, url_prefix="/habits")
    app.register_blueprint(sync_api_bp, url_prefix="/sync")


def _register_error_handlers(app: Flask) -> None:
    """JSON error responses."""
    from werkzeug.exceptions import HTTPException

    from habittracker.core.errors import AppError, InternalError

    @app.errorhandler(AppError)
    def _app_error(exc: AppError):
        message = exc.message
        if isinstance(exc, InternalError):
            app.logger.error("Internal error: %s", exc.message)
            if not (app.debug or app.testing):
                message = exc.code
        return {"ok": False, "error": message}, exc.status_code

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return {"ok": False, "error": exc.description}, exc.code

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        # In debug/testing, surface the exception message to speed up diagnosis
        if app.debug or app.testing:
            return {"ok": False, "error": str(exc)}, 500
        return {"ok": False, "error": "unexpected_error"}, 500
