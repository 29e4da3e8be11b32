"""Application configuration for the habit tracker."""

from __future__ import annotations

import os
from datetime import timedelta
from typing import Dict, Type

from dotenv import load_dotenv
from sqlalchemy.engine.url import make_url

load_dotenv()

STORAGE_MODE_HYBRID = "hybrid"
STORAGE_MODE_CLOUD = "cloud"


def _flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


def engine_options_from_uri(uri: str) -> dict:
    """Per-dialect engine options carrying the connect/statement timeouts."""
    url = make_url(uri)
    timeout = int(os.environ.get("DB_CONNECT_TIMEOUT_SECONDS", "10"))
    if url.get_backend_name() == "sqlite":
        return {"pool_pre_ping": True, "connect_args": {"timeout": timeout}}
    options = {
        "pool_pre_ping": True,
        "pool_size": int(os.environ.get("DB_POOL_SIZE", "10")),
        "max_overflow": int(os.environ.get("DB_MAX_OVERFLOW", "10")),
        "pool_recycle": 1800,
    }
    if url.get_backend_name() in {"postgresql", "postgres"}:
        connect_args: dict = {"connect_timeout": timeout}
        statement_ms = os.environ.get("DB_STATEMENT_TIMEOUT_MS")
        if statement_ms:
            connect_args["options"] = f"-c statement_timeout={int(statement_ms)}"
        options["connect_args"] = connect_args
    elif url.get_backend_name() == "mysql":
        options["connect_args"] = {"connect_timeout": timeout}
    return options


def _access_expiry():
    # Tokens never expire unless a lifetime is configured.
    minutes = os.environ.get("JWT_ACCESS_MINUTES")
    return timedelta(minutes=int(minutes)) if minutes else False


class BaseConfig:
    """Base configuration loaded for all environments."""

    ENV = "development"
    APP_VERSION = os.environ.get("APP_VERSION", "1.0.0")
    SECRET_KEY = os.environ.get("SECRET_KEY", "change-me")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///instance/habits.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CLOUD_DATABASE_URL = os.environ.get("CLOUD_DATABASE_URL") or None
    STORAGE_MODE = os.environ.get("STORAGE_MODE", STORAGE_MODE_HYBRID)
    AUTO_CREATE_SCHEMA = _flag("AUTO_CREATE_SCHEMA", "true")

    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", SECRET_KEY)
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_ACCESS_TOKEN_EXPIRES = _access_expiry()

    BCRYPT_LOG_ROUNDS = int(os.environ.get("BCRYPT_LOG_ROUNDS", "12"))

    RATELIMIT_DEFAULT = "200/hour"
    RATELIMIT_STORAGE_URI = os.environ.get("REDIS_URL", "memory://")
    RATELIMIT_ENABLED = _flag("RATELIMIT_ENABLED", "true")

    MAX_CONTENT_LENGTH = int(os.environ.get("MAX_CONTENT_LENGTH", str(10 * 1024 * 1024)))


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    ENV = "development"


class TestingConfig(BaseConfig):
    TESTING = True
    ENV = "testing"
    SQLALCHEMY_DATABASE_URI = os.environ.get("TEST_DATABASE_URL", "sqlite:///instance/test.db")
    CLOUD_DATABASE_URL = os.environ.get("TEST_CLOUD_DATABASE_URL", "sqlite:///instance/test-cloud.db")
    STORAGE_MODE = STORAGE_MODE_HYBRID
    JWT_SECRET_KEY = "testing-jwt-secret-with-at-least-32-bytes"
    BCRYPT_LOG_ROUNDS = 4
    RATELIMIT_ENABLED = False


class ProductionConfig(BaseConfig):
    ENV = "production"
    # Production runs against the cloud store only; there is no local replica.
    STORAGE_MODE = os.environ.get("STORAGE_MODE", STORAGE_MODE_CLOUD)
    SQLALCHEMY_DATABASE_URI = (
        os.environ.get("CLOUD_DATABASE_URL")
        or os.environ.get("DATABASE_URL")
        or BaseConfig.SQLALCHEMY_DATABASE_URI
    )
    CLOUD_DATABASE_URL = None


config_by_name: Dict[str, Type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    # CI pipelines set APP_ENV=ci; map to testing defaults.
    "ci": TestingConfig,
}
