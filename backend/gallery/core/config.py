"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Any, Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

DEFAULT_ACCESS_SECRET: Final[str] = "CHANGE_ME_ACCESS"
DEFAULT_REFRESH_SECRET: Final[str] = "CHANGE_ME_REFRESH"

# Loads .env in development (no-op when the file is missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_seconds(name: str, default: int) -> timedelta:
    """Read a lifetime expressed in seconds and return it as a ``timedelta``.

    Parameters
    ----------
    name: str
        Environment variable holding an integer number of seconds.
    default: int
        Seconds used when the variable is unset or blank.

    Returns
    -------
    datetime.timedelta
        Parsed lifetime.

    Raises
    ------
    ValueError
        If the variable is set but not a positive integer.
    """
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return timedelta(seconds=default)
    seconds = int(raw)
    if seconds <= 0:
        raise ValueError(f"{name} must be a positive number of seconds.")
    return timedelta(seconds=seconds)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints (empty mounts at ``/``).
    SECRET_KEY: str
        Flask secret used for session signing.
    ACCESS_TOKEN_SECRET: str
        HMAC secret signing short-lived access tokens.
    ACCESS_TOKEN_EXPIRES: timedelta
        Access token lifetime (``ACCESS_TOKEN_EXPIRES`` seconds, default 15 min).
    REFRESH_TOKEN_SECRET: str
        HMAC secret signing refresh tokens. Must differ from the access secret.
    REFRESH_TOKEN_EXPIRES: timedelta
        Refresh token lifetime (``REFRESH_TOKEN_EXPIRES`` seconds, default 7 days).
    JWT_ALGORITHM: str
        Signing algorithm shared by issuance and ``flask-jwt-extended`` guards.
    STORAGE_BACKEND: str
        ``"gcs"`` for Google Cloud Storage or ``"memory"`` for a process-local
        store.
    FILES_BUCKET_NAME: str
        Bucket receiving uploaded objects.
    GOOGLE_CLOUD_PROJECT: str | None
        Optional GCP project for the storage client.
    UPLOAD_MAX_WORKERS: int
        Thread pool size used by the multi-image upload fan-out.
    MAX_CONTENT_LENGTH: int
        Request body cap enforced by Werkzeug (10 files x 5 MiB plus form
        overhead).
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.
    AUTH_LOGIN_RATE_LIMIT: str
        Flask-Limiter expression applied to the login endpoint.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    APP_ENV = os.getenv(ENV_VAR, "development").strip().lower()
    API_BASE_PREFIX = os.getenv("API_BASE_PREFIX", "")

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET", DEFAULT_ACCESS_SECRET)
    ACCESS_TOKEN_EXPIRES = env_seconds("ACCESS_TOKEN_EXPIRES", 15 * 60)
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET", DEFAULT_REFRESH_SECRET)
    REFRESH_TOKEN_EXPIRES = env_seconds("REFRESH_TOKEN_EXPIRES", 7 * 24 * 3600)
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

    # flask-jwt-extended (guards only; keys come from the decode key loader)
    JWT_SECRET_KEY = ACCESS_TOKEN_SECRET
    JWT_TOKEN_LOCATION = ["headers"]

    # Object storage
    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "gcs").strip().lower()
    FILES_BUCKET_NAME = os.getenv("FILES_BUCKET_NAME", "")
    GOOGLE_CLOUD_PROJECT = os.getenv("GOOGLE_CLOUD_PROJECT")
    UPLOAD_MAX_WORKERS = int(os.getenv("UPLOAD_MAX_WORKERS", "4"))
    MAX_CONTENT_LENGTH = 64 * 1024 * 1024

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    # Rate limiting
    AUTH_LOGIN_RATE_LIMIT = os.getenv("AUTH_LOGIN_RATE_LIMIT", "5 per minute")
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_ENABLED = env_bool("RATELIMIT_ENABLED", True)

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default and keeps uploads in memory unless
    ``STORAGE_BACKEND=gcs`` is exported explicitly.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory").strip().lower()
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables rate limiting.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Stores uploads in memory and uses fixed, distinct token secrets.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    ACCESS_TOKEN_SECRET = "test-access-secret"
    REFRESH_TOKEN_SECRET = "test-refresh-secret"
    JWT_SECRET_KEY = ACCESS_TOKEN_SECRET
    STORAGE_BACKEND = "memory"
    FILES_BUCKET_NAME = "test-bucket"
    RATELIMIT_ENABLED = False
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled. Secrets and the bucket name are
    checked by :func:`validate_config` when the app is created.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


def validate_config(config: Mapping[str, Any]) -> None:
    """Fail fast on settings that would make the service unsafe or unusable.

    Parameters
    ----------
    config: Mapping[str, Any]
        Loaded Flask configuration.

    Raises
    ------
    RuntimeError
        When token secrets are missing, left at their placeholders outside
        debug/testing, or identical; or when the GCS backend has no bucket.
    """
    access = config.get("ACCESS_TOKEN_SECRET")
    refresh = config.get("REFRESH_TOKEN_SECRET")
    if not access or not refresh:
        raise RuntimeError("ACCESS_TOKEN_SECRET and REFRESH_TOKEN_SECRET are required.")
    if access == refresh:
        raise RuntimeError("Access and refresh token secrets must be different.")

    relaxed = bool(config.get("DEBUG")) or bool(config.get("TESTING"))
    if not relaxed and {access, refresh} & {DEFAULT_ACCESS_SECRET, DEFAULT_REFRESH_SECRET}:
        raise RuntimeError("Token secrets must be overridden outside development.")

    backend = str(config.get("STORAGE_BACKEND", "gcs")).lower()
    if backend not in {"gcs", "memory"}:
        raise RuntimeError(f"Unknown STORAGE_BACKEND {backend!r}.")
    if backend == "gcs" and not config.get("FILES_BUCKET_NAME"):
        raise RuntimeError("FILES_BUCKET_NAME is required for the GCS storage backend.")
