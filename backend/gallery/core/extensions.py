"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from flask import Flask, current_app
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

if TYPE_CHECKING:
    from gallery.services._shared.ports.object_storage import ObjectStorage

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
jwt = JWTManager()
limiter = Limiter(key_func=get_remote_address)


@jwt.decode_key_loader
def _decode_key(jwt_header: dict[str, Any], jwt_payload: dict[str, Any]) -> str:
    """Pick the verification secret from the (still unverified) token type.

    A token claiming the wrong type is checked against the other secret and
    therefore fails signature verification.
    """
    if jwt_payload.get("type") == "refresh":
        return str(current_app.config["REFRESH_TOKEN_SECRET"])
    return str(current_app.config["ACCESS_TOKEN_SECRET"])


def _build_object_storage(app: Flask) -> ObjectStorage:
    """Instantiate the object storage adapter selected by ``STORAGE_BACKEND``."""
    from gallery.services._shared.ports.object_storage import InMemoryObjectStorage

    backend = str(app.config.get("STORAGE_BACKEND", "gcs")).lower()
    bucket_name = str(app.config.get("FILES_BUCKET_NAME") or "local")
    if backend == "gcs":
        # Imported lazily so the Google SDK is only loaded when configured
        from gallery.infra.gcs.gcs_object_storage import GCSObjectStorage

        return GCSObjectStorage(
            bucket_name=bucket_name,
            project_id=app.config.get("GOOGLE_CLOUD_PROJECT"),
        )
    return InMemoryObjectStorage(bucket_name=bucket_name)


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations, JWT guards, rate limiting and storage.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`gallery.models` package to ensure SQLAlchemy metadata is ready for
        migrations.
    """
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from gallery import models as _models  # noqa: F401

    migrate.init_app(app, db)
    jwt.init_app(app)
    limiter.init_app(app)

    app.extensions["object_storage"] = _build_object_storage(app)


def get_object_storage() -> ObjectStorage:
    """Return the object storage adapter bound to the current application."""
    storage = current_app.extensions.get("object_storage")
    if storage is None:
        raise RuntimeError("Object storage is not initialized. Call init_app() first.")
    return storage
