"""
Connection Engine (SQLAlchemy)

Purpose
-------
Centralizes database initialization for the application:
- Builds the SQLAlchemy connection URL from environment-backed settings.
- Creates the Engine (connection pool + SQL execution entry point).
- Defines shared MetaData and the Declarative Base for ORM models.
- `init_db()` creates missing tables (used on startup and by the test suite).

Notes
-----
- PostgreSQL is the production target (JSONB columns, full-text search).
- A sqlite URL is accepted for local runs and tests; Postgres-only DDL is
  skipped there.
"""


from sqlalchemy import JSON, create_engine
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.engine import URL
from sqlalchemy.orm import declarative_base
from sqlalchemy.schema import MetaData
from refugeeconnect.database.config.config import settings

connection_url = URL.create(
    drivername=settings.DB_DRIVER_NAME,
    username=settings.DB_USERNAME,
    password=settings.DB_PASSWORD,
    host=None if settings.DB_DRIVER_NAME.startswith("sqlite") else settings.DB_HOST,
    port=settings.DB_PORT,
    database=settings.DB_DATABASE_NAME,
)
"""Connection URL assembled from Settings."""

# sqlite connections are shared with FastAPI's worker threads
connect_args = {"check_same_thread": False} if settings.DB_DRIVER_NAME.startswith("sqlite") else {}

connection_engine = create_engine(connection_url, connect_args=connect_args, pool_pre_ping=True)
"""Engine object: core interface to the database."""

metadata = MetaData()
"""Schema-level information shared across all models."""

declarativeBase = declarative_base(metadata=metadata)
"""Root class for ORM models."""

JSONDocument = JSON().with_variant(JSONB(), "postgresql")
"""Column type for nested/list attributes: JSONB on PostgreSQL, JSON elsewhere."""


def init_db() -> None:
    """Create every table registered on `metadata` that does not exist yet."""
    from refugeeconnect.database.entities import ai_interaction, community, information, user  # noqa: F401

    metadata.create_all(connection_engine)
