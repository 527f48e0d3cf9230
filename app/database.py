# app/database.py
"""
Database connection, session management, and schema checks.
Uses SQLAlchemy with MySQL (PyMySQL driver). SQLite URLs are accepted for
local development and tests.

The schema is owned out-of-band (scripts/setup/init_db.py). On startup the
app only verifies that every mapped table and column exists, unless
SCHEMA_MODE=create.
"""

from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from app.config import settings


def _engine_options() -> dict:
    if settings.is_sqlite:
        # One shared connection so in-memory databases survive across sessions
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    return {
        "pool_pre_ping": True,          # Auto-reconnect if DB connection drops
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_recycle": 3600,           # MySQL closes idle connections after wait_timeout
    }


engine = create_engine(settings.DATABASE_URL, echo=False, **_engine_options())

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


class SchemaMismatchError(RuntimeError):
    """Raised at startup when the database does not match the mapped models."""


def get_db():
    """FastAPI dependency — yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _load_models():
    # Registers every model on Base.metadata
    import app.models  # noqa


def create_tables(bind=None):
    """Creates all missing tables. Safe to call multiple times."""
    _load_models()
    Base.metadata.create_all(bind=bind or engine)


def verify_schema(bind=None) -> None:
    """
    Compare the live database against Base.metadata.
    Raises SchemaMismatchError listing every missing table or column.
    """
    _load_models()
    inspector = inspect(bind or engine)
    existing_tables = set(inspector.get_table_names())
    problems = []

    for table in Base.metadata.sorted_tables:
        if table.name not in existing_tables:
            problems.append(f"missing table '{table.name}'")
            continue
        live_columns = {col["name"] for col in inspector.get_columns(table.name)}
        for column in table.columns:
            if column.name not in live_columns:
                problems.append(f"missing column '{table.name}.{column.name}'")

    if problems:
        raise SchemaMismatchError("Database schema mismatch: " + "; ".join(problems))
