import logging
import os

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

import models  # noqa: F401  (registers the tables on SQLModel.metadata)

logger = logging.getLogger(__name__)

# Get database URL from environment, default to a local SQLite file
db_path = os.getenv("DB_PATH", "./data/journal.db")
env = os.getenv("ENV", "dev").lower()

if os.getenv("DATABASE_URL"):
    DATABASE_URL = os.getenv("DATABASE_URL")
else:
    # Guard against silently writing the journal to the default file in production
    if env in ("prod", "production") and not os.getenv("DB_PATH"):
        raise RuntimeError(
            "Neither DATABASE_URL nor DB_PATH is set in production; refusing to start "
            "with the default SQLite file."
        )
    db_dir = os.path.dirname(os.path.abspath(db_path))
    os.makedirs(db_dir, exist_ok=True)
    DATABASE_URL = f"sqlite:///{db_path}"

# Some hosts hand out postgres:// but SQLAlchemy needs postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)


def _enable_sqlite_foreign_keys(dbapi_con, _con_record):
    # details rows rely on ON DELETE CASCADE, which SQLite ignores unless enabled per connection
    cursor = dbapi_con.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_engine(url: str, **kwargs) -> Engine:
    """Create an engine for ``url``.

    SQLite connections get foreign keys switched on and may be shared between
    the worker threads FastAPI runs synchronous endpoints in.
    """
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        engine = create_engine(url, echo=False, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    else:
        engine = create_engine(url, echo=False, **kwargs)

    # Log database driver for observability
    driver = url.split(":", 1)[0] if ":" in url else "unknown"
    logger.info(f"DB_URL_DRIVER={driver}")
    return engine


# Create engine
engine = make_engine(DATABASE_URL)


def create_db_and_tables(bind: Engine | None = None):
    """Create database and tables if they don't exist.
    This is safe to call multiple times - it won't wipe existing data.
    """
    SQLModel.metadata.create_all(bind if bind is not None else engine)


def get_session():
    """Get database session."""
    with Session(engine) as session:
        yield session
