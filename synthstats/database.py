"""
Database connection and session management.
"""
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from synthstats.config import settings
from typing import Generator

# Database URL (PostgreSQL or SQLite)
SQLALCHEMY_DATABASE_URL = settings.database_url


def build_engine(url: str = SQLALCHEMY_DATABASE_URL, **kwargs) -> Engine:
    """Create an engine with the settings appropriate for its backend."""
    if url.startswith("postgresql"):
        return create_engine(
            url,
            echo=False,
            pool_pre_ping=True,
            pool_size=5,
            max_overflow=10,
            **kwargs
        )

    connect_args = kwargs.pop("connect_args", {})
    connect_args.setdefault("check_same_thread", False)
    sqlite_engine = create_engine(
        url,
        connect_args=connect_args,
        echo=False,
        pool_pre_ping=True,
        **kwargs
    )

    # Enable foreign key support for SQLite
    @event.listens_for(sqlite_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return sqlite_engine


engine = build_engine()

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for ORM models
Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for getting database session.
    Use with FastAPI's Depends().
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine = None):
    """Initialize database by creating all tables."""
    from synthstats.models import geography, disease, stats, facts  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)
