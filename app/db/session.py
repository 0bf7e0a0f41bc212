from functools import lru_cache
import sqlite3

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from app.config.settings import settings


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


@event.listens_for(Engine, "connect")
def register_sqlite_functions(dbapi_connection, connection_record):
    # SQLite's lower() only folds ASCII
    if isinstance(dbapi_connection, sqlite3.Connection):
        dbapi_connection.create_function(
            "unicode_lower", 1, _unicode_lower, deterministic=True
        )


@lru_cache
def get_engine() -> Engine:
    """Create the engine on first use so importing the app never opens a connection."""
    url = str(settings.DATABASE_URL)
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            echo=settings.DATABASE_ECHO,
        )

    return create_engine(
        url,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,
        pool_recycle=3600,
        echo=settings.DATABASE_ECHO,
    )


@lru_cache
def get_session_factory() -> sessionmaker:
    return sessionmaker(bind=get_engine(), class_=Session, expire_on_commit=False)


def get_sync_session():
    """Dependency to get a request-scoped sync database session"""
    db = get_session_factory()()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
