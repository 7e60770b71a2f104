"""Database engine and per-request sessions"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from cycle_ledger.config import settings


def build_engine(database_url: str) -> Engine:
    """
    Create the engine for a database URL.

    SQLite (local runs, tests) gets a single-file connection shared across
    threads; server databases get a pool of up to 20 connections recycled
    hourly.
    """
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=10,
        pool_recycle=3600,
    )


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """Dependency injection for database sessions; each request reloads from a fresh session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
