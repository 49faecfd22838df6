"""Database engine and session management with connection pooling"""

from typing import Iterator
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session


def create_db_engine(database_url: str) -> Engine:
    """Build the engine; SQLite (tests, local runs) skips the pool tuning"""
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})

    # Connection pool: max 20 connections, recycle after 1 hour to avoid stale connections
    return create_engine(
        database_url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=10,
        max_overflow=10,
        pool_recycle=3600,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Iterator[Session]:
    """Dependency injection for database sessions; the factory lives on app.state"""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
