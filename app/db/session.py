# app/db/session.py
from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool


def build_engine(database_url: str) -> Engine:
    """
    Creates the engine for a database URL.

    The engine owns the connection pool, so it is built once by the process
    entry point (the FastAPI lifespan, alembic, a script) and handed to
    whoever needs it instead of living at module level.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # In-memory databases only exist for the life of one connection
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)

    return create_engine(database_url, pool_pre_ping=True)


def build_session_factory(engine: Engine) -> sessionmaker:
    # A session is the unit of work for a single request.
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    FastAPI dependency yielding one session per request from the factory the
    application lifespan stored on `app.state`. The session is always closed,
    even if the endpoint raised.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
