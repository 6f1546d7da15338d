# dbqueue/backend/app/db.py
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from . import config

Base = declarative_base()

# Lazily built for the web app; library callers pass their own session.
_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def make_engine(url: Optional[str] = None, **kwargs) -> Engine:
    kwargs.setdefault("echo", config.sql_echo())
    return create_engine(url or config.get_database_url(), future=True, **kwargs)


def make_sessionmaker(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        future=True,
    )


def init_db(engine: Engine) -> None:
    """Create the queue tables directly (tests, local use). Production uses Alembic."""
    from . import models  # noqa: F401  registers the tables on Base.metadata

    Base.metadata.create_all(bind=engine)


def _session_factory() -> sessionmaker:
    global _engine, _SessionLocal
    if _SessionLocal is None:
        _engine = make_engine()
        _SessionLocal = make_sessionmaker(_engine)
    return _SessionLocal


def get_db():
    """FastAPI dependency to provide DB session per request."""
    db = _session_factory()()
    try:
        yield db
    finally:
        db.close()
