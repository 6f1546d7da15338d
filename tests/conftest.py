# tests/conftest.py

import pytest

from dbqueue.backend.app.db import init_db, make_engine, make_sessionmaker
from dbqueue.backend.app.services.handle import open_queue


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(
        f"sqlite:///{tmp_path / 'queue.db'}",
        echo=False,
        connect_args={"timeout": 30, "check_same_thread": False},
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_sessionmaker(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def jobs(db):
    return open_queue(db, "jobs")
