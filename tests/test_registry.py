# tests/test_registry.py

import pytest
from sqlalchemy import literal, select
from sqlalchemy.dialects import mysql, postgresql

from dbqueue.backend.app.errors import ConsistencyError, ValidationError
from dbqueue.backend.app.models.queue import Queue
from dbqueue.backend.app.services import registry
from dbqueue.backend.app.services.handle import MessageQueue, open_queue


def test_same_name_resolves_to_same_id(db):
    first = open_queue(db, "jobs").queue_id
    second = open_queue(db, "jobs").queue_id
    assert first == second
    assert db.query(Queue).filter_by(name="jobs").count() == 1


def test_different_names_get_different_ids(db):
    assert open_queue(db, "jobs").queue_id != open_queue(db, "mail").queue_id


def test_name_length_counts_code_points(db):
    name = "é" * 25  # 50 bytes in UTF-8
    queue = open_queue(db, name)
    assert queue.queue_id is not None
    assert queue.queue_name == name


@pytest.mark.parametrize("name", ["", "x" * 26, None, 42])
def test_bad_queue_names_are_rejected(db, name):
    with pytest.raises(ValidationError):
        MessageQueue(db).set_queue_name(name)
    assert db.query(Queue).count() == 0


def test_set_queue_name_rebinds_handle(db):
    queue = MessageQueue(db).set_queue_name("jobs")
    jobs_id = queue.queue_id
    queue.set_queue_name("mail")
    assert queue.queue_id != jobs_id
    assert queue.queue_name == "mail"


def test_missing_row_after_upsert_is_a_consistency_error(db, monkeypatch):
    # an "upsert" that writes nothing
    monkeypatch.setattr(
        registry, "build_queue_upsert", lambda dialect_name, name: select(literal(1))
    )
    with pytest.raises(ConsistencyError):
        open_queue(db, "ghost")


def test_upsert_statement_per_dialect():
    pg = str(registry.build_queue_upsert("postgresql", "jobs").compile(dialect=postgresql.dialect()))
    assert "ON CONFLICT (name) DO NOTHING" in pg

    my = str(registry.build_queue_upsert("mysql", "jobs").compile(dialect=mysql.dialect()))
    assert "ON DUPLICATE KEY UPDATE" in my

    assert registry.build_queue_upsert("oracle", "jobs") is None
