# dbqueue/backend/app/services/registry.py

from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy import insert, select
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import ConsistencyError, ValidationError
from ..models.queue import QUEUE_NAME_MAX_LENGTH, Queue
from .transaction import store_transaction

logger = logging.getLogger(__name__)

MYSQL_DIALECTS = ("mysql", "mariadb")


def validate_queue_name(name: Any) -> str:
    """Non-empty string of at most 25 characters (code points, not bytes)."""
    if not isinstance(name, str) or not name or len(name) > QUEUE_NAME_MAX_LENGTH:
        raise ValidationError(
            f"Bad queue name {name!r}: expected 1-{QUEUE_NAME_MAX_LENGTH} characters."
        )
    return name


def build_queue_upsert(dialect_name: str, name: str):
    """
    INSERT that leaves an existing queue row untouched.
    Returns None when the dialect has no native form.
    """
    table = Queue.__table__
    if dialect_name == "postgresql":
        return (
            postgresql.insert(table)
            .values(name=name)
            .on_conflict_do_nothing(index_elements=["name"])
        )
    if dialect_name == "sqlite":
        return (
            sqlite.insert(table)
            .values(name=name)
            .on_conflict_do_nothing(index_elements=["name"])
        )
    if dialect_name in MYSQL_DIALECTS:
        # no-op update so the duplicate key is not an error
        return mysql.insert(table).values(name=name).on_duplicate_key_update(id=table.c.id)
    return None


def _insert_if_missing(db: Session, name: str) -> None:
    try:
        with db.begin_nested():
            db.execute(insert(Queue.__table__).values(name=name))
    except IntegrityError:
        logger.debug("Queue '%s' already exists", name)


def resolve_queue_id(db: Session, name: Any) -> int:
    """Create the queue if needed and return its id."""
    name = validate_queue_name(name)

    queue_id: Optional[int] = None
    with store_transaction(db, f"creating queue '{name}'"):
        stmt = build_queue_upsert(db.get_bind().dialect.name, name)
        if stmt is not None:
            db.execute(stmt)
        else:
            _insert_if_missing(db, name)
        queue_id = db.execute(
            select(Queue.id).where(Queue.name == name)
        ).scalar_one_or_none()

    if not queue_id:
        raise ConsistencyError(f"Unable to create queue '{name}'.")

    logger.debug("Queue '%s' resolved to id %s", name, queue_id)
    return queue_id
