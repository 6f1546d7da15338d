# dbqueue/backend/app/services/messages.py

from __future__ import annotations

import json
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional, Union

from sqlalchemy import and_, delete, func, insert, select, update
from sqlalchemy.orm import Session

from ..errors import ValidationError
from ..models.message import MAX_CONTENT_LENGTH, Message, MessageStatus
from ..schemas.message import QueuedMessage, RetrievalMode
from .registry import MYSQL_DIALECTS
from .transaction import store_transaction

logger = logging.getLogger(__name__)

messages = Message.__table__

_RESULT_COLUMNS = (
    messages.c.id,
    messages.c.creation_time,
    messages.c.update_time,
    messages.c.status,
    messages.c.content,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_token() -> str:
    """Claim token, unique per call."""
    return secrets.token_hex(16)


# ---------------------------------------------------------------------------
# Validation / serialization
# ---------------------------------------------------------------------------

def serialize_content(content: Any) -> str:
    """
    JSON-encode a payload. Non-ASCII is escaped, so the string length is
    the stored byte length.
    """
    try:
        payload = json.dumps(content, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Content is not JSON-serializable: {exc}") from exc
    if len(payload) > MAX_CONTENT_LENGTH:
        raise ValidationError(
            f"Content size exceed the limit ({len(payload)} > {MAX_CONTENT_LENGTH} bytes)."
        )
    return payload


def validate_count(count: Any) -> int:
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise ValidationError(f"Bad number of messages: {count!r}.")
    return count


def validate_mode(mode: Any) -> RetrievalMode:
    try:
        return RetrievalMode(mode)
    except ValueError:
        allowed = ", ".join(m.value for m in RetrievalMode)
        raise ValidationError(f"Bad retrieval mode {mode!r}. Allowed: {allowed}") from None


def _to_queued(row) -> QueuedMessage:
    return QueuedMessage(
        id=row["id"],
        creation_time=row["creation_time"],
        update_time=row["update_time"],
        status=row["status"],
        content=json.loads(row["content"]),
    )


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------

def build_claim_statement(
    dialect_name: str,
    queue_id: int,
    token: str,
    count: int,
    now: Optional[datetime] = None,
):
    """
    One UPDATE that moves at most `count` pending messages of the queue
    to processing and stamps them with `token`.

    MySQL/MariaDB support UPDATE ... LIMIT directly (but not a subquery on
    the table being updated). Elsewhere the rows are picked by a subquery
    locked with FOR UPDATE SKIP LOCKED; the outer status check still holds
    if a concurrent claim got there first. SQLite renders no row lock, its
    database write lock serializes the statement.
    """
    values = {
        "token": token,
        "status": MessageStatus.PROCESSING,
        "update_time": now or _utcnow(),
    }
    pending = and_(
        messages.c.queue_id == queue_id,
        messages.c.status == MessageStatus.PENDING,
    )

    if dialect_name in MYSQL_DIALECTS:
        return (
            update(messages)
            .where(pending)
            .values(**values)
            .with_dialect_options(**{f"{dialect_name}_limit": count})
        )

    candidates = messages.alias("candidates")
    picked = (
        select(candidates.c.id)
        .where(
            candidates.c.queue_id == queue_id,
            candidates.c.status == MessageStatus.PENDING,
        )
        .order_by(candidates.c.id)
        .limit(count)
        .with_for_update(skip_locked=True)
    )
    return update(messages).where(pending, messages.c.id.in_(picked)).values(**values)


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

def send_message(db: Session, queue_id: int, content: Any) -> int:
    """Store one pending message and return its id."""
    payload = serialize_content(content)
    now = _utcnow()

    with store_transaction(db, "sending a message"):
        result = db.execute(
            insert(messages).values(
                queue_id=queue_id,
                creation_time=now,
                update_time=now,
                status=MessageStatus.PENDING,
                token="",
                content=payload,
            )
        )
        message_id = result.inserted_primary_key[0]

    logger.debug("Message %s sent to queue %s (%d bytes)", message_id, queue_id, len(payload))
    return message_id


def get_messages(
    db: Session,
    queue_id: int,
    count: int = 1,
    mode: Union[RetrievalMode, str] = RetrievalMode.WORKER,
) -> List[QueuedMessage]:
    count = validate_count(count)
    mode = validate_mode(mode)
    if count == 0:
        return []

    if mode is RetrievalMode.READER:
        with store_transaction(db, "reading messages"):
            rows = db.execute(
                select(*_RESULT_COLUMNS)
                .where(
                    messages.c.queue_id == queue_id,
                    messages.c.status == MessageStatus.PENDING,
                )
                .order_by(messages.c.id)
                .limit(count)
            ).mappings().all()
        return [_to_queued(row) for row in rows]

    token = new_token()
    mine = and_(messages.c.queue_id == queue_id, messages.c.token == token)

    with store_transaction(db, f"claiming messages ({mode.value})"):
        claimed = db.execute(
            build_claim_statement(db.get_bind().dialect.name, queue_id, token, count)
        ).rowcount
        rows = db.execute(
            select(*_RESULT_COLUMNS).where(mine).order_by(messages.c.id)
        ).mappings().all()
        result = [_to_queued(row) for row in rows]
        if mode is RetrievalMode.EATER:
            db.execute(delete(messages).where(mine))

    if claimed:
        logger.info(
            "Claimed %d message(s) from queue %s as %s (token %s)",
            len(result), queue_id, mode.value, token,
        )
    return result


def get_message(db: Session, queue_id: int) -> Optional[QueuedMessage]:
    claimed = get_messages(db, queue_id, 1, RetrievalMode.WORKER)
    return claimed[0] if claimed else None


def remove_message(db: Session, queue_id: int, message_id: int) -> None:
    """Delete a message of this queue. Missing ids are ignored."""
    if isinstance(message_id, bool) or not isinstance(message_id, int):
        raise ValidationError(f"Bad message id: {message_id!r}.")

    with store_transaction(db, f"removing message {message_id}"):
        deleted = db.execute(
            delete(messages).where(
                messages.c.id == message_id,
                messages.c.queue_id == queue_id,
            )
        ).rowcount

    logger.debug("Removed message %s from queue %s (%d row)", message_id, queue_id, deleted)


def requeue_stale(
    db: Session,
    queue_id: int,
    older_than: Union[timedelta, int, float],
) -> int:
    """
    Put processing messages claimed at least `older_than` ago back to
    pending. Returns how many were requeued.
    """
    if not isinstance(older_than, timedelta):
        if isinstance(older_than, bool) or not isinstance(older_than, (int, float)):
            raise ValidationError(f"Bad requeue age: {older_than!r}.")
        older_than = timedelta(seconds=older_than)
    if older_than < timedelta(0):
        raise ValidationError("Requeue age must not be negative.")

    now = _utcnow()
    cutoff = now - older_than
    with store_transaction(db, "requeueing stale messages"):
        requeued = db.execute(
            update(messages)
            .where(
                messages.c.queue_id == queue_id,
                messages.c.status == MessageStatus.PROCESSING,
                messages.c.update_time <= cutoff,
            )
            .values(status=MessageStatus.PENDING, token="", update_time=now)
        ).rowcount

    if requeued:
        logger.warning("Requeued %d stale message(s) in queue %s", requeued, queue_id)
    return requeued


def count_messages(
    db: Session,
    queue_id: int,
    status: Optional[Union[MessageStatus, str]] = None,
) -> int:
    stmt = select(func.count()).select_from(messages).where(messages.c.queue_id == queue_id)
    if status is not None:
        try:
            status = MessageStatus(status)
        except ValueError:
            raise ValidationError(f"Bad message status {status!r}.") from None
        stmt = stmt.where(messages.c.status == status)

    with store_transaction(db, "counting messages"):
        total = db.execute(stmt).scalar_one()
    return total
