# dbqueue/backend/app/api/v1/queues.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from ... import config
from ...db import get_db
from ...models.message import MessageStatus
from ...schemas.message import (
    ClaimRequest,
    MessageCreate,
    MessageCreated,
    QueuedMessage,
    QueueStats,
    RequeueRequest,
    RequeueResult,
    RetrievalMode,
)
from ...services.handle import MessageQueue, open_queue

router = APIRouter(prefix="/queues", tags=["queues"])


def _check_count(count: int) -> int:
    limit = config.max_claim_count()
    if count > limit:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid count {count}. At most {limit} messages per request.",
        )
    return count


def _queue(name: str, db: Session) -> MessageQueue:
    return open_queue(db, name)


@router.post(
    "/{name}/messages",
    response_model=MessageCreated,
    status_code=status.HTTP_201_CREATED,
)
def send_message(name: str, payload: MessageCreate, db: Session = Depends(get_db)):
    message_id = _queue(name, db).send_message(payload.content)
    return MessageCreated(id=message_id)


@router.get("/{name}/messages", response_model=List[QueuedMessage])
def peek_messages(
    name: str,
    count: int = Query(default=10, ge=0),
    db: Session = Depends(get_db),
):
    return _queue(name, db).get_messages(_check_count(count), RetrievalMode.READER)


@router.post("/{name}/claim", response_model=List[QueuedMessage])
def claim_messages(name: str, payload: ClaimRequest, db: Session = Depends(get_db)):
    return _queue(name, db).get_messages(_check_count(payload.count), payload.mode)


@router.delete("/{name}/messages/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_message(name: str, message_id: int, db: Session = Depends(get_db)):
    _queue(name, db).remove_message(message_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{name}/stats", response_model=QueueStats)
def queue_stats(name: str, db: Session = Depends(get_db)):
    queue = _queue(name, db)
    return QueueStats(
        queue=name,
        pending=queue.count_messages(MessageStatus.PENDING),
        processing=queue.count_messages(MessageStatus.PROCESSING),
    )


@router.post("/{name}/requeue", response_model=RequeueResult)
def requeue_stale(name: str, payload: RequeueRequest, db: Session = Depends(get_db)):
    return RequeueResult(requeued=_queue(name, db).requeue_stale(payload.older_than))
