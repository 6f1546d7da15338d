# dbqueue/backend/app/services/handle.py

from __future__ import annotations

from datetime import timedelta
from typing import Any, List, Optional, Union

from sqlalchemy.orm import Session

from ..errors import ValidationError
from ..models.message import MessageStatus
from ..schemas.message import QueuedMessage, RetrievalMode
from . import messages as store
from .registry import resolve_queue_id


class MessageQueue:
    """
    A named queue bound to one database session.

        queue = MessageQueue(db).set_queue_name("jobs")
        queue.send_message({"task": "resize", "w": 100})

        message = queue.get_message()        # claimed, status "processing"
        ...                                  # do the work
        queue.remove_message(message.id)

    Consumers poll: get_message/get_messages never wait for new messages.
    A claimed message stays "processing" until it is removed (or put back
    with requeue_stale).
    """

    def __init__(self, db: Session):
        self.db = db
        self.queue_id: Optional[int] = None
        self.queue_name: Optional[str] = None

    def __repr__(self) -> str:
        return f"MessageQueue(name={self.queue_name!r}, id={self.queue_id!r})"

    def set_queue_name(self, name: str) -> "MessageQueue":
        """Select (and create if needed) the queue every later call works on."""
        self.queue_id = resolve_queue_id(self.db, name)
        self.queue_name = name
        return self

    def _require_queue(self) -> int:
        if self.queue_id is None:
            raise ValidationError("Current message queue not set.")
        return self.queue_id

    def send_message(self, content: Any) -> int:
        return store.send_message(self.db, self._require_queue(), content)

    def get_message(self) -> Optional[QueuedMessage]:
        """Claim the next pending message, or None if there is none."""
        return store.get_message(self.db, self._require_queue())

    def get_messages(
        self,
        count: int = 1,
        mode: Union[RetrievalMode, str] = RetrievalMode.WORKER,
    ) -> List[QueuedMessage]:
        return store.get_messages(self.db, self._require_queue(), count, mode)

    def remove_message(self, message_id: int) -> None:
        store.remove_message(self.db, self._require_queue(), message_id)

    def requeue_stale(self, older_than: Union[timedelta, int, float]) -> int:
        return store.requeue_stale(self.db, self._require_queue(), older_than)

    def count_messages(self, status: Optional[Union[MessageStatus, str]] = None) -> int:
        return store.count_messages(self.db, self._require_queue(), status)


def open_queue(db: Session, name: str) -> MessageQueue:
    return MessageQueue(db).set_queue_name(name)
