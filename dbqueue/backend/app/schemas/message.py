# dbqueue/backend/app/schemas/message.py

import enum
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from ..models.message import MessageStatus


class RetrievalMode(str, enum.Enum):
    """
    How get_messages treats the rows it returns:
      - reader: peek at pending messages, change nothing
      - worker: claim them (status -> processing)
      - eater:  claim them and delete them before returning
    """

    READER = "reader"
    WORKER = "worker"
    EATER = "eater"


class QueuedMessage(BaseModel):
    id: int
    creation_time: datetime
    update_time: datetime
    status: MessageStatus
    content: Any = None

    model_config = ConfigDict(frozen=True)


class MessageCreate(BaseModel):
    content: Any = None


class MessageCreated(BaseModel):
    id: int


class ClaimRequest(BaseModel):
    count: int = Field(default=1, ge=0)
    mode: Literal["worker", "eater"] = "worker"


class RequeueRequest(BaseModel):
    # seconds since the claim
    older_than: float = Field(ge=0)


class RequeueResult(BaseModel):
    requeued: int


class QueueStats(BaseModel):
    queue: str
    pending: int
    processing: int
