# dbqueue/backend/app/schemas/__init__.py

from .message import (
    ClaimRequest,
    MessageCreate,
    MessageCreated,
    QueuedMessage,
    QueueStats,
    RequeueRequest,
    RequeueResult,
    RetrievalMode,
)

__all__ = [
    "ClaimRequest",
    "MessageCreate",
    "MessageCreated",
    "QueuedMessage",
    "QueueStats",
    "RequeueRequest",
    "RequeueResult",
    "RetrievalMode",
]
