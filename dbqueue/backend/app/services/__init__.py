# dbqueue/backend/app/services/__init__.py

from .handle import MessageQueue, open_queue
from .registry import resolve_queue_id

__all__ = ["MessageQueue", "open_queue", "resolve_queue_id"]
