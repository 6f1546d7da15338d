# dbqueue/backend/app/models/__init__.py

from .queue import Queue
from .message import Message, MessageStatus

__all__ = ["Queue", "Message", "MessageStatus"]
