# dbqueue/backend/app/models/message.py
import enum

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..db import Base

# json.dumps escapes non-ASCII, so characters == bytes
MAX_CONTENT_LENGTH = 65535
TOKEN_LENGTH = 64


class MessageStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"


class Message(Base):
    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_queue_status", "queue_id", "status"),
        Index("ix_messages_queue_token", "queue_id", "token"),
    )

    id = Column(Integer, primary_key=True, index=True)
    queue_id = Column(Integer, ForeignKey("queues.id"), nullable=False)

    creation_time = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    update_time = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    status = Column(
        Enum(
            MessageStatus,
            name="message_status",
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        server_default=MessageStatus.PENDING.value,
    )
    # empty while pending, the claiming call's token while processing
    token = Column(String(TOKEN_LENGTH), nullable=False, server_default="")
    content = Column(Text, nullable=False)

    queue = relationship("Queue", back_populates="messages")
