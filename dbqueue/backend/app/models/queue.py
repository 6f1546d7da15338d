# dbqueue/backend/app/models/queue.py
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from ..db import Base

QUEUE_NAME_MAX_LENGTH = 25


class Queue(Base):
    __tablename__ = "queues"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(QUEUE_NAME_MAX_LENGTH), unique=True, nullable=False)

    messages = relationship("Message", back_populates="queue")
