import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime, JSON
from .db import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Assistant(Base):
    __tablename__ = "gpts"
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    instructions = Column(Text, nullable=False)
    # {fileName, chunkCount, processed} when a knowledge document was ingested
    document_data = Column(JSON, nullable=True)
    status = Column(String(32), nullable=False, default="active")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
