"""SQLAlchemy database models for jobhunter."""

from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime

from jobhunter.database.database import Base


class KeyValueDB(Base):
    """One persisted blob (tracker state or settings), stored as JSON text."""

    __tablename__ = "kv_entries"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
