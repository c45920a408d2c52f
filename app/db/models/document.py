# app/db/models/document.py
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, String

from app.db.base import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Document(Base):
    """
    One JSON document inside a named collection.
    (collection, id) is the document key; `data` holds every field, camelCase.
    """
    __tablename__ = "documents"

    collection = Column(String(64), primary_key=True)
    id = Column(String(64), primary_key=True)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
