from sqlalchemy import Column, DateTime, Integer, JSON, String, UniqueConstraint

from app.core.clock import utc_now
from app.db.base import Base


class Document(Base):
    """
    A JSON document addressed by (collection, key).

    Backs the document store used for unified accounts, candidate and company
    profiles, and role sessions.
    """

    __tablename__ = "documents"
    __table_args__ = (UniqueConstraint("collection", "key", name="uq_documents_collection_key"),)

    id = Column(Integer, primary_key=True)
    collection = Column(String, nullable=False, index=True)
    key = Column(String, nullable=False, index=True)

    # Example: {"user_id": "...", "active_role": "candidate", "session_data": {...}}
    data = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)
