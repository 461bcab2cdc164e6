import uuid

from sqlalchemy import Column, Integer, String

from app.db.base import Base


def generate_uid() -> str:
    return uuid.uuid4().hex


class User(Base):
    """
    Authentication identity.

    The uid is the stable key shared by the unified account, both profile
    documents and the role session.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    uid = Column(String, unique=True, index=True, nullable=False, default=generate_uid)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    full_name = Column(String)
