from app.models.user import User
from app.models.document import Document

__all__ = ["User", "Document"]
