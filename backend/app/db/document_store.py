"""
Document store over the SQLAlchemy `documents` table.

Documents are JSON dicts addressed by (collection, key). Reads that fail raise
StoreUnavailable, writes that fail raise PersistenceError after rolling the
session back. Nothing is retried here.
"""

import copy
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import DocumentNotFound, PersistenceError, StoreUnavailable
from app.core.logger import get_logger
from app.models.document import Document

logger = get_logger("document_store")


def apply_partial_update(data: dict, changes: dict[str, Any]) -> dict:
    """
    Return a copy of `data` with `changes` applied.

    Keys may be dotted paths ("preferences.role_selection_preference"), in
    which case intermediate dicts are created as needed.
    """
    updated = copy.deepcopy(data)
    for path, value in changes.items():
        target = updated
        *parents, leaf = path.split(".")
        for part in parents:
            child = target.get(part)
            if not isinstance(child, dict):
                child = {}
                target[part] = child
            target = child
        target[leaf] = copy.deepcopy(value)
    return updated


class DocumentStore:
    """Async document API on top of a request-scoped SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def _find(self, collection: str, key: str) -> Optional[Document]:
        return (
            self.db.query(Document)
            .filter(Document.collection == collection, Document.key == key)
            .first()
        )

    async def get(self, collection: str, key: str) -> Optional[dict]:
        """Return a copy of the document, or None if it does not exist."""
        try:
            document = self._find(collection, key)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Read of {collection}/{key} failed: {e}")
            raise StoreUnavailable(f"get {collection}/{key}", e) from e

        if document is None:
            return None
        return copy.deepcopy(document.data)

    async def exists(self, collection: str, key: str) -> bool:
        try:
            count = (
                self.db.query(Document.id)
                .filter(Document.collection == collection, Document.key == key)
                .count()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Existence check of {collection}/{key} failed: {e}")
            raise StoreUnavailable(f"exists {collection}/{key}", e) from e

        return count > 0

    async def set(self, collection: str, key: str, value: dict) -> None:
        """Write the whole document, replacing any previous content."""
        try:
            document = self._find(collection, key)
            if document is None:
                document = Document(collection=collection, key=key, data=copy.deepcopy(value))
                self.db.add(document)
            else:
                document.data = copy.deepcopy(value)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Write of {collection}/{key} failed: {e}")
            raise PersistenceError(f"set {collection}/{key}", e) from e

    async def update(self, collection: str, key: str, changes: dict[str, Any]) -> None:
        """Apply a partial update to an existing document."""
        try:
            document = self._find(collection, key)
            if document is None:
                raise DocumentNotFound(collection, key)
            document.data = apply_partial_update(document.data or {}, changes)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Update of {collection}/{key} failed: {e}")
            raise PersistenceError(f"update {collection}/{key}", e) from e

    async def delete(self, collection: str, key: str) -> bool:
        """Delete a document. Returns False if there was nothing to delete."""
        try:
            document = self._find(collection, key)
            if document is None:
                return False
            self.db.delete(document)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Delete of {collection}/{key} failed: {e}")
            raise PersistenceError(f"delete {collection}/{key}", e) from e

        return True
