"""
Error taxonomy for the unified account services.

Every error carries an HTTP status, a stable machine-readable code, whether
the caller may retry, and a message fit to show the end user. The FastAPI app
renders them through a single exception handler (see app.main).
"""

from datetime import datetime, timezone
from typing import Optional


class JobBoardError(Exception):
    """Base class for errors raised by the services."""

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"
    retryable: bool = False

    def __init__(self, message: str, user_message: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.user_message = user_message or message

    def to_dict(self) -> dict:
        return {
            "detail": self.message,
            "error_code": self.error_code,
            "retryable": self.retryable,
            "user_message": self.user_message,
            "status_code": self.status_code,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }


# ============== Document store ==============


class StoreUnavailable(JobBoardError):
    """The document store could not be read."""

    status_code = 503
    error_code = "STORE_UNAVAILABLE"
    retryable = True

    def __init__(self, operation: str, original_error: Optional[Exception] = None):
        super().__init__(
            f"Document store unavailable during {operation}: {original_error or 'unknown error'}",
            "The service is temporarily unavailable. Please try again shortly.",
        )
        self.operation = operation
        self.original_error = original_error


class PersistenceError(JobBoardError):
    """A write to the document store failed and was not committed."""

    status_code = 500
    error_code = "PERSISTENCE_FAILED"
    retryable = True

    def __init__(self, operation: str, original_error: Optional[Exception] = None):
        super().__init__(
            f"Failed to persist {operation}: {original_error or 'unknown error'}",
            "Your changes could not be saved. Please try again.",
        )
        self.operation = operation
        self.original_error = original_error


class DocumentNotFound(JobBoardError):
    status_code = 404
    error_code = "DOCUMENT_NOT_FOUND"

    def __init__(self, collection: str, key: str):
        super().__init__(f"Document {collection}/{key} not found")
        self.collection = collection
        self.key = key


# ============== Accounts and roles ==============


class AccountNotFound(DocumentNotFound):
    error_code = "ACCOUNT_NOT_FOUND"

    def __init__(self, collection: str, user_id: str):
        super().__init__(collection, user_id)
        self.user_message = "No account was found for this user."


class InvalidRole(JobBoardError):
    """Requested role is not one of the user's existing profiles."""

    status_code = 400
    error_code = "INVALID_ROLE"

    def __init__(self, role: str, available_roles: Optional[list] = None):
        available = ", ".join(available_roles or []) or "none"
        super().__init__(
            f"User has no {role} profile (available: {available})",
            f"You don't have a {role} profile yet. Create one from your account settings.",
        )
        self.role = role
        self.available_roles = list(available_roles or [])


# ============== Profiles ==============


class ProfileNotFound(JobBoardError):
    status_code = 404
    error_code = "PROFILE_NOT_FOUND"

    def __init__(self, profile_type: str, user_id: Optional[str] = None):
        suffix = f" for user {user_id}" if user_id else ""
        super().__init__(
            f"{profile_type.capitalize()} profile not found{suffix}",
            f"We couldn't find your {profile_type} profile. You can create one from your settings.",
        )
        self.profile_type = profile_type


class ProfileAlreadyExists(JobBoardError):
    status_code = 409
    error_code = "PROFILE_ALREADY_EXISTS"

    def __init__(self, profile_type: str):
        super().__init__(
            f"User already has a {profile_type} profile",
            f"You already have a {profile_type} profile. You can edit it from your account settings.",
        )
        self.profile_type = profile_type


class InvalidProfileData(JobBoardError):
    status_code = 400
    error_code = "INVALID_PROFILE_DATA"

    def __init__(self, errors: list[str]):
        super().__init__(
            f"Invalid profile data: {', '.join(errors)}",
            "Some profile fields are invalid. Please review them and try again.",
        )
        self.errors = errors
