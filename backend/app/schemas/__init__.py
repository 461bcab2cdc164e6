from app.schemas.account import (
    AccountPreferences,
    PROFILE_TYPE_ORDER,
    ProfileType,
    ProfileTypes,
    RoleSelectionPreference,
    UnifiedUserAccount,
)
from app.schemas.session import (
    LoginRoleDecision,
    RoleHistoryEntry,
    RoleRouting,
    SessionData,
    SessionStats,
    UserSession,
)

__all__ = [
    "AccountPreferences",
    "PROFILE_TYPE_ORDER",
    "ProfileType",
    "ProfileTypes",
    "RoleSelectionPreference",
    "UnifiedUserAccount",
    "LoginRoleDecision",
    "RoleHistoryEntry",
    "RoleRouting",
    "SessionData",
    "SessionStats",
    "UserSession",
]
