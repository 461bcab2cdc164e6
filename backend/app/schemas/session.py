from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from app.schemas.account import ProfileType


class RoleHistoryEntry(BaseModel):
    role: ProfileType
    timestamp: datetime
    duration: int = 0  # milliseconds the role was active


class SessionData(BaseModel):
    role_history: list[RoleHistoryEntry] = Field(default_factory=list)
    preferences: dict[str, Any] = Field(default_factory=dict)
    navigation_state: dict[str, Any] = Field(default_factory=dict)


class UserSession(BaseModel):
    """Role session of a user; at most one per user."""

    user_id: str
    active_role: Optional[ProfileType] = None
    previous_role: Optional[ProfileType] = None
    created_at: datetime
    last_activity: datetime
    role_changed_at: datetime
    session_data: SessionData = Field(default_factory=SessionData)


class LoginRoleDecision(BaseModel):
    available_roles: list[ProfileType]
    recommended_role: Optional[ProfileType] = None
    requires_selection: bool


class RoleRouting(BaseModel):
    dashboard_path: str
    allowed_routes: list[str]
    restricted_routes: list[str]


class SessionStats(BaseModel):
    total_sessions: int
    average_session_duration: float  # milliseconds
    role_usage_stats: dict[ProfileType, int]
    last_login_date: Optional[datetime] = None
