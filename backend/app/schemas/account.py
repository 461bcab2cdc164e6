import enum
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ProfileType(str, enum.Enum):
    CANDIDATE = "candidate"
    COMPANY = "company"


# Fixed presentation order of roles wherever several are listed
PROFILE_TYPE_ORDER = [ProfileType.CANDIDATE, ProfileType.COMPANY]


class RoleSelectionPreference(str, enum.Enum):
    ASK = "ask"
    CANDIDATE = "candidate"
    COMPANY = "company"


class AccountPreferences(BaseModel):
    role_selection_preference: RoleSelectionPreference = RoleSelectionPreference.ASK
    last_used_role: Optional[ProfileType] = None


class UnifiedUserAccount(BaseModel):
    """One account per authenticated identity, holding zero, one or both profile types."""

    uid: str
    email: str
    created_at: datetime
    last_login_at: datetime
    updated_at: Optional[datetime] = None
    profile_types: list[ProfileType] = Field(default_factory=list)
    default_role: Optional[ProfileType] = None
    preferences: AccountPreferences = Field(default_factory=AccountPreferences)


class ProfileTypes(BaseModel):
    """Which profile documents exist for a user, computed on every query."""

    has_candidate: bool
    has_company: bool
    available_roles: list[ProfileType]
