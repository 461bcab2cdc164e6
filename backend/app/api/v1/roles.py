"""
Role manager API endpoints.

Login role recommendation, active role switching and the role session of the
current user.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.api.deps import get_role_manager
from app.api.v1.auth import get_current_user
from app.models import User
from app.schemas.account import ProfileType, RoleSelectionPreference
from app.schemas.session import LoginRoleDecision, RoleRouting, SessionStats, UserSession
from app.services import RoleManager

router = APIRouter()


# ============== Pydantic Schemas ==============


class SwitchRoleRequest(BaseModel):
    new_role: ProfileType


class RolePreferenceRequest(BaseModel):
    preference: RoleSelectionPreference


class StatusResponse(BaseModel):
    success: bool
    message: str = ""


# ============== API Endpoints ==============


@router.post("/switch-role", response_model=UserSession)
async def switch_role(
    request: SwitchRoleRequest,
    current_user: User = Depends(get_current_user),
    role_manager: RoleManager = Depends(get_role_manager),
):
    """Switch the active role. The user must hold a profile of that type."""
    return await role_manager.switch_role(current_user.uid, request.new_role)


@router.get("/current-session", response_model=Optional[UserSession])
async def get_current_session(
    current_user: User = Depends(get_current_user),
    role_manager: RoleManager = Depends(get_role_manager),
):
    return await role_manager.get_current_session(current_user.uid)


@router.get("/determine-login-role", response_model=LoginRoleDecision)
async def determine_login_role(
    current_user: User = Depends(get_current_user),
    role_manager: RoleManager = Depends(get_role_manager),
):
    return await role_manager.determine_login_role(current_user.uid)


@router.put("/role-preference", response_model=StatusResponse)
async def update_role_preference(
    request: RolePreferenceRequest,
    current_user: User = Depends(get_current_user),
    role_manager: RoleManager = Depends(get_role_manager),
):
    await role_manager.update_role_preference(current_user.uid, request.preference)
    return StatusResponse(success=True, message="Role preference updated")


@router.get("/routing/{role}", response_model=RoleRouting)
async def get_role_based_routing(
    role: ProfileType,
    current_user: User = Depends(get_current_user),
    role_manager: RoleManager = Depends(get_role_manager),
):
    """Dashboard and allowed/restricted routes for one of the user's roles."""
    return await role_manager.get_role_based_routing(current_user.uid, role)


@router.post("/update-activity", response_model=StatusResponse)
async def update_session_activity(
    current_user: User = Depends(get_current_user),
    role_manager: RoleManager = Depends(get_role_manager),
):
    """Keepalive for the role session."""
    refreshed = await role_manager.update_session_activity(current_user.uid)
    return StatusResponse(success=refreshed, message="" if refreshed else "No active session")


@router.delete("/session", response_model=StatusResponse)
async def end_session(
    current_user: User = Depends(get_current_user),
    role_manager: RoleManager = Depends(get_role_manager),
):
    ended = await role_manager.end_session(current_user.uid)
    return StatusResponse(success=ended, message="Session ended" if ended else "No active session")


@router.get("/session-stats", response_model=SessionStats)
async def get_session_stats(
    current_user: User = Depends(get_current_user),
    role_manager: RoleManager = Depends(get_role_manager),
):
    return await role_manager.get_session_stats(current_user.uid)
