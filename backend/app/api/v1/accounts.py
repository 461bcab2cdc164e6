"""
Unified account API endpoints.

Exposes the caller's unified account, which profile types they hold, and
linking a new profile type to an existing account after re-checking the
account password.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_account_service, get_profile_checker, get_profile_service
from app.api.v1.auth import authenticate_user, get_current_user
from app.db.session import get_db
from app.models import User
from app.schemas.account import ProfileType, ProfileTypes, UnifiedUserAccount
from app.services import AccountService, ProfileExistenceChecker, ProfileService

router = APIRouter()


# ============== Pydantic Schemas ==============


class LinkProfileRequest(BaseModel):
    """Link a new profile type to the account owning this email."""

    email: str
    password: str
    profile_type: ProfileType
    profile_data: dict[str, Any]


class LinkProfileResponse(BaseModel):
    success: bool
    message: str
    profile_type: ProfileType
    user_id: str


# ============== API Endpoints ==============


@router.get("/me", response_model=UnifiedUserAccount)
async def get_my_account(
    current_user: User = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
):
    """Get the unified account of the current user."""
    return await accounts.get_unified_user_account(current_user.uid)


@router.get("/profiles", response_model=ProfileTypes)
async def get_my_profiles(
    current_user: User = Depends(get_current_user),
    checker: ProfileExistenceChecker = Depends(get_profile_checker),
):
    """Check which profile types the current user holds."""
    return await checker.check_user_profiles(current_user.uid)


@router.post("/link-profile", response_model=LinkProfileResponse)
async def link_profile(
    request: LinkProfileRequest,
    db: Session = Depends(get_db),
    profiles: ProfileService = Depends(get_profile_service),
):
    """
    Link a profile type to an existing account.

    The email and password must match an existing user; the profile payload
    is validated against the candidate or company schema.
    """
    user = authenticate_user(db, request.email, request.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    await profiles.link_profile(user.uid, request.profile_type, request.profile_data)

    return LinkProfileResponse(
        success=True,
        message=f"{request.profile_type.value.capitalize()} profile linked successfully",
        profile_type=request.profile_type,
        user_id=user.uid,
    )
