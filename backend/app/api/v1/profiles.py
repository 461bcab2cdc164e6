"""
Profile API endpoints.

CRUD for the current user's candidate and company profiles.
"""

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from app.api.deps import get_profile_checker, get_profile_service
from app.api.v1.auth import get_current_user
from app.models import User
from app.schemas.account import ProfileType
from app.schemas.profile import (
    CandidateProfile,
    CandidateProfileCreate,
    CandidateProfileUpdate,
    CompanyProfile,
    CompanyProfileCreate,
    CompanyProfileUpdate,
    ProfileIsolationReport,
)
from app.services import ProfileExistenceChecker, ProfileService

router = APIRouter()


class ProfileExistsResponse(BaseModel):
    profile_type: ProfileType
    exists: bool


# ============== Candidate ==============


@router.post("/candidate", response_model=CandidateProfile, status_code=status.HTTP_201_CREATED)
async def create_candidate_profile(
    data: CandidateProfileCreate,
    current_user: User = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    return await profiles.create_candidate_profile(current_user.uid, data)


@router.get("/candidate", response_model=CandidateProfile)
async def get_candidate_profile(
    current_user: User = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    return await profiles.get_candidate_profile(current_user.uid)


@router.put("/candidate", response_model=CandidateProfile)
async def update_candidate_profile(
    data: CandidateProfileUpdate,
    current_user: User = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    """Update candidate profile - only the fields that were sent are changed."""
    return await profiles.update_candidate_profile(current_user.uid, data)


@router.delete("/candidate", status_code=status.HTTP_204_NO_CONTENT)
async def delete_candidate_profile(
    current_user: User = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    await profiles.delete_candidate_profile(current_user.uid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============== Company ==============


@router.post("/company", response_model=CompanyProfile, status_code=status.HTTP_201_CREATED)
async def create_company_profile(
    data: CompanyProfileCreate,
    current_user: User = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    return await profiles.create_company_profile(current_user.uid, data)


@router.get("/company", response_model=CompanyProfile)
async def get_company_profile(
    current_user: User = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    return await profiles.get_company_profile(current_user.uid)


@router.put("/company", response_model=CompanyProfile)
async def update_company_profile(
    data: CompanyProfileUpdate,
    current_user: User = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    """Update company profile - only the fields that were sent are changed."""
    return await profiles.update_company_profile(current_user.uid, data)


@router.delete("/company", status_code=status.HTTP_204_NO_CONTENT)
async def delete_company_profile(
    current_user: User = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    await profiles.delete_company_profile(current_user.uid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============== Checks ==============


@router.get("/exists/{profile_type}", response_model=ProfileExistsResponse)
async def profile_exists(
    profile_type: ProfileType,
    current_user: User = Depends(get_current_user),
    checker: ProfileExistenceChecker = Depends(get_profile_checker),
):
    exists = await checker.profile_exists(current_user.uid, profile_type)
    return ProfileExistsResponse(profile_type=profile_type, exists=exists)


@router.get("/validate-isolation", response_model=ProfileIsolationReport)
async def validate_profile_isolation(
    current_user: User = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    """Confirm the candidate and company documents don't carry each other's data."""
    return await profiles.validate_profile_isolation(current_user.uid)
