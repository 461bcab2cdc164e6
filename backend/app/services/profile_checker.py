"""
Profile existence checks.

A user may hold a candidate profile, a company profile, or both. Existence is
a plain document-exists test against each profile collection; the result is
never cached.
"""

from app.core.config import settings
from app.core.logger import get_logger
from app.db.document_store import DocumentStore
from app.schemas.account import ProfileType, ProfileTypes

logger = get_logger("profile_checker")


def profile_collection(profile_type: ProfileType) -> str:
    """Collection holding profiles of the given type."""
    if profile_type == ProfileType.CANDIDATE:
        return settings.CANDIDATES_COLLECTION
    return settings.COMPANIES_COLLECTION


class ProfileExistenceChecker:
    def __init__(self, store: DocumentStore):
        self.store = store

    async def profile_exists(self, user_id: str, profile_type: ProfileType) -> bool:
        return await self.store.exists(profile_collection(profile_type), user_id)

    async def check_user_profiles(self, user_id: str) -> ProfileTypes:
        """
        Report which profile kinds exist for a user.

        Store failures propagate as StoreUnavailable; they are never reported
        as a missing profile.
        """
        has_candidate = await self.profile_exists(user_id, ProfileType.CANDIDATE)
        has_company = await self.profile_exists(user_id, ProfileType.COMPANY)

        available_roles: list[ProfileType] = []
        if has_candidate:
            available_roles.append(ProfileType.CANDIDATE)
        if has_company:
            available_roles.append(ProfileType.COMPANY)

        logger.debug(
            f"User {user_id} has profiles: {', '.join(r.value for r in available_roles) or 'none'}"
        )

        return ProfileTypes(
            has_candidate=has_candidate,
            has_company=has_company,
            available_roles=available_roles,
        )
