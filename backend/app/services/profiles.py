"""
Candidate and company profile management.

Profiles live in their own collections keyed by uid, so the two kinds never
share a document. Creating or deleting a profile keeps the account's
profile_types list in step.
"""

from typing import Union

from pydantic import BaseModel, ValidationError

from app.core.clock import Clock
from app.core.exceptions import (
    InvalidProfileData,
    JobBoardError,
    ProfileAlreadyExists,
    ProfileNotFound,
)
from app.core.logger import get_logger
from app.db.document_store import DocumentStore
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
from app.services.accounts import AccountService
from app.services.profile_checker import ProfileExistenceChecker, profile_collection
from app.services.profile_validation import (
    merge_sections,
    sanitize_profile_data,
    validation_messages,
)

logger = get_logger("profiles")

# profile type -> (create payload model, stored profile model)
PROFILE_MODELS: dict[ProfileType, tuple[type[BaseModel], type[BaseModel]]] = {
    ProfileType.CANDIDATE: (CandidateProfileCreate, CandidateProfile),
    ProfileType.COMPANY: (CompanyProfileCreate, CompanyProfile),
}

# keys that only belong to one kind of profile document
CANDIDATE_ONLY_KEYS = {"personal_info", "professional_info", "applications"}
COMPANY_ONLY_KEYS = {"company_info", "contact_info", "job_postings"}

AnyProfile = Union[CandidateProfile, CompanyProfile]


class ProfileService:
    def __init__(
        self,
        store: DocumentStore,
        checker: ProfileExistenceChecker,
        accounts: AccountService,
        clock: Clock,
    ):
        self.store = store
        self.checker = checker
        self.accounts = accounts
        self.clock = clock

    def _build(self, profile_type: ProfileType, data: dict) -> AnyProfile:
        _, profile_model = PROFILE_MODELS[profile_type]
        try:
            return profile_model.model_validate(data)
        except ValidationError as e:
            raise InvalidProfileData(validation_messages(e))

    async def create_profile(
        self,
        user_id: str,
        profile_type: ProfileType,
        data: BaseModel,
    ) -> AnyProfile:
        # Fail before writing anything if there is no account to attach the profile to
        await self.accounts.get_unified_user_account(user_id)

        if await self.checker.profile_exists(user_id, profile_type):
            raise ProfileAlreadyExists(profile_type.value)

        now = self.clock.now()
        payload = sanitize_profile_data(data.model_dump(mode="json"))
        profile = self._build(
            profile_type,
            {**payload, "user_id": user_id, "created_at": now, "updated_at": now},
        )

        collection = profile_collection(profile_type)
        await self.store.set(collection, user_id, profile.model_dump(mode="json"))

        try:
            await self.accounts.update_profile_types(user_id, profile_type, "add")
        except JobBoardError:
            # Undo the profile write so a retry does not hit ProfileAlreadyExists
            logger.error(f"Account sync failed for new {profile_type.value} profile of {user_id}; removing it")
            await self.store.delete(collection, user_id)
            raise

        logger.info(f"Created {profile_type.value} profile for {user_id}")
        return profile

    async def get_profile(self, user_id: str, profile_type: ProfileType) -> AnyProfile:
        data = await self.store.get(profile_collection(profile_type), user_id)
        if data is None:
            raise ProfileNotFound(profile_type.value, user_id)
        _, profile_model = PROFILE_MODELS[profile_type]
        return profile_model.model_validate(data)

    async def update_profile(
        self,
        user_id: str,
        profile_type: ProfileType,
        changes: BaseModel,
    ) -> AnyProfile:
        existing = await self.get_profile(user_id, profile_type)

        merged = merge_sections(
            existing.model_dump(mode="json"),
            changes.model_dump(mode="json", exclude_unset=True),
        )
        merged["updated_at"] = self.clock.now()
        profile = self._build(profile_type, sanitize_profile_data(merged))

        await self.store.set(profile_collection(profile_type), user_id, profile.model_dump(mode="json"))

        logger.info(f"Updated {profile_type.value} profile for {user_id}")
        return profile

    async def delete_profile(self, user_id: str, profile_type: ProfileType) -> None:
        collection = profile_collection(profile_type)
        existing = await self.store.get(collection, user_id)
        if existing is None or not await self.store.delete(collection, user_id):
            raise ProfileNotFound(profile_type.value, user_id)

        try:
            await self.accounts.update_profile_types(user_id, profile_type, "remove")
        except JobBoardError:
            # Put the profile back so the document and profile_types stay in step
            logger.error(f"Account sync failed after deleting {profile_type.value} profile of {user_id}; restoring it")
            await self.store.set(collection, user_id, existing)
            raise

        logger.info(f"Deleted {profile_type.value} profile for {user_id}")

    async def link_profile(
        self,
        user_id: str,
        profile_type: ProfileType,
        profile_data: dict,
    ) -> AnyProfile:
        """Validate a raw payload for the given profile type and create the profile."""
        create_model, _ = PROFILE_MODELS[profile_type]
        try:
            data = create_model.model_validate(profile_data)
        except ValidationError as e:
            raise InvalidProfileData(validation_messages(e))
        return await self.create_profile(user_id, profile_type, data)

    # Typed entry points used by the profile routes

    async def create_candidate_profile(self, user_id: str, data: CandidateProfileCreate) -> CandidateProfile:
        return await self.create_profile(user_id, ProfileType.CANDIDATE, data)

    async def create_company_profile(self, user_id: str, data: CompanyProfileCreate) -> CompanyProfile:
        return await self.create_profile(user_id, ProfileType.COMPANY, data)

    async def get_candidate_profile(self, user_id: str) -> CandidateProfile:
        return await self.get_profile(user_id, ProfileType.CANDIDATE)

    async def get_company_profile(self, user_id: str) -> CompanyProfile:
        return await self.get_profile(user_id, ProfileType.COMPANY)

    async def update_candidate_profile(self, user_id: str, data: CandidateProfileUpdate) -> CandidateProfile:
        return await self.update_profile(user_id, ProfileType.CANDIDATE, data)

    async def update_company_profile(self, user_id: str, data: CompanyProfileUpdate) -> CompanyProfile:
        return await self.update_profile(user_id, ProfileType.COMPANY, data)

    async def delete_candidate_profile(self, user_id: str) -> None:
        await self.delete_profile(user_id, ProfileType.CANDIDATE)

    async def delete_company_profile(self, user_id: str) -> None:
        await self.delete_profile(user_id, ProfileType.COMPANY)

    async def validate_profile_isolation(self, user_id: str) -> ProfileIsolationReport:
        """Check that neither profile document carries the other kind's data."""
        candidate = await self.store.get(profile_collection(ProfileType.CANDIDATE), user_id)
        company = await self.store.get(profile_collection(ProfileType.COMPANY), user_id)
        issues: list[str] = []

        if candidate and COMPANY_ONLY_KEYS & candidate.keys():
            issues.append("Candidate profile contains company data")
        if company and CANDIDATE_ONLY_KEYS & company.keys():
            issues.append("Company profile contains candidate data")
        if candidate and company and candidate.get("user_id") != company.get("user_id"):
            issues.append("Profile user IDs do not match")

        return ProfileIsolationReport(is_valid=not issues, issues=issues)
