"""
Unified user accounts.

One account document per uid records the email, which profile types the user
holds and the role selection preference used at login.
"""

from typing import Optional

from app.core.clock import Clock
from app.core.config import settings
from app.core.exceptions import AccountNotFound, DocumentNotFound
from app.core.logger import get_logger
from app.db.document_store import DocumentStore
from app.schemas.account import (
    AccountPreferences,
    PROFILE_TYPE_ORDER,
    ProfileType,
    UnifiedUserAccount,
)

logger = get_logger("accounts")


class AccountService:
    def __init__(self, store: DocumentStore, clock: Clock):
        self.store = store
        self.clock = clock
        self.collection = settings.ACCOUNTS_COLLECTION

    async def find_unified_user_account(self, user_id: str) -> Optional[UnifiedUserAccount]:
        data = await self.store.get(self.collection, user_id)
        if data is None:
            return None
        return UnifiedUserAccount.model_validate(data)

    async def get_unified_user_account(self, user_id: str) -> UnifiedUserAccount:
        """Return the account, raising AccountNotFound if there is none."""
        account = await self.find_unified_user_account(user_id)
        if account is None:
            raise AccountNotFound(self.collection, user_id)
        return account

    async def create_or_update_unified_account(
        self,
        user_id: str,
        email: str,
        preferences: Optional[dict] = None,
    ) -> UnifiedUserAccount:
        """
        Create the account on first registration, or refresh it on login.

        Keeps created_at, profile_types and stored preferences of an existing
        account; any preferences passed in are laid over the stored ones.
        """
        now = self.clock.now()
        existing = await self.find_unified_user_account(user_id)

        merged_preferences = existing.preferences.model_dump() if existing else {}
        merged_preferences.update(preferences or {})

        account = UnifiedUserAccount(
            uid=user_id,
            email=email.lower(),
            created_at=existing.created_at if existing else now,
            last_login_at=now,
            updated_at=existing.updated_at if existing else None,
            profile_types=existing.profile_types if existing else [],
            default_role=existing.default_role if existing else None,
            preferences=AccountPreferences.model_validate(merged_preferences),
        )

        await self.store.set(self.collection, user_id, account.model_dump(mode="json"))

        if existing is None:
            logger.info(f"Created unified account for {user_id}")
        return account

    async def update_profile_types(
        self,
        user_id: str,
        profile_type: ProfileType,
        operation: str,
    ) -> list[ProfileType]:
        """Add or remove a profile type on the account. Both operations are idempotent."""
        if operation not in ("add", "remove"):
            raise ValueError(f"Unknown profile type operation: {operation}")

        account = await self.get_unified_user_account(user_id)
        profile_types = set(account.profile_types)
        if operation == "add":
            profile_types.add(profile_type)
        else:
            profile_types.discard(profile_type)

        ordered = [role for role in PROFILE_TYPE_ORDER if role in profile_types]

        try:
            await self.store.update(
                self.collection,
                user_id,
                {
                    "profile_types": [role.value for role in ordered],
                    "updated_at": self.clock.now().isoformat(),
                },
            )
        except DocumentNotFound:
            raise AccountNotFound(self.collection, user_id)

        logger.info(f"Profile types of {user_id} are now: {[r.value for r in ordered]}")
        return ordered
