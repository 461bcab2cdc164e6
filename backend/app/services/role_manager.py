"""
Role Manager Service.

Decides which role a user with candidate and/or company profiles is presented
at login, switches the active role, and keeps the per-user role session in
the document store.

Per user the session moves between three shapes:

- no profile: nothing to select, login asks the user to create one
- single profile: that role is always selected; switching to it again only
  refreshes last_activity
- dual profile: login follows the stored role_selection_preference ("ask"
  means the user picks); each switch to the other role records the outgoing
  role in the history

Session writes always replace the whole document so the role history is
never partially applied. Concurrent switches for one user are last-writer-wins.
"""

from typing import Optional

from app.core.clock import Clock, duration_ms
from app.core.config import settings
from app.core.exceptions import AccountNotFound, DocumentNotFound, InvalidRole, PersistenceError
from app.core.logger import get_logger
from app.db.document_store import DocumentStore
from app.schemas.account import ProfileType, RoleSelectionPreference
from app.schemas.session import (
    LoginRoleDecision,
    RoleHistoryEntry,
    RoleRouting,
    SessionData,
    SessionStats,
    UserSession,
)
from app.services.accounts import AccountService
from app.services.profile_checker import ProfileExistenceChecker

logger = get_logger("role_manager")

ROLE_ROUTING: dict[ProfileType, RoleRouting] = {
    ProfileType.CANDIDATE: RoleRouting(
        dashboard_path="/candidate/dashboard",
        allowed_routes=[
            "/candidate/*",
            "/jobs/search",
            "/jobs/apply",
            "/applications/*",
            "/profile/candidate",
            "/settings",
        ],
        restricted_routes=[
            "/company/*",
            "/jobs/post",
            "/jobs/manage",
            "/candidates/*",
        ],
    ),
    ProfileType.COMPANY: RoleRouting(
        dashboard_path="/company/dashboard",
        allowed_routes=[
            "/company/*",
            "/jobs/post",
            "/jobs/manage",
            "/candidates/*",
            "/profile/company",
            "/settings",
        ],
        restricted_routes=[
            "/candidate/*",
            "/jobs/apply",
            "/applications/*",
        ],
    ),
}


def recommend_role(
    available_roles: list[ProfileType],
    preference: RoleSelectionPreference,
) -> LoginRoleDecision:
    """
    Pure decision table for the login role.

    - no roles: nothing to recommend, selection required
    - one role: that role, regardless of preference
    - both roles: the preferred role, or the first available one with
      selection required when the preference is "ask"
    """
    if not available_roles:
        return LoginRoleDecision(available_roles=[], recommended_role=None, requires_selection=True)

    if len(available_roles) == 1:
        return LoginRoleDecision(
            available_roles=available_roles,
            recommended_role=available_roles[0],
            requires_selection=False,
        )

    if preference != RoleSelectionPreference.ASK:
        preferred = ProfileType(preference.value)
        if preferred in available_roles:
            return LoginRoleDecision(
                available_roles=available_roles,
                recommended_role=preferred,
                requires_selection=False,
            )

    return LoginRoleDecision(
        available_roles=available_roles,
        recommended_role=available_roles[0],
        requires_selection=True,
    )


class RoleManager:
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
        self.collection = settings.SESSIONS_COLLECTION

    async def _require_role(self, user_id: str, role: ProfileType) -> None:
        profile_types = await self.checker.check_user_profiles(user_id)
        if role not in profile_types.available_roles:
            raise InvalidRole(role.value, [r.value for r in profile_types.available_roles])

    def _new_session(self, user_id: str) -> UserSession:
        now = self.clock.now()
        return UserSession(
            user_id=user_id,
            active_role=None,
            created_at=now,
            last_activity=now,
            role_changed_at=now,
            session_data=SessionData(),
        )

    async def _save_session(self, session: UserSession) -> None:
        await self.store.set(self.collection, session.user_id, session.model_dump(mode="json"))

    # ============== Login ==============

    async def determine_login_role(self, user_id: str) -> LoginRoleDecision:
        """Recommend the role to present at login. Read-only."""
        profile_types = await self.checker.check_user_profiles(user_id)
        account = await self.accounts.get_unified_user_account(user_id)
        preference = account.preferences.role_selection_preference

        decision = recommend_role(profile_types.available_roles, preference)
        logger.debug(
            f"Login role for {user_id}: recommended={decision.recommended_role}, "
            f"requires_selection={decision.requires_selection}, preference={preference.value}"
        )
        return decision

    async def update_role_preference(
        self,
        user_id: str,
        preference: RoleSelectionPreference,
    ) -> None:
        """Store the role selection preference on the account; the session is untouched."""
        try:
            await self.store.update(
                settings.ACCOUNTS_COLLECTION,
                user_id,
                {
                    "preferences.role_selection_preference": preference.value,
                    "updated_at": self.clock.now().isoformat(),
                },
            )
        except DocumentNotFound:
            raise AccountNotFound(settings.ACCOUNTS_COLLECTION, user_id)

        logger.info(f"Role preference of {user_id} set to {preference.value}")

    # ============== Sessions ==============

    async def get_current_session(self, user_id: str) -> Optional[UserSession]:
        data = await self.store.get(self.collection, user_id)
        if data is None:
            return None
        return UserSession.model_validate(data)

    async def create_session(self, user_id: str, initial_role: ProfileType) -> UserSession:
        """Start a fresh session in the given role, replacing any existing one."""
        await self._require_role(user_id, initial_role)

        session = self._new_session(user_id)
        session.active_role = initial_role
        await self._save_session(session)

        logger.info(f"Created session for {user_id} as {initial_role.value}")
        return session

    async def switch_role(self, user_id: str, to_role: ProfileType) -> UserSession:
        """
        Make `to_role` the active role of the user's session.

        The outgoing role goes into the history with how long it was active.
        Switching to the role that is already active only refreshes
        last_activity. Raises InvalidRole if the user has no profile of that
        type, before anything is written.
        """
        await self._require_role(user_id, to_role)

        session = await self.get_current_session(user_id)
        if session is None:
            session = self._new_session(user_id)

        now = self.clock.now()
        from_role = session.active_role

        if from_role != to_role:
            if from_role is not None:
                session.previous_role = from_role
                session.session_data.role_history.append(
                    RoleHistoryEntry(
                        role=from_role,
                        timestamp=now,
                        duration=duration_ms(session.role_changed_at, now),
                    )
                )
            session.role_changed_at = now

        session.active_role = to_role
        session.last_activity = now

        await self._save_session(session)

        if from_role != to_role:
            # The switch is committed at this point; last_used_role is best-effort
            try:
                await self.store.update(
                    settings.ACCOUNTS_COLLECTION,
                    user_id,
                    {"preferences.last_used_role": to_role.value},
                )
            except DocumentNotFound:
                logger.warning(f"No unified account for {user_id}; last used role not recorded")
            except PersistenceError as e:
                logger.warning(f"Could not record last used role for {user_id}: {e.message}")
            logger.info(
                f"User {user_id} switched role: {from_role.value if from_role else 'none'} -> {to_role.value}"
            )

        return session

    async def update_session_activity(self, user_id: str) -> bool:
        """Refresh last_activity. Returns False if the user has no session yet."""
        try:
            await self.store.update(
                self.collection,
                user_id,
                {"last_activity": self.clock.now().isoformat()},
            )
        except DocumentNotFound:
            logger.debug(f"No session to refresh for {user_id}")
            return False
        return True

    async def end_session(self, user_id: str) -> bool:
        ended = await self.store.delete(self.collection, user_id)
        if ended:
            logger.info(f"Ended session for {user_id}")
        return ended

    # ============== Routing & stats ==============

    async def get_role_based_routing(self, user_id: str, role: ProfileType) -> RoleRouting:
        await self._require_role(user_id, role)
        return ROLE_ROUTING[role].model_copy(deep=True)

    async def get_session_stats(self, user_id: str) -> SessionStats:
        """
        Time spent per role, from the history plus the currently active period.

        average_session_duration is the total over the number of history
        entries, or the current period alone when nothing has been switched yet.
        """
        usage = {role: 0 for role in ProfileType}
        session = await self.get_current_session(user_id)

        if session is None:
            return SessionStats(
                total_sessions=0,
                average_session_duration=0,
                role_usage_stats=usage,
                last_login_date=None,
            )

        history = session.session_data.role_history
        for entry in history:
            usage[entry.role] += entry.duration

        current_duration = duration_ms(session.role_changed_at, self.clock.now())
        if session.active_role is not None:
            usage[session.active_role] += current_duration

        total = sum(usage.values())
        average = total / len(history) if history else current_duration

        return SessionStats(
            total_sessions=len(history) + 1,
            average_session_duration=average,
            role_usage_stats=usage,
            last_login_date=session.created_at,
        )
