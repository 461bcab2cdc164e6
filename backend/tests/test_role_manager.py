import pytest
from sqlalchemy.exc import OperationalError

from app.core.config import settings
from app.core.exceptions import AccountNotFound, InvalidRole, PersistenceError, StoreUnavailable
from app.schemas.account import ProfileType, RoleSelectionPreference
from app.services.role_manager import recommend_role

CANDIDATE = ProfileType.CANDIDATE
COMPANY = ProfileType.COMPANY


# ============== Login role decision ==============


@pytest.mark.parametrize(
    "preference, expected",
    [
        (RoleSelectionPreference.CANDIDATE, CANDIDATE),
        (RoleSelectionPreference.COMPANY, COMPANY),
    ],
)
def test_recommend_role_follows_preference_for_dual_profile(preference, expected):
    decision = recommend_role([CANDIDATE, COMPANY], preference)

    assert decision.recommended_role == expected
    assert decision.requires_selection is False
    assert decision.available_roles == [CANDIDATE, COMPANY]


def test_recommend_role_asks_for_dual_profile():
    decision = recommend_role([CANDIDATE, COMPANY], RoleSelectionPreference.ASK)

    assert decision.requires_selection is True
    assert decision.recommended_role in (CANDIDATE, COMPANY)


@pytest.mark.parametrize("preference", list(RoleSelectionPreference))
def test_recommend_role_single_profile_ignores_preference(preference):
    decision = recommend_role([COMPANY], preference)

    assert decision.recommended_role == COMPANY
    assert decision.requires_selection is False


def test_recommend_role_without_profiles():
    decision = recommend_role([], RoleSelectionPreference.CANDIDATE)

    assert decision.available_roles == []
    assert decision.recommended_role is None
    assert decision.requires_selection is True


async def test_determine_login_role_dual_profile_with_preference(role_manager, make_user):
    await make_user("u-dual", roles=["candidate", "company"], preference="company")

    decision = await role_manager.determine_login_role("u-dual")

    assert decision.available_roles == [CANDIDATE, COMPANY]
    assert decision.recommended_role == COMPANY
    assert decision.requires_selection is False


async def test_determine_login_role_candidate_only(role_manager, make_user):
    await make_user("u1", roles=["candidate"], preference="company")

    decision = await role_manager.determine_login_role("u1")

    assert decision.available_roles == [CANDIDATE]
    assert decision.recommended_role == CANDIDATE
    assert decision.requires_selection is False


async def test_determine_login_role_no_profiles(role_manager, make_user):
    await make_user("u2")

    decision = await role_manager.determine_login_role("u2")

    assert decision.available_roles == []
    assert decision.recommended_role is None
    assert decision.requires_selection is True


async def test_determine_login_role_requires_account(role_manager):
    with pytest.raises(AccountNotFound):
        await role_manager.determine_login_role("ghost")


async def test_determine_login_role_writes_nothing(role_manager, make_user, store):
    await make_user("u-dual", roles=["candidate", "company"])

    await role_manager.determine_login_role("u-dual")

    assert await store.get(settings.SESSIONS_COLLECTION, "u-dual") is None


# ============== Role preference ==============


@pytest.mark.parametrize(
    "preference, expected_role, expected_selection",
    [
        (RoleSelectionPreference.CANDIDATE, CANDIDATE, False),
        (RoleSelectionPreference.COMPANY, COMPANY, False),
        (RoleSelectionPreference.ASK, CANDIDATE, True),
    ],
)
async def test_preference_update_is_reflected_at_login(
    role_manager, make_user, preference, expected_role, expected_selection
):
    await make_user("u-dual", roles=["candidate", "company"])

    await role_manager.update_role_preference("u-dual", preference)
    decision = await role_manager.determine_login_role("u-dual")

    assert decision.recommended_role == expected_role
    assert decision.requires_selection is expected_selection


async def test_preference_update_keeps_rest_of_account(role_manager, make_user, accounts):
    await make_user("u-dual", roles=["candidate", "company"])
    before = await accounts.get_unified_user_account("u-dual")

    await role_manager.update_role_preference("u-dual", RoleSelectionPreference.COMPANY)

    after = await accounts.get_unified_user_account("u-dual")
    assert after.preferences.role_selection_preference == RoleSelectionPreference.COMPANY
    assert after.email == before.email
    assert after.created_at == before.created_at


async def test_preference_update_does_not_touch_session(role_manager, make_user):
    await make_user("u-dual", roles=["candidate", "company"])
    session = await role_manager.switch_role("u-dual", CANDIDATE)

    await role_manager.update_role_preference("u-dual", RoleSelectionPreference.COMPANY)

    assert await role_manager.get_current_session("u-dual") == session


async def test_preference_update_requires_account(role_manager):
    with pytest.raises(AccountNotFound):
        await role_manager.update_role_preference("ghost", RoleSelectionPreference.ASK)


# ============== Switching ==============


@pytest.mark.parametrize("from_role", [CANDIDATE, COMPANY])
@pytest.mark.parametrize("to_role", [CANDIDATE, COMPANY])
async def test_switch_role_sets_active_and_previous(role_manager, make_user, clock, from_role, to_role):
    await make_user("u-dual", roles=["candidate", "company"])
    await role_manager.switch_role("u-dual", from_role)
    clock.advance(minutes=5)

    session = await role_manager.switch_role("u-dual", to_role)

    assert session.active_role == to_role
    if from_role != to_role:
        assert session.previous_role == from_role
    else:
        assert session.previous_role is None


async def test_first_switch_creates_session(role_manager, make_user, clock):
    await make_user("u-dual", roles=["candidate", "company"])

    session = await role_manager.switch_role("u-dual", COMPANY)

    assert session.user_id == "u-dual"
    assert session.active_role == COMPANY
    assert session.previous_role is None
    assert session.session_data.role_history == []
    assert session.created_at == clock.now()
    assert session.role_changed_at == clock.now()


async def test_switch_records_history_with_duration(role_manager, make_user, clock):
    await make_user("u-dual", roles=["candidate", "company"])
    await role_manager.switch_role("u-dual", CANDIDATE)
    switched_at = clock.advance(seconds=90)

    session = await role_manager.switch_role("u-dual", COMPANY)

    [entry] = session.session_data.role_history
    assert entry.role == CANDIDATE
    assert entry.timestamp == switched_at
    assert entry.duration == 90_000
    assert session.role_changed_at == switched_at
    assert session.last_activity == switched_at


async def test_history_is_appended_in_order(role_manager, make_user, clock):
    await make_user("u-dual", roles=["candidate", "company"])
    await role_manager.switch_role("u-dual", CANDIDATE)
    clock.advance(seconds=10)
    await role_manager.switch_role("u-dual", COMPANY)
    clock.advance(seconds=20)

    session = await role_manager.switch_role("u-dual", CANDIDATE)

    history = session.session_data.role_history
    assert [entry.role for entry in history] == [CANDIDATE, COMPANY]
    assert [entry.duration for entry in history] == [10_000, 20_000]


async def test_switch_to_same_role_is_noop_except_activity(role_manager, make_user, clock):
    await make_user("u-dual", roles=["candidate", "company"])
    await role_manager.switch_role("u-dual", CANDIDATE)
    clock.advance(seconds=10)
    first = await role_manager.switch_role("u-dual", COMPANY)
    later = clock.advance(minutes=3)

    second = await role_manager.switch_role("u-dual", COMPANY)

    assert second.active_role == COMPANY
    assert len(second.session_data.role_history) == len(first.session_data.role_history) == 1
    assert second.role_changed_at == first.role_changed_at
    assert second.last_activity == later


async def test_single_profile_switch_to_own_role(role_manager, make_user, clock):
    await make_user("u1", roles=["candidate"])
    await role_manager.switch_role("u1", CANDIDATE)
    later = clock.advance(minutes=1)

    session = await role_manager.switch_role("u1", CANDIDATE)

    assert session.active_role == CANDIDATE
    assert session.session_data.role_history == []
    assert session.last_activity == later


async def test_switch_into_missing_profile_is_rejected(role_manager, make_user, store):
    await make_user("u1", roles=["candidate"])

    with pytest.raises(InvalidRole) as excinfo:
        await role_manager.switch_role("u1", COMPANY)

    assert excinfo.value.available_roles == ["candidate"]
    assert await store.get(settings.SESSIONS_COLLECTION, "u1") is None


async def test_switch_is_persisted(role_manager, make_user):
    await make_user("u-dual", roles=["candidate", "company"])
    await role_manager.switch_role("u-dual", CANDIDATE)

    session = await role_manager.switch_role("u-dual", COMPANY)

    assert await role_manager.get_current_session("u-dual") == session


async def test_switch_keeps_opaque_session_data(role_manager, make_user, store):
    await make_user("u-dual", roles=["candidate", "company"])
    await role_manager.switch_role("u-dual", CANDIDATE)
    stored = await store.get(settings.SESSIONS_COLLECTION, "u-dual")
    stored["session_data"]["navigation_state"] = {"last_page": "/jobs/search"}
    await store.set(settings.SESSIONS_COLLECTION, "u-dual", stored)

    session = await role_manager.switch_role("u-dual", COMPANY)

    assert session.session_data.navigation_state == {"last_page": "/jobs/search"}


async def test_switch_records_last_used_role(role_manager, make_user, accounts):
    await make_user("u-dual", roles=["candidate", "company"])

    await role_manager.switch_role("u-dual", COMPANY)

    account = await accounts.get_unified_user_account("u-dual")
    assert account.preferences.last_used_role == COMPANY


# ============== Session lifecycle ==============


async def test_create_session_starts_in_role(role_manager, make_user):
    await make_user("u-dual", roles=["candidate", "company"])

    session = await role_manager.create_session("u-dual", COMPANY)

    assert session.active_role == COMPANY
    assert await role_manager.get_current_session("u-dual") == session


async def test_create_session_validates_role(role_manager, make_user):
    await make_user("u2")

    with pytest.raises(InvalidRole):
        await role_manager.create_session("u2", CANDIDATE)


async def test_update_session_activity(role_manager, make_user, clock):
    await make_user("u1", roles=["candidate"])
    assert await role_manager.update_session_activity("u1") is False

    await role_manager.switch_role("u1", CANDIDATE)
    later = clock.advance(minutes=2)

    assert await role_manager.update_session_activity("u1") is True
    session = await role_manager.get_current_session("u1")
    assert session.last_activity == later


async def test_end_session(role_manager, make_user):
    await make_user("u1", roles=["candidate"])
    await role_manager.switch_role("u1", CANDIDATE)

    assert await role_manager.end_session("u1") is True
    assert await role_manager.get_current_session("u1") is None
    assert await role_manager.end_session("u1") is False


# ============== Routing & stats ==============


async def test_role_based_routing(role_manager, make_user):
    await make_user("u-dual", roles=["candidate", "company"])

    candidate = await role_manager.get_role_based_routing("u-dual", CANDIDATE)
    company = await role_manager.get_role_based_routing("u-dual", COMPANY)

    assert candidate.dashboard_path == "/candidate/dashboard"
    assert "/company/*" in candidate.restricted_routes
    assert company.dashboard_path == "/company/dashboard"
    assert "/jobs/post" in company.allowed_routes
    assert "/jobs/apply" in company.restricted_routes


async def test_role_based_routing_requires_profile(role_manager, make_user):
    await make_user("u1", roles=["candidate"])

    with pytest.raises(InvalidRole):
        await role_manager.get_role_based_routing("u1", COMPANY)


async def test_session_stats_without_session(role_manager):
    stats = await role_manager.get_session_stats("nobody")

    assert stats.total_sessions == 0
    assert stats.average_session_duration == 0
    assert stats.role_usage_stats == {CANDIDATE: 0, COMPANY: 0}
    assert stats.last_login_date is None


async def test_session_stats_aggregate_history(role_manager, make_user, clock):
    await make_user("u-dual", roles=["candidate", "company"])
    started = clock.now()
    await role_manager.switch_role("u-dual", CANDIDATE)
    clock.advance(seconds=30)
    await role_manager.switch_role("u-dual", COMPANY)
    clock.advance(seconds=10)
    await role_manager.switch_role("u-dual", CANDIDATE)
    clock.advance(seconds=5)

    stats = await role_manager.get_session_stats("u-dual")

    assert stats.total_sessions == 3
    assert stats.role_usage_stats == {CANDIDATE: 35_000, COMPANY: 10_000}
    assert stats.average_session_duration == 22_500
    assert stats.last_login_date == started


# ============== Store failures ==============


async def test_unreachable_store_is_not_reported_as_missing_profile(role_manager, make_user, db, monkeypatch):
    await make_user("u1", roles=["candidate"])

    def broken_query(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is down"))

    monkeypatch.setattr(db, "query", broken_query)

    with pytest.raises(StoreUnavailable):
        await role_manager.determine_login_role("u1")


# ============== Write failures ==============


def break_commits(db, monkeypatch):
    def failing_commit():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "commit", failing_commit)


async def test_failed_session_write_leaves_session_unchanged(role_manager, make_user, db, monkeypatch):
    await make_user("u-dual", roles=["candidate", "company"])
    before = await role_manager.switch_role("u-dual", CANDIDATE)
    break_commits(db, monkeypatch)

    with pytest.raises(PersistenceError):
        await role_manager.switch_role("u-dual", COMPANY)

    after = await role_manager.get_current_session("u-dual")
    assert after.active_role == CANDIDATE
    assert after.session_data.role_history == []
    assert after == before


async def test_failed_preference_write(role_manager, make_user, accounts, db, monkeypatch):
    await make_user("u-dual", roles=["candidate", "company"])
    break_commits(db, monkeypatch)

    with pytest.raises(PersistenceError):
        await role_manager.update_role_preference("u-dual", RoleSelectionPreference.COMPANY)

    account = await accounts.get_unified_user_account("u-dual")
    assert account.preferences.role_selection_preference == RoleSelectionPreference.ASK


async def test_last_used_role_failure_keeps_switch(role_manager, make_user, store, accounts, monkeypatch):
    await make_user("u-dual", roles=["candidate", "company"])
    await role_manager.switch_role("u-dual", CANDIDATE)
    update = store.update

    async def failing_account_update(collection, key, changes):
        if collection == settings.ACCOUNTS_COLLECTION:
            raise PersistenceError(f"update {collection}/{key}", Exception("write timeout"))
        return await update(collection, key, changes)

    monkeypatch.setattr(store, "update", failing_account_update)

    session = await role_manager.switch_role("u-dual", COMPANY)

    assert session.active_role == COMPANY
    assert session.previous_role == CANDIDATE
    assert await role_manager.get_current_session("u-dual") == session
    account = await accounts.get_unified_user_account("u-dual")
    assert account.preferences.last_used_role == CANDIDATE
