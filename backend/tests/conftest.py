import os

# Point the app at a throwaway database before any app module reads settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_clock
from app.core.clock import Clock
from app.core.config import settings
from app.db.base import Base
from app.db.document_store import DocumentStore
from app.db.session import get_db
from app.main import app
from app.models import Document, User  # noqa: F401
from app.schemas.account import ProfileType
from app.services import AccountService, ProfileExistenceChecker, ProfileService, RoleManager

START_TIME = datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = START_TIME):
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(db):
    return DocumentStore(db)


@pytest.fixture
def checker(store):
    return ProfileExistenceChecker(store)


@pytest.fixture
def accounts(store, clock):
    return AccountService(store, clock)


@pytest.fixture
def profiles(store, checker, accounts, clock):
    return ProfileService(store, checker, accounts, clock)


@pytest.fixture
def role_manager(store, checker, accounts, clock):
    return RoleManager(store, checker, accounts, clock)


@pytest.fixture
def make_user(store, accounts):
    """
    Create a unified account and bare profile documents for a uid.

    Profile existence is all the role logic looks at, so the profile
    documents only carry the user_id.
    """

    async def _make_user(uid, roles=(), preference="ask"):
        await accounts.create_or_update_unified_account(
            uid,
            f"{uid}@example.com",
            preferences={"role_selection_preference": preference},
        )
        for role in roles:
            role = ProfileType(role)
            collection = (
                settings.CANDIDATES_COLLECTION
                if role == ProfileType.CANDIDATE
                else settings.COMPANIES_COLLECTION
            )
            await store.set(collection, uid, {"user_id": uid})
        return uid

    return _make_user


@pytest.fixture
def client(db, clock):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
