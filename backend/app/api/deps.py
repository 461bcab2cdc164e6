"""
Service factories for route dependencies.

Every request builds its own document store and services over its own
database session; nothing is shared between requests.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.clock import Clock
from app.db.document_store import DocumentStore
from app.db.session import get_db
from app.services import AccountService, ProfileExistenceChecker, ProfileService, RoleManager


def get_clock() -> Clock:
    return Clock()


def get_document_store(db: Session = Depends(get_db)) -> DocumentStore:
    return DocumentStore(db)


def get_profile_checker(store: DocumentStore = Depends(get_document_store)) -> ProfileExistenceChecker:
    return ProfileExistenceChecker(store)


def get_account_service(
    store: DocumentStore = Depends(get_document_store),
    clock: Clock = Depends(get_clock),
) -> AccountService:
    return AccountService(store, clock)


def get_profile_service(
    store: DocumentStore = Depends(get_document_store),
    checker: ProfileExistenceChecker = Depends(get_profile_checker),
    accounts: AccountService = Depends(get_account_service),
    clock: Clock = Depends(get_clock),
) -> ProfileService:
    return ProfileService(store, checker, accounts, clock)


def get_role_manager(
    store: DocumentStore = Depends(get_document_store),
    checker: ProfileExistenceChecker = Depends(get_profile_checker),
    accounts: AccountService = Depends(get_account_service),
    clock: Clock = Depends(get_clock),
) -> RoleManager:
    return RoleManager(store, checker, accounts, clock)
