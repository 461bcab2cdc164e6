"""
API Router Aggregator.

Combines all v1 API routers into a single router for the main app.
"""

from fastapi import APIRouter

from app.api.v1 import auth, accounts, profiles, roles

api_router = APIRouter()

# Include all v1 routers with their prefixes and tags
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Authentication"],
)

api_router.include_router(
    accounts.router,
    prefix="/accounts",
    tags=["Accounts"],
)

api_router.include_router(
    profiles.router,
    prefix="/profiles",
    tags=["Profiles"],
)

api_router.include_router(
    roles.router,
    prefix="/roles",
    tags=["Roles"],
)
