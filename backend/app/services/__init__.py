from app.services.profile_checker import ProfileExistenceChecker, profile_collection
from app.services.accounts import AccountService
from app.services.profiles import ProfileService
from app.services.role_manager import RoleManager, recommend_role
from app.services.profile_validation import sanitize_profile_data

__all__ = [
    "ProfileExistenceChecker",
    "profile_collection",
    "AccountService",
    "ProfileService",
    "RoleManager",
    "recommend_role",
    "sanitize_profile_data",
]
