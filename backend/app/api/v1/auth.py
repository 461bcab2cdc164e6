"""
Authentication API endpoints.

Handles user registration and login with JWT token generation. Registering
also creates the user's unified account; logging in refreshes it and returns
the role the user should land in.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from pydantic import BaseModel, field_validator
import re
from sqlalchemy.orm import Session

from app.api.deps import get_account_service, get_profile_checker, get_role_manager
from app.core.password import PasswordStrength, evaluate_password_strength
from app.core.security import (
    create_access_token,
    get_password_hash,
    verify_password,
    get_token_subject,
)
from app.db.session import get_db
from app.models import User
from app.schemas.account import ProfileType, RoleSelectionPreference
from app.schemas.session import LoginRoleDecision
from app.services import AccountService, ProfileExistenceChecker, RoleManager

router = APIRouter()

# OAuth2 scheme for token authentication
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


# ============== Pydantic Schemas ==============


class UserRegister(BaseModel):
    """Schema for user registration."""

    email: str
    password: str
    full_name: str
    role_selection_preference: RoleSelectionPreference = RoleSelectionPreference.ASK

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Validate email format."""
        email_pattern = r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$"
        if not re.match(email_pattern, v):
            raise ValueError("Invalid email format")
        return v.lower()


class UserResponse(BaseModel):
    """Schema for user response (without password)."""

    id: int
    uid: str
    email: str
    full_name: Optional[str] = None
    profile_types: list[ProfileType] = []

    class Config:
        from_attributes = True


class Token(BaseModel):
    """Schema for JWT token response."""

    access_token: str
    token_type: str = "bearer"
    login_role: Optional[LoginRoleDecision] = None


class PasswordCheckRequest(BaseModel):
    password: str


# ============== Helper Functions ==============


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get a user by email address."""
    return db.query(User).filter(User.email == email.lower()).first()


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Authenticate a user by email and password."""
    user = get_user_by_email(db, email)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Dependency to get the current authenticated user from JWT token.

    Raises HTTPException if token is invalid or user not found.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    uid = get_token_subject(token)
    if uid is None:
        raise credentials_exception

    user = db.query(User).filter(User.uid == uid).first()
    if user is None:
        raise credentials_exception

    return user


# ============== API Endpoints ==============


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    db: Session = Depends(get_db),
    accounts: AccountService = Depends(get_account_service),
):
    """
    Register a new user.

    Creates the login identity and its unified account. Candidate and company
    profiles are added afterwards through the profile endpoints.
    """
    if get_user_by_email(db, user_data.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )

    strength = evaluate_password_strength(user_data.password)
    if not strength.is_valid:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "message": "Password is too weak",
                "missing_requirements": strength.missing_requirements,
                "feedback": strength.feedback,
            },
        )

    new_user = User(
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password),
        full_name=user_data.full_name,
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    await accounts.create_or_update_unified_account(
        new_user.uid,
        new_user.email,
        preferences={"role_selection_preference": user_data.role_selection_preference.value},
    )

    return UserResponse(
        id=new_user.id,
        uid=new_user.uid,
        email=new_user.email,
        full_name=new_user.full_name,
        profile_types=[],
    )


@router.post("/login", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
    accounts: AccountService = Depends(get_account_service),
    role_manager: RoleManager = Depends(get_role_manager),
):
    """
    Login and get JWT access token.

    Uses OAuth2 password flow. Send username (email) and password as form
    data. The response also tells the client which role to open.
    """
    user = authenticate_user(db, form_data.username, form_data.password)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    await accounts.create_or_update_unified_account(user.uid, user.email)
    login_role = await role_manager.determine_login_role(user.uid)

    return Token(
        access_token=create_access_token(user.uid),
        login_role=login_role,
    )


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: User = Depends(get_current_user),
    checker: ProfileExistenceChecker = Depends(get_profile_checker),
):
    """Get current authenticated user with the profile types they hold."""
    profile_types = await checker.check_user_profiles(current_user.uid)

    return UserResponse(
        id=current_user.id,
        uid=current_user.uid,
        email=current_user.email,
        full_name=current_user.full_name,
        profile_types=profile_types.available_roles,
    )


@router.post("/password-strength", response_model=PasswordStrength)
async def check_password_strength(request: PasswordCheckRequest):
    """Score a candidate password without registering anything."""
    return evaluate_password_strength(request.password)
