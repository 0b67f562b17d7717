# api/auth/views.py
"""
Authentication and profile endpoints.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_session
from db_models.user import User
from core.security import (
    REFRESH,
    verify_password,
    get_password_hash,
    create_token_pair,
    verify_token_type,
)
from core.deps import CurrentUser
from .models import (
    Token,
    TokenRefresh,
    LoginRequest,
    ProfileUpdate,
    PasswordChange,
    UserResponse,
)


router = APIRouter(prefix="/auth", tags=["authentication"])


async def _authenticate(db: AsyncSession, email: str, password: str) -> Token:
    stmt = select(User).where(User.email == email)
    result = await db.execute(stmt)
    user = result.scalar_one_or_none()

    if user is None or not verify_password(password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Update last login timestamp
    user.last_login_at = datetime.now(timezone.utc)
    await db.commit()

    access_token, refresh_token = create_token_pair(user.id, user.role)
    return Token(access_token=access_token, refresh_token=refresh_token)


@router.post("/login", response_model=Token, summary="Login and get tokens")
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_session),
) -> Token:
    """
    OAuth2 compatible login endpoint; the username field carries the email.
    Returns access and refresh tokens.
    """
    return await _authenticate(db, form_data.username, form_data.password)


@router.post("/login/json", response_model=Token, summary="Login with JSON body")
async def login_json(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_session),
) -> Token:
    """Same as /login, with a JSON body for SPAs and mobile apps."""
    return await _authenticate(db, credentials.email, credentials.password)


@router.post("/refresh", response_model=Token, summary="Refresh access token")
async def refresh_token(
    request: TokenRefresh,
    db: AsyncSession = Depends(get_session),
) -> Token:
    """
    Get a new token pair using a refresh token.
    """
    payload = verify_token_type(request.refresh_token, REFRESH)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token",
        )

    try:
        user_id = int(payload.get("sub"))
    except (ValueError, TypeError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    # Verify user still exists
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    access_token, new_refresh_token = create_token_pair(user.id, user.role)
    return Token(access_token=access_token, refresh_token=new_refresh_token)


@router.get("/me", response_model=UserResponse, summary="Get current user")
async def get_me(current_user: CurrentUser) -> UserResponse:
    """Get the current authenticated user's profile."""
    return UserResponse.model_validate(current_user)


@router.put("/me", response_model=UserResponse, summary="Update current user profile")
async def update_me(
    updates: ProfileUpdate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    """
    Update the current user's name and email. Roles are managed by admins.
    """
    if updates.email is not None:
        # Check email uniqueness
        stmt = select(User).where(User.email == updates.email, User.id != current_user.id)
        result = await db.execute(stmt)
        if result.scalar_one_or_none() is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Email already in use",
            )
        current_user.email = updates.email

    if updates.name is not None:
        current_user.name = updates.name

    await db.commit()
    await db.refresh(current_user)

    return UserResponse.model_validate(current_user)


@router.post("/me/password", summary="Change password")
async def change_password(
    request: PasswordChange,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_session),
) -> dict:
    """Change the current user's password."""
    if not verify_password(request.current_password, current_user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect",
        )

    current_user.hashed_password = get_password_hash(request.new_password)
    await db.commit()

    return {"message": "Password changed successfully"}
