"""Registration, login and token introspection endpoints.

Tokens are stateless; logout only acknowledges the request and the client
discards its token.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from survey_service.errors import AuthError, ConflictError, NotFoundError
from survey_service.middleware.auth import get_current_user_id
from survey_service.models.database import get_db
from survey_service.models.user import User
from survey_service.schemas.auth import UserLogin, UserOut, UserRegister
from survey_service.services.security import (
    create_access_token,
    hash_password,
    verify_password,
)
from survey_service.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/auth")


def _user_payload(user: User) -> dict:
    return UserOut.model_validate(user).model_dump(by_alias=True, mode="json")


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(payload: UserRegister, db: AsyncSession = Depends(get_db)) -> dict:
    """Create an account and return it with an access token.

    Raises:
        ConflictError: If the email is already registered
    """
    if await User.get_by_email(db, payload.email) is not None:
        raise ConflictError("Email already registered")

    user = User(
        email=payload.email,
        password_hash=hash_password(payload.password),
        name=payload.name,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        await db.rollback()
        raise ConflictError("Email already registered")
    await db.refresh(user)

    logger.info("User registered", extra={"user_id": user.id})
    return {
        "success": True,
        "message": "User registered successfully",
        "data": {"user": _user_payload(user), "token": create_access_token(user.id)},
    }


@router.post("/login")
async def login(payload: UserLogin, db: AsyncSession = Depends(get_db)) -> dict:
    """Exchange email and password for an access token.

    Unknown emails and wrong passwords get the same message.
    """
    user = await User.get_by_email(db, payload.email)
    if user is None or not user.is_active or not verify_password(payload.password, user.password_hash):
        logger.info("Login failed")
        raise AuthError("Invalid credentials")

    logger.info("Login successful", extra={"user_id": user.id})
    return {
        "success": True,
        "message": "Login successful",
        "data": {"user": _user_payload(user), "token": create_access_token(user.id)},
    }


@router.get("/me")
async def me(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> dict:
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return {"success": True, "data": {"user": _user_payload(user)}}


@router.get("/validate")
async def validate_token(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Confirm a token still belongs to an existing user."""
    user = await db.get(User, user_id)
    if user is None:
        raise AuthError("User not found")
    return {"data": {"user": {"id": user.id, "email": user.email, "name": user.name}}}


@router.post("/logout")
async def logout(user_id: int = Depends(get_current_user_id)) -> dict:
    logger.info("User logged out", extra={"user_id": user_id})
    return {"success": True, "message": "Logged out successfully"}
