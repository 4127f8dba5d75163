from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sentinel.core.database import get_db
from sentinel.core.logging_config import logger, set_user_id
from sentinel.core.security import create_access_token, get_password_hash, verify_password
from sentinel.models.user import User
from sentinel.modules.auth.dependencies import get_current_user
from sentinel.schemas.auth import Token, UserLogin, UserRegister, UserResponse

router = APIRouter()


async def _find_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


def _reject(request: Request, event: str, email: str, status_code: int, reason: str) -> HTTPException:
    """Record a failed auth attempt and build the error to raise"""
    logger.log_auth_event(
        event=event,
        success=False,
        user_email=email,
        reason=reason,
        client_ip=request.client.host if request.client else "unknown",
    )
    return HTTPException(status_code=status_code, detail=reason)


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(request: Request, user_data: UserRegister, db: AsyncSession = Depends(get_db)):
    if await _find_by_email(db, user_data.email) is not None:
        raise _reject(request, "register", user_data.email, status.HTTP_400_BAD_REQUEST, "Email already registered")

    user = User(
        email=user_data.email,
        full_name=user_data.full_name,
        hashed_password=get_password_hash(user_data.password),
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.log_auth_event(event="register", success=True, user_email=user.email)
    return user


@router.post("/login", response_model=Token)
async def login(request: Request, credentials: UserLogin, db: AsyncSession = Depends(get_db)):
    """Exchange email and password for a bearer token"""
    user = await _find_by_email(db, credentials.email)

    if user is None or not verify_password(credentials.password, user.hashed_password):
        raise _reject(request, "login", credentials.email, status.HTTP_401_UNAUTHORIZED, "Incorrect email or password")
    if not user.is_active:
        raise _reject(request, "login", credentials.email, status.HTTP_403_FORBIDDEN, "Account is inactive")

    user.last_login = datetime.utcnow()
    await db.commit()
    set_user_id(str(user.id))

    logger.log_auth_event(event="login", success=True, user_email=user.email)
    return Token(access_token=create_access_token({"sub": str(user.id), "email": user.email}))


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    return current_user
