"""
Request dependencies: the authenticated user and owner-scoped projects
"""

import uuid

from fastapi import Depends, Path
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sentinel.core.database import get_db
from sentinel.core.exceptions import AuthenticationError, InactiveUserError
from sentinel.core.logging_config import set_user_id, set_project_id
from sentinel.core.security import ACCESS_TOKEN_TYPE, decode_token
from sentinel.models.user import User
from sentinel.models.project import Project
from sentinel.services.project_service import ProjectService

security = HTTPBearer()


def _user_id_from_claims(claims: dict) -> str:
    if claims.get("type") != ACCESS_TOKEN_TYPE:
        raise AuthenticationError("Invalid token type")

    user_id = claims.get("sub")
    try:
        uuid.UUID(str(user_id))
    except ValueError:
        raise AuthenticationError("Invalid token subject")
    return user_id


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Resolve the bearer token to an active user"""
    user_id = _user_id_from_claims(decode_token(credentials.credentials))

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise InactiveUserError()

    set_user_id(str(user.id))
    return user


async def get_project_service(db: AsyncSession = Depends(get_db)) -> ProjectService:
    return ProjectService(db)


async def get_user_project(
    project_id: str = Path(..., description="Project ID"),
    current_user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service)
) -> Project:
    """
    The path's project, if the caller owns it.

    Projects owned by someone else raise ProjectNotFoundError exactly like
    missing ones.
    """
    project = await service.get_project(project_id, str(current_user.id))
    set_project_id(str(project.id))
    return project
