"""
User management endpoints.

- POST /users: admin creates a user (possibly another admin)
- GET /users: admin lists users
- GET/PATCH/DELETE /users/{username}: the user themselves or an admin
- POST /users/{username}/jobs/{job_id}: apply to a job
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncConnection

from app.core.database import get_db
from app.core.deps import TokenUser, get_admin_user, get_self_or_admin
from app.core.security import create_access_token
from app.crud import user as user_crud
from app.schemas.user import (
    UserCreateRequest,
    UserEnvelope,
    UserListResponse,
    UserTokenResponse,
    UserUpdateRequest,
)

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)


@router.post("", status_code=201, response_model=UserTokenResponse)
async def create_user(
    request: UserCreateRequest,
    db: AsyncConnection = Depends(get_db),
    admin: TokenUser = Depends(get_admin_user)
):
    """
    Create a user and return a token for them.

    Authorization required: admin
    """
    user = await user_crud.register(db, request.model_dump(by_alias=True))
    token = create_access_token(user["username"], user["isAdmin"])
    return {"user": user, "token": token}


@router.get("", response_model=UserListResponse)
async def list_users(
    db: AsyncConnection = Depends(get_db),
    admin: TokenUser = Depends(get_admin_user)
):
    """List all users. Authorization required: admin"""
    users = await user_crud.find_all(db)
    return {"users": users}


@router.get("/{username}", response_model=UserEnvelope, response_model_exclude_unset=True)
async def get_user(
    username: str,
    db: AsyncConnection = Depends(get_db),
    current: TokenUser = Depends(get_self_or_admin)
):
    """Get a user and their applied job ids. Authorization required: same user or admin"""
    user = await user_crud.get(db, username)
    return {"user": user}


@router.patch("/{username}", response_model=UserEnvelope, response_model_exclude_unset=True)
async def update_user(
    username: str,
    request: UserUpdateRequest,
    db: AsyncConnection = Depends(get_db),
    current: TokenUser = Depends(get_self_or_admin)
):
    """
    Partially update a user: {firstName, lastName, password, email}.

    Authorization required: same user or admin
    """
    data = request.model_dump(by_alias=True, exclude_unset=True)
    user = await user_crud.update(db, username, data)
    return {"user": user}


@router.delete("/{username}")
async def delete_user(
    username: str,
    db: AsyncConnection = Depends(get_db),
    current: TokenUser = Depends(get_self_or_admin)
):
    """Delete a user. Authorization required: same user or admin"""
    await user_crud.remove(db, username)
    logger.info(f"{current.username} deleted user {username}")
    return {"deleted": username}


@router.post("/{username}/jobs/{job_id}")
async def apply_to_job(
    username: str,
    job_id: int,
    db: AsyncConnection = Depends(get_db),
    current: TokenUser = Depends(get_self_or_admin)
):
    """Apply to a job. Authorization required: same user or admin"""
    applied = await user_crud.apply_to_job(db, username, job_id)
    return {"applied": applied}
