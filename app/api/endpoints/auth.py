"""
Authentication endpoints.

- POST /auth/token: exchange username/password for a JWT
- POST /auth/register: create a (non-admin) account and get a JWT
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncConnection

from app.core.database import get_db
from app.core.security import create_access_token
from app.crud import user as user_crud
from app.schemas.user import LoginRequest, TokenResponse, UserRegisterRequest

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)


@router.post("/token", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    db: AsyncConnection = Depends(get_db)
):
    """
    Authenticate a user and return a JWT.

    Returns 401 for an unknown username or wrong password.
    """
    user = await user_crud.authenticate(db, request.username, request.password)
    return TokenResponse(token=create_access_token(user["username"], user["isAdmin"]))


@router.post("/register", status_code=201, response_model=TokenResponse)
async def register(
    request: UserRegisterRequest,
    db: AsyncConnection = Depends(get_db)
):
    """
    Register a new user account and return a JWT for immediate use.

    Self-registered accounts are never admins.
    """
    data = request.model_dump(by_alias=True)
    data["isAdmin"] = False
    user = await user_crud.register(db, data)
    logger.info(f"New user registered: {user['username']}")
    return TokenResponse(token=create_access_token(user["username"], user["isAdmin"]))
