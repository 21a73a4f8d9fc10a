"""
Pydantic schemas for users and authentication.
"""

from pydantic import EmailStr, Field
from typing import List, Optional
from app.schemas.base import CamelModel


class UserRegisterRequest(CamelModel):
    """Request schema for self-registration. New accounts are never admins."""
    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(
        ...,
        min_length=5,
        max_length=72,  # bcrypt limit
    )
    first_name: str = Field(..., min_length=1, max_length=30)
    last_name: str = Field(..., min_length=1, max_length=30)
    email: EmailStr

    class Config:
        extra = "forbid"


class UserCreateRequest(UserRegisterRequest):
    """Request schema for admin-created users, which may be admins."""
    is_admin: bool = False


class UserUpdateRequest(CamelModel):
    """Partial user update."""
    first_name: Optional[str] = Field(None, min_length=1, max_length=30)
    last_name: Optional[str] = Field(None, min_length=1, max_length=30)
    password: Optional[str] = Field(None, min_length=5, max_length=72)
    email: Optional[EmailStr] = None

    class Config:
        extra = "forbid"


class LoginRequest(CamelModel):
    username: str
    password: str


class TokenResponse(CamelModel):
    """JWT token response."""
    token: str


class UserResponse(CamelModel):
    """User profile response (no password)."""
    username: str
    first_name: str
    last_name: str
    email: str
    is_admin: bool


class UserDetail(UserResponse):
    """User with applied job ids; `jobs` is absent when there are none."""
    jobs: Optional[List[int]] = None


class UserEnvelope(CamelModel):
    user: UserDetail


class UserTokenResponse(CamelModel):
    user: UserResponse
    token: str


class UserListResponse(CamelModel):
    users: List[UserResponse]
