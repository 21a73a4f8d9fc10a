"""
FastAPI dependencies for authentication and authorization.

These dependencies are used to protect endpoints and extract user context
from the bearer token. Nothing here touches the database: the token's
claims are trusted once the signature checks out.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.security import JWTError, decode_token

# HTTP Bearer token scheme (Authorization: Bearer <token>)
# auto_error=False so anonymous requests reach the endpoints that allow them
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class TokenUser:
    """Identity carried by a valid access token."""
    username: str
    is_admin: bool = False


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[TokenUser]:
    """
    Extract the user from the bearer token if one was sent.

    Returns None for anonymous requests and for invalid or expired tokens.
    """
    if not credentials:
        return None

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        return None

    username = payload.get("sub")
    if not username:
        return None
    return TokenUser(username=username, is_admin=bool(payload.get("is_admin", False)))


async def get_current_user(
    user: Optional[TokenUser] = Depends(get_optional_user),
) -> TokenUser:
    """
    Require a logged-in user.

    Raises:
        HTTPException 401: If no valid token was provided
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_admin_user(
    user: TokenUser = Depends(get_current_user),
) -> TokenUser:
    """
    Require an admin.

    Raises:
        HTTPException 401: Not logged in
        HTTPException 403: Logged in but not an admin
    """
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required"
        )
    return user


async def get_self_or_admin(
    username: str,
    user: TokenUser = Depends(get_current_user),
) -> TokenUser:
    """
    Require the user named in the path, or an admin.

    Used on /users/{username} routes; `username` is bound from the path.

    Raises:
        HTTPException 401: Not logged in
        HTTPException 403: Logged in as someone else and not an admin
    """
    if not (user.is_admin or user.username == username):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not allowed to access this user"
        )
    return user
