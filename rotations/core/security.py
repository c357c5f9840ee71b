from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from fastapi.security import OAuth2PasswordBearer
from fastapi import Depends, HTTPException, status
from pydantic import ValidationError

from rotations.core.config import (
    JWT_SECRET_KEY,
    JWT_ALGORITHM,
    ACCESS_TOKEN_EXPIRE_MINUTES,
    TOKEN_URL,
)
from rotations.core.errors import PermissionDenied
from rotations.schemas.auth import Actor, ActorRole, TokenData

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=TOKEN_URL)
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl=TOKEN_URL, auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT token with expiration.

    Production tokens come from the identity provider; this is used by the
    seeder and the test suite to mint tokens with the same claims.
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def token_for(actor: Actor, expires_delta: Optional[timedelta] = None) -> str:
    return create_access_token({"sub": actor.id, "role": actor.role.value}, expires_delta)


def _decode_actor(token: str) -> Actor:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
        token_data = TokenData(sub=payload.get("sub"), role=payload.get("role"))
        if not token_data.sub or not ActorRole.has_value(token_data.role):
            raise credentials_exception
        # Actor ids share the 64-character limit of the actor columns
        return Actor(id=token_data.sub, role=ActorRole(token_data.role))
    except (JWTError, ValidationError):
        raise credentials_exception


async def get_current_actor(token: str = Depends(oauth2_scheme)) -> Actor:
    """Get the calling actor from the bearer token's ``sub`` and ``role`` claims"""
    return _decode_actor(token)


async def get_optional_actor(token: Optional[str] = Depends(optional_oauth2_scheme)) -> Optional[Actor]:
    """Like get_current_actor, but anonymous callers get None instead of a 401"""
    if token is None:
        return None
    return _decode_actor(token)


async def get_current_admin(
    current_actor: Actor = Depends(get_current_actor)
) -> Actor:
    """Dependency to validate admin role"""
    if not current_actor.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
            headers={"WWW-Authenticate": "Bearer"}
        )
    return current_actor


def ensure_admin(actor: Actor, action: str) -> None:
    """Service-level guard for admin-only operations."""
    if not actor.is_admin:
        raise PermissionDenied(f"Admin privileges required to {action}")
