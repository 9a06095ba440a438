"""
Authentication Utility - JWT handling.

Provides:
- JWT token creation/verification
- FastAPI dependencies for protected routes

Tokens are issued by the portal's login service; this module only verifies
them and resolves the caller. The resolved admin id is passed explicitly to
every mutating service call.
"""

from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import text

from app.core.config import get_settings
from app.db.postgres import get_db_session

settings = get_settings()

# Bearer token extractor
bearer_scheme = HTTPBearer()


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


async def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> dict:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @app.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            return user
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(credentials.credentials)
    if not payload:
        raise credentials_exception

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise credentials_exception

    with get_db_session() as db:
        result = db.execute(
            text("SELECT userid, username, user_type, is_enable FROM user_master WHERE userid = :id"),
            {"id": user_id}
        )
        user = result.fetchone()

    if not user:
        raise credentials_exception

    if str(user[3]) != "1":  # is_enable
        raise HTTPException(status_code=403, detail="Account disabled")

    return {"userid": user[0], "username": user[1], "role": user[2]}


async def get_current_admin(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require the administrator role."""
    if user["role"] != settings.admin_role:
        raise HTTPException(status_code=403, detail="Administrators only")
    return user
