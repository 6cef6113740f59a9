import os
import secrets
from datetime import timedelta
from typing import Optional
import jwt
from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from creator_analytics.models.user import User
from creator_analytics.services.user_store import UserStore
from creator_analytics.utils.clock import utc_now
from creator_analytics.utils.dependencies import get_user_store
from creator_analytics.utils.logger import logger

ALGORITHM = "HS256"
JWT_EXPIRES_DAYS = int(os.getenv("JWT_EXPIRES_DAYS", 7))

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
bearer_scheme = HTTPBearer(auto_error=False)

_fallback_secret = None

def get_jwt_secret() -> str:
    global _fallback_secret
    secret = os.getenv("JWT_SECRET")
    if secret:
        return secret
    if _fallback_secret is None:
        # Tokens stop validating on restart (NOT FOR PRODUCTION)
        logger.warning("JWT_SECRET missing. Using a temporary secret.")
        _fallback_secret = secrets.token_urlsafe(32)
    return _fallback_secret

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)

def create_access_token(user_id) -> str:
    payload = {
        "id": str(user_id),
        "exp": utc_now() + timedelta(days=JWT_EXPIRES_DAYS),
    }
    return jwt.encode(payload, get_jwt_secret(), algorithm=ALGORITHM)

def decode_access_token(token: str) -> Optional[str]:
    """Return the user id carried by the token, or None if it is invalid."""
    try:
        payload = jwt.decode(token, get_jwt_secret(), algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired token")
        return None
    except jwt.InvalidTokenError:
        return None
    return payload.get("id")

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    users: UserStore = Depends(get_user_store),
) -> User:
    """
    FastAPI dependency to validate the bearer token and return the User.
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )

    user_id = decode_access_token(credentials.credentials)
    user = await users.get(user_id) if user_id else None

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token"
        )
    if user.disabled:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account disabled"
        )

    return user

async def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != "admin":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return user
