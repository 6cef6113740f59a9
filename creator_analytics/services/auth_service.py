import re
from typing import Optional, Tuple
from creator_analytics.errors import AlreadyExists, Forbidden, InvalidArgument, NotFound, Unauthorized
from creator_analytics.models.user import ROLES, User
from creator_analytics.utils.auth import create_access_token, hash_password, verify_password
from creator_analytics.utils.logger import logger

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6

async def register_user(users, name: str, email: str, password: str,
                        role: Optional[str] = None) -> Tuple[str, User]:
    """Create an account and return (token, user)."""
    if not name or not email or not password:
        raise InvalidArgument("Missing required fields: name, email, password")
    if not EMAIL_RE.match(email):
        raise InvalidArgument("Invalid email format")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidArgument(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if role and role not in ROLES:
        raise InvalidArgument("Role must be user or admin")

    if await users.find_by_email(email):
        raise AlreadyExists("Email already registered")

    user = await users.create(name, email, hash_password(password), role or "user")
    logger.info(f"Registered user {user.id} ({user.role})")
    return create_access_token(user.id), user

async def login_user(users, email: str, password: str) -> Tuple[str, User]:
    if not email or not password:
        raise InvalidArgument("Missing required fields: email, password")

    user = await users.find_by_email(email)
    if not user:
        raise Unauthorized("Invalid email or password")
    if user.disabled:
        raise Forbidden("Account disabled")
    if not verify_password(password, user.password_hash):
        raise Unauthorized("Invalid email or password")

    return create_access_token(user.id), user

async def list_users_with_counts(users, creators) -> list:
    """All users with the number of creators each one owns."""
    result = []
    for user in await users.list_all():
        result.append({"user": user, "creatorCount": await creators.count(user.id)})
    return result

async def set_user_disabled(users, user_id, disabled: bool) -> User:
    user = await users.get(user_id)
    if not user:
        raise NotFound("User not found")
    user.disabled = bool(disabled)
    await users.save(user)
    logger.info(f"User {user.id} {'disabled' if user.disabled else 'enabled'}")
    return user
