"""
User service.

Passwords are hashed here, before a User record exists.
"""

import logging
from typing import Optional

from ..db import SQLiteDatabase, User
from ..errors import ValidationError
from .password import hash_password, verify_password

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


async def create_user_with_password(
    db: SQLiteDatabase,
    email: str,
    raw_password: str,
    name: Optional[str] = None,
) -> User:
    """
    Create a credentials user.
    
    Raises:
        ValidationError: If email/password are missing or the email is taken
    """
    email = (email or "").strip().lower()
    if not email or "@" not in email:
        raise ValidationError("A valid email is required")
    if not raw_password or len(raw_password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    
    if await db.get_user_by_email(email):
        raise ValidationError("Email is already registered")
    
    user = User(
        email=email,
        password_hash=hash_password(raw_password),
        name=(name or "").strip() or email.split("@")[0],
        provider="credentials",
        provider_id=email,
    )
    await db.create_user(user)
    logger.info(f"Created user {user.id}")
    return user


async def authenticate_user(db: SQLiteDatabase, email: str, password: str) -> Optional[User]:
    """Return the user if the credentials match, else None."""
    user = await db.get_user_by_email(email or "")
    if user is None or not user.password_hash:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user
