"""
Authentication module.
"""

from groupsync.auth.password import hash_password, verify_password
from groupsync.auth.session import SessionManager, SESSION_COOKIE_NAME
from groupsync.auth.users import authenticate_user, create_user_with_password

__all__ = [
    "hash_password",
    "verify_password",
    "SessionManager",
    "SESSION_COOKIE_NAME",
    "authenticate_user",
    "create_user_with_password",
]
