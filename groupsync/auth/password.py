"""
Password hashing with bcrypt.
"""

from passlib.context import CryptContext

_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a plain-text password."""
    return _context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain-text password against a stored hash."""
    if not password_hash:
        return False
    try:
        return _context.verify(password, password_hash)
    except ValueError:
        # Malformed hash
        return False
