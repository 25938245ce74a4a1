"""
Cookie-based session management.
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import Request, Response
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired


# Session duration: 30 days
SESSION_MAX_AGE = 30 * 24 * 60 * 60  # seconds
SESSION_COOKIE_NAME = "session"


class SessionManager:
    """Manages signed cookie-based sessions."""

    def __init__(self, secret_key: str, secure: bool = False):
        """
        Initialize session manager.
        
        Args:
            secret_key: Secret key for signing cookies
            secure: Only send the cookie over HTTPS
        """
        self._serializer = URLSafeTimedSerializer(secret_key)
        self._secure = secure

    def create_session(self, response: Response, user_id: str) -> None:
        """
        Create a new session for a user and set the cookie.
        
        Args:
            response: FastAPI response object
            user_id: Id of the signed-in user
        """
        session_data = {
            "user_id": user_id,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }

        token = self._serializer.dumps(session_data)

        response.set_cookie(
            key=SESSION_COOKIE_NAME,
            value=token,
            max_age=SESSION_MAX_AGE,
            httponly=True,  # Not accessible via JavaScript
            samesite="lax",  # CSRF protection
            secure=self._secure,
        )

    def get_session(self, request: Request) -> Optional[dict]:
        """
        Get session data from request cookie.
        
        Returns:
            Session data dict or None if invalid/expired
        """
        token = request.cookies.get(SESSION_COOKIE_NAME)
        if not token:
            return None

        try:
            return self._serializer.loads(token, max_age=SESSION_MAX_AGE)
        except (BadSignature, SignatureExpired):
            return None

    def get_user_id(self, request: Request) -> Optional[str]:
        """User id carried by the request's session, if any."""
        session = self.get_session(request)
        if not session:
            return None
        return session.get("user_id")

    def clear_session(self, response: Response) -> None:
        """Clear the session cookie."""
        response.delete_cookie(
            key=SESSION_COOKIE_NAME,
            httponly=True,
            samesite="lax",
        )
