"""
Tests for passwords, the user service and sessions.
"""

import pytest
from starlette.requests import Request
from starlette.responses import Response

from groupsync.auth import (
    SESSION_COOKIE_NAME,
    SessionManager,
    authenticate_user,
    create_user_with_password,
    hash_password,
    verify_password,
)
from groupsync.errors import ValidationError


class TestPasswords:
    """Tests for bcrypt hashing."""
    
    def test_hash_and_verify(self):
        hashed = hash_password("correct horse")
        assert hashed != "correct horse"
        assert verify_password("correct horse", hashed) is True
        assert verify_password("wrong horse", hashed) is False
    
    def test_empty_or_malformed_hash(self):
        assert verify_password("anything", "") is False
        assert verify_password("anything", "not-a-hash") is False


class TestCreateUserWithPassword:
    """Tests for the user service."""
    
    def test_stores_only_the_hash(self, with_db):
        async def scenario(db):
            user = await create_user_with_password(db, " Jo@Example.com ", "s3cret-pass")
            return await db.get_user(user.id)
        
        stored = with_db(scenario)
        
        assert stored.email == "jo@example.com"
        assert stored.name == "jo"
        assert stored.password_hash != "s3cret-pass"
        assert verify_password("s3cret-pass", stored.password_hash)
    
    def test_duplicate_email_rejected(self, with_db):
        async def scenario(db):
            await create_user_with_password(db, "jo@example.com", "s3cret-pass")
            with pytest.raises(ValidationError):
                await create_user_with_password(db, "JO@example.com", "other-pass")
        
        with_db(scenario)
    
    def test_short_password_rejected(self, with_db):
        async def scenario(db):
            with pytest.raises(ValidationError):
                await create_user_with_password(db, "jo@example.com", "short")
            return await db.get_user_by_email("jo@example.com")
        
        assert with_db(scenario) is None
    
    def test_authenticate(self, with_db):
        async def scenario(db):
            user = await create_user_with_password(db, "jo@example.com", "s3cret-pass")
            ok = await authenticate_user(db, "jo@example.com", "s3cret-pass")
            bad = await authenticate_user(db, "jo@example.com", "nope")
            unknown = await authenticate_user(db, "who@example.com", "s3cret-pass")
            return user, ok, bad, unknown
        
        user, ok, bad, unknown = with_db(scenario)
        
        assert ok.id == user.id
        assert bad is None
        assert unknown is None


def _request_with_cookie(value: str) -> Request:
    headers = [(b"cookie", f"{SESSION_COOKIE_NAME}={value}".encode())]
    return Request({"type": "http", "headers": headers})


class TestSessionManager:
    """Tests for signed session cookies."""
    
    def test_user_id_round_trip(self):
        manager = SessionManager("secret")
        response = Response()
        manager.create_session(response, "user-42")
        
        cookie = response.headers["set-cookie"].split(";")[0].split("=", 1)[1]
        
        assert manager.get_user_id(_request_with_cookie(cookie)) == "user-42"
    
    def test_tampered_cookie_rejected(self):
        manager = SessionManager("secret")
        forged = SessionManager("other-secret")
        response = Response()
        forged.create_session(response, "user-42")
        
        cookie = response.headers["set-cookie"].split(";")[0].split("=", 1)[1]
        
        assert manager.get_user_id(_request_with_cookie(cookie)) is None
    
    def test_no_cookie(self):
        assert SessionManager("secret").get_user_id(Request({"type": "http", "headers": []})) is None
    
    def test_secure_flag(self):
        response = Response()
        SessionManager("secret", secure=True).create_session(response, "user-42")
        attributes = response.headers["set-cookie"].lower().split(";")[1:]
        assert "secure" in [a.strip() for a in attributes]
        
        plain = Response()
        SessionManager("secret").create_session(plain, "user-42")
        attributes = plain.headers["set-cookie"].lower().split(";")[1:]
        assert "secure" not in [a.strip() for a in attributes]
