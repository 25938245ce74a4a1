"""
FastAPI dependency injection.
Database, session management and the sync worker manager.
"""

from typing import Optional

import httpx
from fastapi import Request

from .config import settings
from .db import SQLiteDatabase
from .auth import SessionManager
from .errors import Unauthorized
from .processor import SyncManager


# Global instances (initialized on startup)
_db: Optional[SQLiteDatabase] = None
_session_manager: Optional[SessionManager] = None
_sync_manager: Optional[SyncManager] = None


async def init_dependencies():
    """Initialize global dependencies. Called on app startup."""
    global _db, _session_manager, _sync_manager
    
    _db = SQLiteDatabase(settings.database_path)
    await _db.initialize()
    
    _session_manager = SessionManager(
        settings.session_secret, secure=settings.session_cookie_secure
    )
    
    _sync_manager = SyncManager(_db, poll_interval=settings.sync_poll_interval)
    await _sync_manager.resume()


async def close_dependencies():
    """Close global dependencies. Called on app shutdown."""
    global _db, _sync_manager
    if _sync_manager:
        await _sync_manager.shutdown()
        _sync_manager = None
    if _db:
        await _db.close()
        _db = None


def get_db() -> SQLiteDatabase:
    """Get the database instance."""
    if _db is None:
        raise RuntimeError("Database not initialized")
    return _db


def get_session_manager() -> SessionManager:
    """Get the session manager instance."""
    if _session_manager is None:
        raise RuntimeError("Session manager not initialized")
    return _session_manager


def get_sync_manager() -> SyncManager:
    """Get the sync worker manager."""
    if _sync_manager is None:
        raise RuntimeError("Sync manager not initialized")
    return _sync_manager


def get_store_transport() -> Optional[httpx.AsyncBaseTransport]:
    """Transport for outbound store requests; None uses the network."""
    return None


async def require_user(request: Request) -> str:
    """
    Dependency that requires an authenticated user.
    
    Returns:
        The signed-in user's id
    """
    user_id = get_session_manager().get_user_id(request)
    if not user_id:
        raise Unauthorized()
    
    if await get_db().get_user(user_id) is None:
        # Session outlived its user
        raise Unauthorized()
    
    return user_id
