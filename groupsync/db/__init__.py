"""
Database package - SQLite only.
"""

from .models import (
    Group, GroupCreate, GroupUpdate, StoreRef, StoreInput, SyncType,
    User, generate_uuid, utcnow
)
from .sqlite import SQLiteDatabase

__all__ = [
    "SQLiteDatabase",
    "Group",
    "GroupCreate",
    "GroupUpdate",
    "StoreRef",
    "StoreInput",
    "SyncType",
    "User",
    "generate_uuid",
    "utcnow",
]
