"""
Pydantic models for registry entities.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field
import uuid


class SyncType(str, Enum):
    """Whether sync propagation blocks the poll that detected a change."""
    SYNC = "sync"
    ASYNC = "async"


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Current UTC time."""
    return datetime.now(timezone.utc)


class StoreRef(BaseModel):
    """A store address plus its admin credential."""
    domain: str
    admin_token: str = ""


class StoreInput(BaseModel):
    """Store as submitted by a caller; completeness is checked by the service."""
    domain: Optional[str] = None
    admin_token: Optional[str] = None


class Group(BaseModel):
    """One parent store mirrored to N child stores."""
    id: str = Field(default_factory=generate_uuid)
    name: str
    user_id: str
    parent_store: StoreRef
    child_stores: List[StoreRef] = Field(default_factory=list)
    sync_type: SyncType = SyncType.ASYNC
    is_syncing: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class GroupCreate(BaseModel):
    """Input for creating a new group."""
    name: Optional[str] = None
    parent_store: Optional[StoreInput] = None
    child_stores: List[StoreInput] = Field(default_factory=list)
    sync_type: SyncType = SyncType.ASYNC


class GroupUpdate(BaseModel):
    """Input for editing a group. Ownership and sync state are not editable."""
    name: Optional[str] = None
    parent_store: Optional[StoreInput] = None
    child_stores: Optional[List[StoreInput]] = None
    sync_type: Optional[SyncType] = None


class User(BaseModel):
    """An application user."""
    id: str = Field(default_factory=generate_uuid)
    email: str
    password_hash: Optional[str] = None
    name: Optional[str] = None
    image: Optional[str] = None
    provider: str = "credentials"
    provider_id: str = ""
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
