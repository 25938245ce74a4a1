"""
SQLite database implementation.
Simple and direct - no abstraction layers.
"""

import aiosqlite
import json
from datetime import datetime
from typing import List, Optional
import os

from .models import Group, StoreRef, SyncType, User, utcnow


class SQLiteDatabase:
    """SQLite database for users and store groups."""
    
    def __init__(self, db_path: str):
        self.db_path = db_path
        self._connection: Optional[aiosqlite.Connection] = None
    
    async def _get_connection(self) -> aiosqlite.Connection:
        """Get or create database connection."""
        if self._connection is None:
            os.makedirs(os.path.dirname(self.db_path) or ".", exist_ok=True)
            self._connection = await aiosqlite.connect(self.db_path)
            self._connection.row_factory = aiosqlite.Row
        return self._connection
    
    async def initialize(self) -> None:
        """Create database tables."""
        conn = await self._get_connection()
        
        await conn.executescript("""
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                email TEXT NOT NULL UNIQUE,
                password_hash TEXT,
                name TEXT,
                image TEXT,
                provider TEXT NOT NULL,
                provider_id TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );
            
            CREATE TABLE IF NOT EXISTS groups (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                user_id TEXT NOT NULL,
                parent_domain TEXT NOT NULL,
                parent_admin_token TEXT NOT NULL,
                child_stores TEXT NOT NULL DEFAULT '[]',
                sync_type TEXT NOT NULL DEFAULT 'async',
                is_syncing INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
            );
            
            CREATE INDEX IF NOT EXISTS idx_groups_user_id ON groups(user_id);
            CREATE INDEX IF NOT EXISTS idx_groups_created_at ON groups(user_id, created_at DESC);
        """)
        await conn.commit()
    
    async def close(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None
    
    # ===== Helper Methods =====
    
    def _row_to_group(self, row: aiosqlite.Row) -> Group:
        """Convert a database row to a Group model."""
        child_stores = [StoreRef(**item) for item in json.loads(row["child_stores"])]
        return Group(
            id=row["id"],
            name=row["name"],
            user_id=row["user_id"],
            parent_store=StoreRef(
                domain=row["parent_domain"],
                admin_token=row["parent_admin_token"]
            ),
            child_stores=child_stores,
            sync_type=SyncType(row["sync_type"]),
            is_syncing=bool(row["is_syncing"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"])
        )
    
    def _row_to_user(self, row: aiosqlite.Row) -> User:
        """Convert a database row to a User model."""
        return User(
            id=row["id"],
            email=row["email"],
            password_hash=row["password_hash"],
            name=row["name"],
            image=row["image"],
            provider=row["provider"],
            provider_id=row["provider_id"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"])
        )
    
    @staticmethod
    def _dump_stores(stores: List[StoreRef]) -> str:
        return json.dumps([store.model_dump() for store in stores])
    
    # ===== User Operations =====
    
    async def create_user(self, user: User) -> User:
        conn = await self._get_connection()
        await conn.execute(
            """
            INSERT INTO users (id, email, password_hash, name, image, provider,
                               provider_id, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                user.id,
                user.email,
                user.password_hash,
                user.name,
                user.image,
                user.provider,
                user.provider_id,
                user.created_at.isoformat(),
                user.updated_at.isoformat()
            )
        )
        await conn.commit()
        return user
    
    async def get_user(self, user_id: str) -> Optional[User]:
        conn = await self._get_connection()
        cursor = await conn.execute("SELECT * FROM users WHERE id = ?", (user_id,))
        row = await cursor.fetchone()
        return self._row_to_user(row) if row else None
    
    async def get_user_by_email(self, email: str) -> Optional[User]:
        conn = await self._get_connection()
        cursor = await conn.execute(
            "SELECT * FROM users WHERE email = ?", (email.strip().lower(),)
        )
        row = await cursor.fetchone()
        return self._row_to_user(row) if row else None
    
    # ===== Group Operations =====
    
    async def create_group(self, group: Group) -> Group:
        conn = await self._get_connection()
        await conn.execute(
            """
            INSERT INTO groups (id, name, user_id, parent_domain, parent_admin_token,
                                child_stores, sync_type, is_syncing, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                group.id,
                group.name,
                group.user_id,
                group.parent_store.domain,
                group.parent_store.admin_token,
                self._dump_stores(group.child_stores),
                group.sync_type.value,
                int(group.is_syncing),
                group.created_at.isoformat(),
                group.updated_at.isoformat()
            )
        )
        await conn.commit()
        return group
    
    async def get_group(self, group_id: str) -> Optional[Group]:
        conn = await self._get_connection()
        cursor = await conn.execute("SELECT * FROM groups WHERE id = ?", (group_id,))
        row = await cursor.fetchone()
        return self._row_to_group(row) if row else None
    
    async def find_owned_group(self, group_id: str, user_id: str) -> Optional[Group]:
        conn = await self._get_connection()
        cursor = await conn.execute(
            "SELECT * FROM groups WHERE id = ? AND user_id = ?", (group_id, user_id)
        )
        row = await cursor.fetchone()
        return self._row_to_group(row) if row else None
    
    async def list_groups_by_user(self, user_id: str) -> List[Group]:
        conn = await self._get_connection()
        cursor = await conn.execute(
            "SELECT * FROM groups WHERE user_id = ? ORDER BY created_at DESC, rowid DESC",
            (user_id,)
        )
        rows = await cursor.fetchall()
        return [self._row_to_group(row) for row in rows]
    
    async def list_syncing_groups(self) -> List[Group]:
        conn = await self._get_connection()
        cursor = await conn.execute("SELECT * FROM groups WHERE is_syncing = 1")
        rows = await cursor.fetchall()
        return [self._row_to_group(row) for row in rows]
    
    async def update_group(self, group_id: str, user_id: str, **kwargs) -> Optional[Group]:
        if not kwargs:
            return await self.find_owned_group(group_id, user_id)
        
        updates = []
        values = []
        
        for key, value in kwargs.items():
            if key == "name":
                updates.append("name = ?")
                values.append(value)
            elif key == "parent_store":
                updates.append("parent_domain = ?")
                values.append(value.domain)
                updates.append("parent_admin_token = ?")
                values.append(value.admin_token)
            elif key == "child_stores":
                updates.append("child_stores = ?")
                values.append(self._dump_stores(value))
            elif key == "sync_type":
                updates.append("sync_type = ?")
                values.append(value.value if isinstance(value, SyncType) else value)
            elif key == "is_syncing":
                updates.append("is_syncing = ?")
                values.append(int(value))
        
        updates.append("updated_at = ?")
        values.append(utcnow().isoformat())
        values.extend([group_id, user_id])
        
        conn = await self._get_connection()
        cursor = await conn.execute(
            f"UPDATE groups SET {', '.join(updates)} WHERE id = ? AND user_id = ?", values
        )
        await conn.commit()
        
        if cursor.rowcount == 0:
            return None
        return await self.find_owned_group(group_id, user_id)
    
    async def set_group_syncing(self, group_id: str, user_id: str, is_syncing: bool) -> Optional[Group]:
        return await self.update_group(group_id, user_id, is_syncing=is_syncing)
    
    async def delete_group(self, group_id: str, user_id: str) -> bool:
        conn = await self._get_connection()
        cursor = await conn.execute(
            "DELETE FROM groups WHERE id = ? AND user_id = ?", (group_id, user_id)
        )
        await conn.commit()
        return cursor.rowcount > 0
