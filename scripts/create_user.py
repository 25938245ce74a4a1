#!/usr/bin/env python3
"""
Create a password user.
Usage: python scripts/create_user.py <email> <password> [name]
"""

import asyncio
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from groupsync.auth import create_user_with_password
from groupsync.config import settings
from groupsync.db import SQLiteDatabase
from groupsync.errors import ValidationError


async def main(email: str, password: str, name: str = None) -> int:
    db = SQLiteDatabase(settings.database_path)
    await db.initialize()
    
    try:
        user = await create_user_with_password(db, email, password, name)
    except ValidationError as e:
        print(f"Error: {e}")
        return 1
    finally:
        await db.close()
    
    print(f"Created user {user.email} ({user.id})")
    return 0


if __name__ == "__main__":
    if len(sys.argv) not in (3, 4):
        print("Usage: python scripts/create_user.py <email> <password> [name]")
        sys.exit(1)
    
    sys.exit(asyncio.run(main(*sys.argv[1:])))
