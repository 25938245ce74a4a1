#!/usr/bin/env python3
"""
Run sync workers for every group marked as syncing, without the web server.
Stop with Ctrl+C; workers rebuild their baseline on the next start.
"""

import asyncio
import logging
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from groupsync.config import settings, validate_settings
from groupsync.db import SQLiteDatabase
from groupsync.processor import SyncManager

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


async def main():
    for problem in validate_settings(settings):
        logger.warning(f"Configuration: {problem}")
    
    db = SQLiteDatabase(settings.database_path)
    await db.initialize()
    
    manager = SyncManager(db, poll_interval=settings.sync_poll_interval)
    
    try:
        while True:
            # Pick up groups toggled on through the web app
            for group in await db.list_syncing_groups():
                if not manager.is_running(group.id):
                    manager.start(group)
            await asyncio.sleep(settings.sync_poll_interval)
    finally:
        await manager.shutdown()
        await db.close()


if __name__ == "__main__":
    logger.info("Starting headless sync...")
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Stopped")
