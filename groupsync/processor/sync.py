"""
Continuous parent -> children propagation for store groups.

A worker polls the parent catalog, diffs it against the previous snapshot
and dispatches new or updated products to every child store. Nothing is
persisted besides the group's is_syncing flag; a restarted worker takes a
fresh baseline.
"""

import asyncio
import logging
from typing import Dict, Optional, Set

from ..config import settings
from ..db import Group, SQLiteDatabase, StoreRef, SyncType
from ..errors import GroupSyncError, NotFound, ValidationError
from .catalog import Snapshot, changed_products, snapshot
from .dispatch import ClientFactory, DispatchResult, default_client_factory, dispatch_products, summarize_errors

logger = logging.getLogger(__name__)

SYNC_ACTIONS = {"sync": True, "unsync": False}


class GroupSyncWorker:
    """Poll-diff-dispatch loop for a single group."""

    def __init__(
        self,
        group_id: str,
        db: SQLiteDatabase,
        poll_interval: Optional[float] = None,
        client_factory: ClientFactory = default_client_factory,
    ):
        self.group_id = group_id
        self.db = db
        self.poll_interval = poll_interval or settings.sync_poll_interval
        self.client_factory = client_factory
        self.propagations = 0
        self._stop = asyncio.Event()
        self._snapshot: Optional[Snapshot] = None
        self._snapshot_source: Optional[StoreRef] = None
        self._inflight: Set[asyncio.Task] = set()

    def stop(self) -> None:
        """Ask the loop to exit; it wakes immediately if sleeping."""
        self._stop.set()

    @property
    def stopping(self) -> bool:
        return self._stop.is_set()

    @property
    def has_baseline(self) -> bool:
        return self._snapshot is not None

    async def run(self) -> None:
        """Run until stopped or the group is no longer syncing."""
        logger.info(f"Sync worker started for group {self.group_id}")
        try:
            while not self._stop.is_set():
                try:
                    group = await self.db.get_group(self.group_id)
                    if group is None or not group.is_syncing:
                        logger.info(f"Group {self.group_id} is no longer syncing")
                        break

                    await self.poll_once(group)
                except Exception:
                    logger.exception(f"Sync cycle failed for group {self.group_id}, retrying next poll")

                try:
                    await asyncio.wait_for(self._stop.wait(), timeout=self.poll_interval)
                except asyncio.TimeoutError:
                    pass
        except asyncio.CancelledError:
            # Shutdown: abandon background propagations instead of draining them
            for task in self._inflight:
                task.cancel()
            raise
        finally:
            if self._inflight:
                await asyncio.gather(*self._inflight, return_exceptions=True)
            logger.info(f"Sync worker stopped for group {self.group_id}")

    async def poll_once(self, group: Group) -> Optional[DispatchResult]:
        """
        Fetch the parent catalog and propagate changes.
        
        The first successful fetch only records a baseline, as does the
        first fetch after the parent store is changed.
        """
        if self._snapshot is not None and self._snapshot_source != group.parent_store:
            logger.info(f"Group '{group.name}': parent store changed, taking a new baseline")
            self._snapshot = None

        parent = self.client_factory(group.parent_store)
        try:
            products = await parent.fetch_products()
        except GroupSyncError as e:
            logger.warning(f"Group '{group.name}': parent fetch failed, retrying next poll: {e}")
            return None
        finally:
            await parent.close()
        
        if self._snapshot is None:
            self._snapshot = snapshot(products)
            self._snapshot_source = group.parent_store
            logger.info(f"Group '{group.name}': baseline of {len(products)} products")
            return None
        
        changed = changed_products(self._snapshot, products)
        self._snapshot = snapshot(products)
        
        if not changed:
            return None
        
        if not group.child_stores:
            logger.info(f"Group '{group.name}': {len(changed)} changes, no child stores")
            return None
        
        logger.info(
            f"Group '{group.name}': propagating {len(changed)} changed products "
            f"to {len(group.child_stores)} child stores ({group.sync_type.value})"
        )
        
        if group.sync_type == SyncType.SYNC:
            return await self._propagate(group, changed)
        
        task = asyncio.create_task(self._propagate(group, changed))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return None

    async def _propagate(self, group: Group, products) -> DispatchResult:
        result = await dispatch_products(
            products, group.child_stores, client_factory=self.client_factory
        )
        self.propagations += 1
        if result.failed_count:
            logger.warning(
                f"Group '{group.name}': {result.failed_count} uploads failed "
                f"{summarize_errors(result)}"
            )
        return result


class SyncManager:
    """Owns one running worker per syncing group."""

    def __init__(
        self,
        db: SQLiteDatabase,
        poll_interval: Optional[float] = None,
        client_factory: ClientFactory = default_client_factory,
    ):
        self.db = db
        self.poll_interval = poll_interval
        self.client_factory = client_factory
        self._workers: Dict[str, GroupSyncWorker] = {}
        self._tasks: Dict[str, asyncio.Task] = {}

    def is_running(self, group_id: str) -> bool:
        task = self._tasks.get(group_id)
        return task is not None and not task.done()

    def start(self, group: Group) -> None:
        """Start a worker for the group unless one is already running."""
        if self.is_running(group.id) and not self._workers[group.id].stopping:
            return
        
        worker = GroupSyncWorker(
            group.id,
            self.db,
            poll_interval=self.poll_interval,
            client_factory=self.client_factory,
        )
        task = asyncio.create_task(worker.run())
        self._workers[group.id] = worker
        self._tasks[group.id] = task
        task.add_done_callback(lambda t, gid=group.id: self._forget(gid, t))

    def _forget(self, group_id: str, task: asyncio.Task) -> None:
        if self._tasks.get(group_id) is task:
            del self._tasks[group_id]
            del self._workers[group_id]
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Sync worker for group {group_id} crashed: {task.exception()}")

    def stop(self, group_id: str) -> None:
        """Signal the group's worker to exit."""
        worker = self._workers.get(group_id)
        if worker:
            worker.stop()

    async def resume(self) -> int:
        """Start workers for every group stored as syncing."""
        groups = await self.db.list_syncing_groups()
        for group in groups:
            self.start(group)
        if groups:
            logger.info(f"Resumed sync for {len(groups)} groups")
        return len(groups)

    async def shutdown(self) -> None:
        """Cancel all workers."""
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)


async def toggle_sync(
    db: SQLiteDatabase,
    manager: Optional[SyncManager],
    group_id: str,
    user_id: str,
    action: str,
) -> Group:
    """
    Flip a group between idle and active.
    
    Raises:
        ValidationError: If action is not "sync" or "unsync"
        NotFound: If the group does not exist or is not owned by the user
    """
    if action not in SYNC_ACTIONS:
        raise ValidationError(f"Action must be 'sync' or 'unsync', got {action!r}")
    
    group = await db.set_group_syncing(group_id, user_id, SYNC_ACTIONS[action])
    if group is None:
        raise NotFound("Group not found")
    
    if manager is not None:
        if group.is_syncing:
            manager.start(group)
        else:
            manager.stop(group.id)
    
    logger.info(f"Sync {'started' if group.is_syncing else 'stopped'} for group '{group.name}'")
    return group
