"""
Processor package for propagation operations.
"""

from .catalog import snapshot, changed_products
from .dispatch import (
    dispatch_products,
    default_client_factory,
    DispatchResult,
    PairResult,
    PairError,
)
from .sync import GroupSyncWorker, SyncManager, toggle_sync
from .runner import (
    scrape,
    upload_many,
    fetch_group_products,
    share_to_group,
    list_groups,
    get_group,
    create_group,
    update_group,
    delete_group,
)

__all__ = [
    "snapshot",
    "changed_products",
    "dispatch_products",
    "default_client_factory",
    "DispatchResult",
    "PairResult",
    "PairError",
    "GroupSyncWorker",
    "SyncManager",
    "toggle_sync",
    "scrape",
    "upload_many",
    "fetch_group_products",
    "share_to_group",
    "list_groups",
    "get_group",
    "create_group",
    "update_group",
    "delete_group",
]
