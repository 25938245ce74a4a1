"""
Operations exposed to the API layer and scripts.

Validation and ownership checks happen here, before any store I/O.
"""

import logging
from typing import List, Optional, Sequence

import httpx

from ..db import (
    Group, GroupCreate, GroupUpdate, SQLiteDatabase, StoreInput, StoreRef
)
from ..errors import NotFound, ValidationError
from ..shopify import Product, ShopifyStoreClient, scrape_products
from .dispatch import ClientFactory, DispatchResult, default_client_factory, dispatch_products
from .sync import SyncManager

logger = logging.getLogger(__name__)


def _require_store(store: Optional[StoreInput], prefix: str) -> StoreRef:
    """Turn submitted store input into a StoreRef, or raise ValidationError."""
    if store is None or not (store.domain or "").strip():
        raise ValidationError(f"{prefix}domain is required")
    if not (store.admin_token or "").strip():
        raise ValidationError(f"{prefix}admin_token is required")
    return StoreRef(domain=store.domain.strip(), admin_token=store.admin_token.strip())


def _require_children(stores: Sequence[StoreInput]) -> List[StoreRef]:
    return [
        _require_store(store, f"child_stores[{index}].")
        for index, store in enumerate(stores)
    ]


# ===== Product sources =====

async def scrape(
    domain: str, transport: Optional[httpx.AsyncBaseTransport] = None
) -> List[Product]:
    """Scrape a storefront's public catalog."""
    if not domain or not domain.strip():
        raise ValidationError("domain is required")
    return await scrape_products(domain, transport=transport)


async def fetch_group_products(
    db: SQLiteDatabase,
    group_id: str,
    user_id: str,
    client_factory: ClientFactory = default_client_factory,
) -> List[Product]:
    """Read the parent store's catalog through the admin API."""
    group = await get_group(db, group_id, user_id)
    client: ShopifyStoreClient = client_factory(group.parent_store)
    async with client:
        return await client.fetch_products()


# ===== One-shot propagation =====

async def upload_many(
    store: StoreInput,
    products: Sequence[Product],
    client_factory: ClientFactory = default_client_factory,
) -> DispatchResult:
    """Upload products to a single store."""
    destination = _require_store(store, "")
    if not products:
        raise ValidationError("products array is required")
    return await dispatch_products(products, [destination], client_factory=client_factory)


async def share_to_group(
    db: SQLiteDatabase,
    group_id: str,
    user_id: str,
    products: Sequence[Product],
    client_factory: ClientFactory = default_client_factory,
) -> DispatchResult:
    """Upload products to every child store of a group."""
    if not group_id:
        raise ValidationError("group_id is required")
    if not products:
        raise ValidationError("products array is required")
    
    group = await get_group(db, group_id, user_id)
    if not group.child_stores:
        raise ValidationError(f"Group '{group.name}' has no child stores")
    
    logger.info(f"Sharing {len(products)} products to group '{group.name}'")
    return await dispatch_products(products, group.child_stores, client_factory=client_factory)


# ===== Group registry =====

async def list_groups(db: SQLiteDatabase, user_id: str) -> List[Group]:
    return await db.list_groups_by_user(user_id)


async def get_group(db: SQLiteDatabase, group_id: str, user_id: str) -> Group:
    group = await db.find_owned_group(group_id, user_id)
    if group is None:
        raise NotFound("Group not found")
    return group


async def create_group(db: SQLiteDatabase, user_id: str, data: GroupCreate) -> Group:
    """
    Validate and persist a new group.
    
    Raises:
        ValidationError: If name, parent domain or parent token is missing
    """
    if not data.name or not data.name.strip():
        raise ValidationError("name, parent_store.domain and parent_store.admin_token are required")
    parent = _require_store(data.parent_store, "parent_store.")
    children = _require_children(data.child_stores)
    
    group = Group(
        name=data.name.strip(),
        user_id=user_id,
        parent_store=parent,
        child_stores=children,
        sync_type=data.sync_type,
        is_syncing=False,
    )
    await db.create_group(group)
    logger.info(f"Created group '{group.name}' with {len(children)} child stores")
    return group


async def update_group(
    db: SQLiteDatabase,
    group_id: str,
    user_id: str,
    data: GroupUpdate,
) -> Group:
    """Edit a group. A running sync worker picks changes up on its next poll."""
    changes = {}
    
    if data.name is not None:
        if not data.name.strip():
            raise ValidationError("Name cannot be empty")
        changes["name"] = data.name.strip()
    if data.parent_store is not None:
        changes["parent_store"] = _require_store(data.parent_store, "parent_store.")
    if data.child_stores is not None:
        changes["child_stores"] = _require_children(data.child_stores)
    if data.sync_type is not None:
        changes["sync_type"] = data.sync_type
    
    group = await db.update_group(group_id, user_id, **changes)
    if group is None:
        raise NotFound("Group not found")
    return group


async def delete_group(
    db: SQLiteDatabase,
    group_id: str,
    user_id: str,
    manager: Optional[SyncManager] = None,
) -> None:
    deleted = await db.delete_group(group_id, user_id)
    if not deleted:
        raise NotFound("Group not found")
    if manager is not None:
        manager.stop(group_id)
    logger.info(f"Deleted group {group_id}")
