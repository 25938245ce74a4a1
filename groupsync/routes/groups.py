"""
Group management routes.
"""

from functools import partial

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..db import GroupCreate, GroupUpdate
from ..dependencies import get_db, get_store_transport, get_sync_manager, require_user
from ..processor import (
    create_group, default_client_factory, delete_group, fetch_group_products, get_group,
    list_groups, toggle_sync, update_group
)

router = APIRouter(prefix="/api/groups")


class SyncRequest(BaseModel):
    action: str = ""


@router.get("")
async def list_user_groups(user_id: str = Depends(require_user), db=Depends(get_db)):
    """List the user's groups, newest first."""
    groups = await list_groups(db, user_id)
    return {"groups": groups}


@router.post("", status_code=201)
async def create_user_group(
    data: GroupCreate,
    user_id: str = Depends(require_user),
    db=Depends(get_db),
):
    """Create a group."""
    group = await create_group(db, user_id, data)
    return {"group": group}


@router.get("/{group_id}")
async def read_group(group_id: str, user_id: str = Depends(require_user), db=Depends(get_db)):
    """Get a single group."""
    return {"group": await get_group(db, group_id, user_id)}


@router.put("/{group_id}")
async def edit_group(
    group_id: str,
    data: GroupUpdate,
    user_id: str = Depends(require_user),
    db=Depends(get_db),
):
    """Edit a group."""
    group = await update_group(db, group_id, user_id, data)
    return {"group": group}


@router.delete("/{group_id}")
async def remove_group(group_id: str, user_id: str = Depends(require_user), db=Depends(get_db)):
    """Delete a group and stop its sync worker."""
    await delete_group(db, group_id, user_id, manager=get_sync_manager())
    return {"message": "Group deleted successfully"}


@router.get("/{group_id}/products")
async def parent_products(
    group_id: str,
    user_id: str = Depends(require_user),
    db=Depends(get_db),
    transport=Depends(get_store_transport),
):
    """Fetch the parent store's catalog."""
    products = await fetch_group_products(
        db, group_id, user_id,
        client_factory=partial(default_client_factory, transport=transport),
    )
    return {"products": products}


@router.post("/{group_id}/sync")
async def sync_group(
    group_id: str,
    request: SyncRequest,
    user_id: str = Depends(require_user),
    db=Depends(get_db),
):
    """Start ('sync') or stop ('unsync') continuous propagation."""
    group = await toggle_sync(db, get_sync_manager(), group_id, user_id, request.action)
    return {
        "group": group,
        "message": "Sync started" if group.is_syncing else "Sync stopped",
    }
