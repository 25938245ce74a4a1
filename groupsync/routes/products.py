"""
Product routes - scrape, upload and share.
"""

from functools import partial
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..db import StoreInput
from ..dependencies import get_db, get_store_transport, require_user
from ..processor import DispatchResult, default_client_factory, scrape, share_to_group, upload_many
from ..shopify import Product

router = APIRouter(prefix="/api")


class ScrapeRequest(BaseModel):
    domain: str = ""


class UploadRequest(BaseModel):
    domain: str = ""
    admin_token: str = ""
    products: List[Product] = Field(default_factory=list)


class ShareRequest(BaseModel):
    group_id: str = ""
    products: List[Product] = Field(default_factory=list)


@router.post("/scrape")
async def scrape_store(
    request: ScrapeRequest,
    user_id: str = Depends(require_user),
    transport=Depends(get_store_transport),
):
    """Scrape a storefront's public catalog."""
    products = await scrape(request.domain, transport=transport)
    return {"products": products}


@router.post("/upload", response_model=DispatchResult)
async def upload_products(
    request: UploadRequest,
    user_id: str = Depends(require_user),
    transport=Depends(get_store_transport),
):
    """Upload products to one store."""
    store = StoreInput(domain=request.domain, admin_token=request.admin_token)
    return await upload_many(
        store, request.products,
        client_factory=partial(default_client_factory, transport=transport),
    )


@router.post("/share", response_model=DispatchResult)
async def share_products(
    request: ShareRequest,
    user_id: str = Depends(require_user),
    db=Depends(get_db),
    transport=Depends(get_store_transport),
):
    """Upload products to every child store of a group."""
    return await share_to_group(
        db, request.group_id, user_id, request.products,
        client_factory=partial(default_client_factory, transport=transport),
    )
