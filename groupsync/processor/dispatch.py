"""
Fan-out dispatcher: upload products to many stores.

Every (store, product) pair is an independent upload. A pair's failure is
recorded and never affects any other pair; there is no retry.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

import httpx
from pydantic import BaseModel, Field

from ..config import settings
from ..db import StoreRef
from ..errors import ErrorKind, GroupSyncError, ValidationError
from ..shopify import Product, ShopifyStoreClient

logger = logging.getLogger(__name__)

ClientFactory = Callable[[StoreRef], ShopifyStoreClient]

_UNSET: Any = object()


class PairResult(BaseModel):
    """A product successfully created on a store."""
    store: str
    product_id: int
    success: bool = True
    data: Any = None


class PairError(BaseModel):
    """A product that could not be created on a store."""
    store: str
    product_id: int
    success: bool = False
    error: str
    kind: ErrorKind = ErrorKind.REMOTE_STORE


class DispatchResult(BaseModel):
    """Aggregate outcome; results and errors partition the attempted pairs."""
    uploaded_count: int = 0
    failed_count: int = 0
    results: List[PairResult] = Field(default_factory=list)
    errors: List[PairError] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return self.uploaded_count + self.failed_count


def default_client_factory(
    store: StoreRef, transport: Optional[httpx.AsyncBaseTransport] = None
) -> ShopifyStoreClient:
    """Build an admin API client for a destination store."""
    return ShopifyStoreClient(store.domain, store.admin_token, transport=transport)


async def _upload_pair(
    client: ShopifyStoreClient,
    store: StoreRef,
    product: Product,
    semaphore: asyncio.Semaphore,
):
    """Upload one product to one store, converting failures to a PairError."""
    async with semaphore:
        try:
            data = await client.create_product(product)
            return PairResult(store=store.domain, product_id=product.id, data=data)
        except GroupSyncError as e:
            logger.warning(f"Upload of product {product.id} to {store.domain} failed: {e}")
            return PairError(
                store=store.domain, product_id=product.id, error=e.message, kind=e.kind
            )
        except Exception as e:
            logger.exception(f"Unexpected error uploading product {product.id} to {store.domain}")
            return PairError(
                store=store.domain, product_id=product.id, error=f"Unexpected error: {e}"
            )


async def dispatch_products(
    products: Sequence[Product],
    stores: Sequence[StoreRef],
    client_factory: ClientFactory = default_client_factory,
    max_concurrent: Optional[int] = None,
    deadline: Optional[float] = _UNSET,
) -> DispatchResult:
    """
    Upload every product to every store.
    
    Args:
        products: Products to create, in order
        stores: Destination stores, in order
        client_factory: Builds the client used for a store
        max_concurrent: Upper bound on in-flight uploads
        deadline: Seconds before pending uploads are cancelled; None disables
        
    Returns:
        DispatchResult listing pairs store by store, product by product
        
    Raises:
        ValidationError: If products or stores is empty
    """
    if not products:
        raise ValidationError("At least one product is required")
    if not stores:
        raise ValidationError("At least one destination store is required")
    
    if max_concurrent is None:
        max_concurrent = settings.dispatch_max_concurrent
    if deadline is _UNSET:
        deadline = settings.dispatch_deadline
    
    total = len(stores) * len(products)
    logger.info(f"Dispatching {len(products)} products to {len(stores)} stores ({total} uploads)")
    
    semaphore = asyncio.Semaphore(max(1, max_concurrent))
    clients = [client_factory(store) for store in stores]
    pairs = [
        (store, product)
        for store in stores
        for product in products
    ]
    tasks = [
        asyncio.create_task(_upload_pair(client, store, product, semaphore))
        for store, client in zip(stores, clients)
        for product in products
    ]
    
    try:
        _, pending = await asyncio.wait(tasks, timeout=deadline)
        if pending:
            logger.warning(f"Deadline of {deadline}s exceeded, cancelling {len(pending)} uploads")
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
    except asyncio.CancelledError:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    finally:
        for client in clients:
            await client.close()
    
    result = DispatchResult()
    
    for (store, product), task in zip(pairs, tasks):
        if task.cancelled():
            outcome = PairError(
                store=store.domain,
                product_id=product.id,
                error=f"cancelled: deadline of {deadline}s exceeded",
            )
        else:
            outcome = task.result()
        
        if isinstance(outcome, PairResult):
            result.results.append(outcome)
        else:
            result.errors.append(outcome)
    
    result.uploaded_count = len(result.results)
    result.failed_count = len(result.errors)
    
    logger.info(f"Dispatch complete: {result.uploaded_count} succeeded, {result.failed_count} failed")
    
    return result


def summarize_errors(result: DispatchResult) -> Dict[str, int]:
    """Count failures per destination store."""
    counts: Dict[str, int] = {}
    for error in result.errors:
        counts[error.store] = counts.get(error.store, 0) + 1
    return counts
