"""
Catalog snapshots for change detection.
"""

from typing import Dict, List, Optional, Sequence

from ..shopify import Product

Snapshot = Dict[int, Optional[str]]


def snapshot(products: Sequence[Product]) -> Snapshot:
    """Map product id to its last update timestamp."""
    return {product.id: product.updated_at for product in products}


def changed_products(previous: Snapshot, products: Sequence[Product]) -> List[Product]:
    """
    Products that are new or whose updated_at moved since the previous snapshot.
    
    Removed products are ignored; deletions are not propagated.
    """
    return [
        product
        for product in products
        if product.id not in previous or previous[product.id] != product.updated_at
    ]
