"""
Shopify store access: admin API client and public catalog scraper.
"""

from groupsync.shopify.domain import (
    normalize_domain,
    is_myshopify_domain,
    extract_shop_name,
    resolve_admin_url,
    public_products_url,
)
from groupsync.shopify.products import (
    Product,
    Variant,
    Image,
    build_product_payload,
    parse_products,
)
from groupsync.shopify.client import ShopifyStoreClient
from groupsync.shopify.scraper import scrape_products

__all__ = [
    "normalize_domain",
    "is_myshopify_domain",
    "extract_shop_name",
    "resolve_admin_url",
    "public_products_url",
    "Product",
    "Variant",
    "Image",
    "build_product_payload",
    "parse_products",
    "ShopifyStoreClient",
    "scrape_products",
]
