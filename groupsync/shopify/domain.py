"""
Store domain helpers.

Every store is addressed the same way: classify the domain (myshopify.com
vs custom), then build the admin API target for it.
"""

import re

from groupsync.errors import DomainResolutionError

MYSHOPIFY_SUFFIX = ".myshopify.com"

_SHOP_NAME_PATTERN = re.compile(
    r"(?:https?://)?([^/.]+)\.myshopify\.com", re.IGNORECASE
)


def normalize_domain(domain: str) -> str:
    """
    Normalize a bare hostname or URL.
    
    Strips whitespace and trailing slashes and prepends https:// when no
    scheme is present. Idempotent.
    """
    normalized = domain.strip().rstrip("/")
    if not normalized.lower().startswith(("http://", "https://")):
        normalized = f"https://{normalized}"
    return normalized


def is_myshopify_domain(domain: str) -> bool:
    """Check whether a domain is hosted on the myshopify.com platform suffix."""
    return MYSHOPIFY_SUFFIX in domain.lower()


def extract_shop_name(domain: str) -> str:
    """
    Extract the shop name from a myshopify.com domain.
    
    Raises:
        DomainResolutionError: If no shop name segment can be found
    """
    match = _SHOP_NAME_PATTERN.search(domain)
    if not match:
        raise DomainResolutionError(f"Invalid myshopify.com domain: {domain}")
    return match.group(1)


def resolve_admin_base(domain: str) -> str:
    """Base URL (scheme + host) for a store's admin API."""
    normalized = normalize_domain(domain)
    
    if is_myshopify_domain(normalized):
        # Rebuild from the shop name so stray path segments are dropped
        shop_name = extract_shop_name(normalized)
        return f"https://{shop_name}{MYSHOPIFY_SUFFIX}"
    
    # Custom domain: no further validation, bad mappings fail at request time
    return normalized


def resolve_admin_url(domain: str, api_version: str) -> str:
    """Admin catalog endpoint for a store."""
    base = resolve_admin_base(domain)
    return f"{base}/admin/api/{api_version}/products.json"


def public_products_url(domain: str) -> str:
    """Public (unauthenticated) catalog feed for a storefront."""
    return f"{normalize_domain(domain)}/products.json"
