"""
Public storefront catalog scraper.

Reads the unauthenticated products.json feed, used as a product source
when no admin credential is available.
"""

import logging
from typing import List, Optional

import httpx

from groupsync.errors import RemoteStoreError
from groupsync.shopify.client import describe_http_error, http_status_of
from groupsync.shopify.domain import public_products_url
from groupsync.shopify.products import Product, parse_products

logger = logging.getLogger(__name__)

PUBLIC_TIMEOUT = 10.0  # seconds

# Some storefronts reject default client identifiers
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


async def scrape_products(
    domain: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[Product]:
    """
    Scrape a storefront's public catalog.
    
    Args:
        domain: Bare hostname or URL of the storefront
        transport: Optional httpx transport (used by tests)
        
    Returns:
        Products from the feed, empty if the feed has no catalog key
        
    Raises:
        RemoteStoreError: On any transport, HTTP or parse failure
    """
    url = public_products_url(domain)
    logger.info(f"Scraping public catalog at {url}")
    
    async with httpx.AsyncClient(
        timeout=httpx.Timeout(PUBLIC_TIMEOUT),
        headers={"User-Agent": BROWSER_USER_AGENT},
        follow_redirects=True,
        transport=transport,
    ) as client:
        try:
            response = await client.get(url)
            response.raise_for_status()
            products = parse_products(response.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error scraping {url}: {describe_http_error(e)}")
            raise RemoteStoreError(
                f"scrape failed: {describe_http_error(e)}", cause=e, status_code=http_status_of(e)
            ) from e
    
    logger.info(f"Scraped {len(products)} products from {domain}")
    return products
