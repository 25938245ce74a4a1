"""
Shopify REST Admin API client for catalog reads and writes.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from groupsync.config import settings
from groupsync.errors import RemoteStoreError
from groupsync.shopify.domain import resolve_admin_url
from groupsync.shopify.products import Product, build_product_payload, parse_products

logger = logging.getLogger(__name__)

ADMIN_TIMEOUT = 30.0  # seconds
ACCESS_TOKEN_HEADER = "X-Shopify-Access-Token"


def describe_http_error(error: Exception) -> str:
    """Readable cause for a failed request."""
    if isinstance(error, httpx.HTTPStatusError):
        return f"HTTP {error.response.status_code} from {error.request.url}"
    if isinstance(error, httpx.TimeoutException):
        return f"timed out ({error.__class__.__name__})"
    return str(error) or error.__class__.__name__


def http_status_of(error: Exception) -> Optional[int]:
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code
    return None


class ShopifyStoreClient:
    """
    Async HTTP client for one store's REST Admin catalog.
    
    No retries: the first attempt is final and every failure surfaces as a
    RemoteStoreError carrying the cause.
    """

    def __init__(
        self,
        shop_domain: str,
        access_token: str,
        api_version: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize store client.
        
        Args:
            shop_domain: Store domain as given by the caller
            access_token: Admin API access token
            api_version: Admin API version, defaults to settings
            transport: Optional httpx transport (used by tests)
        """
        self.shop_domain = shop_domain
        self.access_token = access_token
        self.api_version = api_version or settings.shopify_api_version
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def products_url(self) -> str:
        """Admin catalog endpoint. Raises DomainResolutionError."""
        return resolve_admin_url(self.shop_domain, self.api_version)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(ADMIN_TIMEOUT),
                headers={
                    "Content-Type": "application/json",
                    ACCESS_TOKEN_HEADER: self.access_token,
                },
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def fetch_products(self) -> List[Product]:
        """
        Fetch the store's catalog through the admin API.
        
        Raises:
            DomainResolutionError: If the domain cannot be mapped to a URL
            RemoteStoreError: On any transport, HTTP or parse failure
        """
        url = self.products_url
        client = await self._get_client()
        
        try:
            response = await client.get(url)
            response.raise_for_status()
            products = parse_products(response.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Fetch from {self.shop_domain} failed: {describe_http_error(e)}")
            raise RemoteStoreError(
                f"fetch failed: {describe_http_error(e)}", cause=e, status_code=http_status_of(e)
            ) from e
        
        logger.debug(f"Fetched {len(products)} products from {self.shop_domain}")
        return products

    async def create_product(self, product: Product) -> Dict[str, Any]:
        """
        Create a product on the store.
        
        Returns:
            The created resource exactly as the store returned it
            
        Raises:
            DomainResolutionError: If the domain cannot be mapped to a URL
            RemoteStoreError: On any transport, HTTP or parse failure
        """
        url = self.products_url
        client = await self._get_client()
        
        try:
            response = await client.post(url, json=build_product_payload(product))
            response.raise_for_status()
            created = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise RemoteStoreError(
                f"upload failed: {describe_http_error(e)}", cause=e, status_code=http_status_of(e)
            ) from e
        
        logger.debug(f"Created product from source {product.id} on {self.shop_domain}")
        return created

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
