"""
Shared fixtures: an in-memory fake of the Shopify endpoints and a temp database.
"""

import asyncio
import json
from collections import defaultdict
from typing import Dict, List

import httpx
import pytest

from groupsync.db import SQLiteDatabase, StoreRef
from groupsync.shopify import Product, ShopifyStoreClient


def make_product(product_id: int, title: str = None, updated_at: str = "2024-01-01T00:00:00Z") -> dict:
    """Product as a store returns it."""
    title = title or f"Product {product_id}"
    return {
        "id": product_id,
        "title": title,
        "body_html": f"<p>{title} description</p>",
        "vendor": "Acme",
        "product_type": "Widget",
        "tags": "new, sale",
        "updated_at": updated_at,
        "variants": [
            {"id": product_id * 10 + 1, "title": "Small", "price": "19.99", "sku": f"SKU-{product_id}-S", "inventory_quantity": 5},
            {"id": product_id * 10 + 2, "title": "Large", "price": "24.50", "sku": f"SKU-{product_id}-L", "inventory_quantity": 0},
        ],
        "images": [
            {"id": product_id * 100 + 1, "src": f"https://cdn.example.com/{product_id}-a.jpg", "alt": None},
            {"id": product_id * 100 + 2, "src": f"https://cdn.example.com/{product_id}-b.jpg", "alt": "Back view"},
        ],
    }


class FakeShopify:
    """
    Routes requests by host to in-memory stores.
    
    - GET  /products.json                  public feed
    - GET  /admin/api/<v>/products.json    admin catalog (token checked)
    - POST /admin/api/<v>/products.json    create product (token checked)
    """

    def __init__(self):
        self.public: Dict[str, List[dict]] = {}
        self.catalogs: Dict[str, List[dict]] = {}
        self.tokens: Dict[str, str] = {}
        self.delays: Dict[str, float] = {}
        self.created: Dict[str, List[dict]] = defaultdict(list)
        self.requests: List[httpx.Request] = []
        self._next_id = 9000
        self.transport = httpx.MockTransport(self.handler)

    def add_store(self, host: str, token: str, catalog: List[dict] = None) -> StoreRef:
        self.tokens[host] = token
        self.catalogs[host] = list(catalog or [])
        return StoreRef(domain=host, admin_token=token)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host
        path = request.url.path
        
        delay = self.delays.get(host)
        if delay:
            await asyncio.sleep(delay)
        
        if path == "/products.json":
            if host not in self.public:
                return httpx.Response(404, json={"errors": "Not Found"})
            return httpx.Response(200, json={"products": self.public[host]})
        
        if path.startswith("/admin/api/") and path.endswith("/products.json"):
            token = request.headers.get("X-Shopify-Access-Token")
            if host not in self.tokens or token != self.tokens[host]:
                return httpx.Response(401, json={"errors": "[API] Invalid API key or access token"})
            
            if request.method == "GET":
                return httpx.Response(200, json={"products": self.catalogs[host]})
            
            body = json.loads(request.content)
            self._next_id += 1
            created = dict(body["product"], id=self._next_id)
            self.created[host].append(created)
            return httpx.Response(201, json={"product": created})
        
        return httpx.Response(404, json={"errors": "Not Found"})

    def client_factory(self, store: StoreRef) -> ShopifyStoreClient:
        return ShopifyStoreClient(store.domain, store.admin_token, transport=self.transport)


@pytest.fixture
def fake_shopify() -> FakeShopify:
    return FakeShopify()


@pytest.fixture
def products() -> List[Product]:
    return [Product.model_validate(make_product(i)) for i in (1, 2, 3)]


@pytest.fixture
def with_db(tmp_path):
    """Run `async def scenario(db)` against a fresh SQLite database."""
    def runner(scenario):
        async def main():
            db = SQLiteDatabase(str(tmp_path / "test.db"))
            await db.initialize()
            try:
                return await scenario(db)
            finally:
                await db.close()
        return asyncio.run(main())
    return runner
