"""
Tests for the inbound operations: group CRUD validation, upload and share.
"""

import asyncio

import pytest

from groupsync.db import GroupCreate, GroupUpdate, StoreInput
from groupsync.errors import NotFound, ValidationError
from groupsync.processor import (
    create_group, delete_group, fetch_group_products, share_to_group,
    update_group, upload_many
)
from conftest import make_product

OWNER = "user-1"


def _create_data(fake_shopify, children=("child-a.myshopify.com", "child-b.example.com")):
    fake_shopify.add_store("parent.myshopify.com", "token-p", [make_product(1), make_product(2)])
    for host in children:
        fake_shopify.add_store(host, f"token-{host}")
    return GroupCreate(
        name="Mirror",
        parent_store=StoreInput(domain="parent.myshopify.com", admin_token="token-p"),
        child_stores=[StoreInput(domain=h, admin_token=f"token-{h}") for h in children],
    )


class TestCreateGroup:
    """Tests for group creation validation."""
    
    @pytest.mark.parametrize("parent", [
        None,
        StoreInput(domain="", admin_token="token"),
        StoreInput(domain="parent.myshopify.com", admin_token=None),
        StoreInput(domain="parent.myshopify.com", admin_token="   "),
    ])
    def test_incomplete_parent_rejected_before_persistence(self, with_db, parent):
        async def scenario(db):
            with pytest.raises(ValidationError):
                await create_group(db, OWNER, GroupCreate(name="G", parent_store=parent))
            return await db.list_groups_by_user(OWNER)
        
        assert with_db(scenario) == []
    
    def test_missing_name_rejected(self, with_db):
        async def scenario(db):
            with pytest.raises(ValidationError):
                await create_group(db, OWNER, GroupCreate(
                    parent_store=StoreInput(domain="p.com", admin_token="t")
                ))
        
        with_db(scenario)
    
    def test_creates_idle_group(self, with_db, fake_shopify):
        async def scenario(db):
            return await create_group(db, OWNER, _create_data(fake_shopify))
        
        group = with_db(scenario)
        
        assert group.is_syncing is False
        assert group.user_id == OWNER
        assert [s.domain for s in group.child_stores] == [
            "child-a.myshopify.com", "child-b.example.com"
        ]


class TestUpdateAndDelete:
    """Tests for group edits."""
    
    def test_update_other_users_group_not_found(self, with_db, fake_shopify):
        async def scenario(db):
            group = await create_group(db, OWNER, _create_data(fake_shopify))
            with pytest.raises(NotFound):
                await update_group(db, group.id, "intruder", GroupUpdate(name="Mine"))
        
        with_db(scenario)
    
    def test_update_validates_parent(self, with_db, fake_shopify):
        async def scenario(db):
            group = await create_group(db, OWNER, _create_data(fake_shopify))
            with pytest.raises(ValidationError, match=r"^parent_store\.admin_token is required$"):
                await update_group(db, group.id, OWNER, GroupUpdate(
                    parent_store=StoreInput(domain="p.com")
                ))
        
        with_db(scenario)
    
    def test_delete_missing_group(self, with_db):
        async def scenario(db):
            with pytest.raises(NotFound):
                await delete_group(db, "missing", OWNER)
        
        with_db(scenario)


class TestShareToGroup:
    """Tests for sharing products to child stores."""
    
    def test_share_to_all_children(self, with_db, fake_shopify, products):
        async def scenario(db):
            group = await create_group(db, OWNER, _create_data(fake_shopify))
            return await share_to_group(
                db, group.id, OWNER, products[:2], client_factory=fake_shopify.client_factory
            )
        
        result = with_db(scenario)
        
        assert result.uploaded_count == 4
        assert result.failed_count == 0
        assert [r.store for r in result.results] == [
            "child-a.myshopify.com", "child-a.myshopify.com",
            "child-b.example.com", "child-b.example.com",
        ]
    
    def test_share_to_foreign_group_not_found(self, with_db, fake_shopify, products):
        async def scenario(db):
            group = await create_group(db, OWNER, _create_data(fake_shopify))
            with pytest.raises(NotFound):
                await share_to_group(
                    db, group.id, "intruder", products, client_factory=fake_shopify.client_factory
                )
        
        with_db(scenario)
        assert fake_shopify.requests == []
    
    def test_group_without_children_rejected(self, with_db, fake_shopify, products):
        async def scenario(db):
            group = await create_group(db, OWNER, _create_data(fake_shopify, children=()))
            with pytest.raises(ValidationError):
                await share_to_group(
                    db, group.id, OWNER, products, client_factory=fake_shopify.client_factory
                )
        
        with_db(scenario)
    
    def test_empty_products_rejected(self, with_db, fake_shopify):
        async def scenario(db):
            group = await create_group(db, OWNER, _create_data(fake_shopify))
            with pytest.raises(ValidationError):
                await share_to_group(db, group.id, OWNER, [])
        
        with_db(scenario)


class TestFetchGroupProducts:
    """Tests for reading the parent catalog."""
    
    def test_reads_parent_with_parent_token(self, with_db, fake_shopify):
        async def scenario(db):
            group = await create_group(db, OWNER, _create_data(fake_shopify))
            return await fetch_group_products(
                db, group.id, OWNER, client_factory=fake_shopify.client_factory
            )
        
        assert [p.id for p in with_db(scenario)] == [1, 2]
        assert fake_shopify.requests[0].headers["X-Shopify-Access-Token"] == "token-p"


class TestUploadMany:
    """Tests for single-store upload."""
    
    def test_missing_token_rejected(self, fake_shopify, products):
        with pytest.raises(ValidationError, match=r"^admin_token is required$"):
            asyncio.run(upload_many(
                StoreInput(domain="shop.myshopify.com", admin_token=""),
                products,
                client_factory=fake_shopify.client_factory,
            ))
        assert fake_shopify.requests == []
    
    def test_upload(self, fake_shopify, products):
        fake_shopify.add_store("shop.myshopify.com", "token")
        
        result = asyncio.run(upload_many(
            StoreInput(domain="shop.myshopify.com", admin_token="token"),
            products,
            client_factory=fake_shopify.client_factory,
        ))
        
        assert result.uploaded_count == 3
        assert [r.product_id for r in result.results] == [1, 2, 3]
