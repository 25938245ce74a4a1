"""
Tests for product parsing and the create payload.
"""

import pytest

from groupsync.shopify import Product, build_product_payload, parse_products
from conftest import make_product


class TestProductModel:
    """Tests for Product parsing."""
    
    def test_body_html_becomes_description(self):
        product = Product.model_validate(make_product(1))
        assert product.description == "<p>Product 1 description</p>"
    
    def test_tag_list_is_joined(self):
        data = make_product(1)
        data["tags"] = ["summer", "cotton"]
        assert Product.model_validate(data).tags == "summer, cotton"
    
    def test_missing_variants_and_images_default_empty(self):
        product = Product.model_validate({"id": 7, "title": "Bare", "variants": None})
        assert product.variants == []
        assert product.images == []
    
    def test_numeric_price_kept_as_string(self):
        data = make_product(1)
        data["variants"][0]["price"] = 19.99
        assert Product.model_validate(data).variants[0].price == "19.99"
    
    def test_order_preserved(self):
        product = Product.model_validate(make_product(4))
        assert [v.title for v in product.variants] == ["Small", "Large"]
        assert [i.id for i in product.images] == [401, 402]


class TestBuildProductPayload:
    """Tests for build_product_payload."""
    
    def test_only_catalog_fields(self):
        payload = build_product_payload(Product.model_validate(make_product(1)))["product"]
        assert set(payload) == {
            "title", "body_html", "vendor", "product_type", "tags", "variants", "images"
        }
        assert "id" not in payload["variants"][0]
        assert "id" not in payload["images"][0]
    
    def test_variant_shape(self):
        payload = build_product_payload(Product.model_validate(make_product(1)))["product"]
        assert payload["variants"][1] == {
            "price": "24.50",
            "sku": "SKU-1-L",
            "inventory_quantity": 0,
            "title": "Large",
        }
    
    def test_image_alt_falls_back_to_title(self):
        payload = build_product_payload(Product.model_validate(make_product(1)))["product"]
        assert payload["images"][0]["alt"] == "Product 1"
        assert payload["images"][1]["alt"] == "Back view"
    
    def test_product_without_variants(self):
        payload = build_product_payload(Product(id=3, title="Empty"))["product"]
        assert payload["variants"] == []
        assert payload["images"] == []


class TestParseProducts:
    """Tests for parse_products."""
    
    def test_missing_key_is_empty(self):
        assert parse_products({"shop": {}}) == []
    
    def test_non_object_rejected(self):
        with pytest.raises(ValueError):
            parse_products(["not", "an", "object"])
