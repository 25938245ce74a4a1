"""
Product models and the admin API write payload.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Variant(BaseModel):
    """A product variant. Price travels as a string to keep currency exact."""
    model_config = ConfigDict(extra="ignore")
    
    id: Optional[int] = None
    title: Optional[str] = None
    price: Optional[str] = None
    sku: Optional[str] = None
    inventory_quantity: Optional[int] = None

    @field_validator("price", mode="before")
    @classmethod
    def _price_as_string(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class Image(BaseModel):
    """A product image."""
    model_config = ConfigDict(extra="ignore")
    
    id: Optional[int] = None
    src: str
    alt: Optional[str] = None


class Product(BaseModel):
    """
    A catalog product as read from a store.
    
    `id` is scoped to the source store; uploads always create new products.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)
    
    id: int
    title: str = ""
    description: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("description", "body_html"),
    )
    vendor: Optional[str] = None
    product_type: Optional[str] = None
    tags: str = ""
    variants: List[Variant] = Field(default_factory=list)
    images: List[Image] = Field(default_factory=list)
    updated_at: Optional[str] = None

    @field_validator("tags", mode="before")
    @classmethod
    def _join_tags(cls, value: Union[str, List[str], None]) -> str:
        # Public feeds return a list, the admin API a comma-joined string
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            return ", ".join(str(tag) for tag in value)
        return value

    @field_validator("variants", "images", mode="before")
    @classmethod
    def _default_empty(cls, value: Any) -> Any:
        return [] if value is None else value


def build_product_payload(product: Product) -> Dict[str, Any]:
    """
    Build the admin API create payload for a product.
    
    Only catalog fields are copied; ids and timestamps belong to the
    source store.
    """
    return {
        "product": {
            "title": product.title,
            "body_html": product.description,
            "vendor": product.vendor,
            "product_type": product.product_type,
            "tags": product.tags,
            "variants": [
                {
                    "price": variant.price,
                    "sku": variant.sku,
                    "inventory_quantity": variant.inventory_quantity,
                    "title": variant.title,
                }
                for variant in product.variants
            ],
            "images": [
                {
                    "src": image.src,
                    "alt": image.alt or product.title,
                }
                for image in product.images
            ],
        }
    }


def parse_products(payload: Any) -> List[Product]:
    """Parse a `{"products": [...]}` response body. Missing key means empty."""
    if not isinstance(payload, dict):
        raise ValueError("expected a JSON object")
    raw_products = payload.get("products") or []
    return [Product.model_validate(item) for item in raw_products]
