"""Typed record schemas decoded from bulk operation JSONL lines.

Connection fields (e.g. an order's line items) are not present on the parent
line in a bulk export; Shopify writes each connection node as its own line
with a ``__parentId`` key. Those nodes are re-attached to the list fields
declared here by the reconciliation parser.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ShopifyRecord(BaseModel):
    """Base for every exported node; ``id`` is the reconciliation key."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: str = Field(..., description="GID, e.g. gid://shopify/Order/1")


class Metafield(ShopifyRecord):
    namespace: Optional[str] = None
    key: Optional[str] = None
    value: Optional[str] = None
    type: Optional[str] = None


class LineItem(ShopifyRecord):
    name: Optional[str] = None
    title: Optional[str] = None
    sku: Optional[str] = None
    quantity: Optional[int] = None
    current_quantity: Optional[int] = None


class FulfillmentOrderLineItem(ShopifyRecord):
    total_quantity: Optional[int] = None
    remaining_quantity: Optional[int] = None


class ProductImage(ShopifyRecord):
    alt_text: Optional[str] = None
    url: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


class ProductVariant(ShopifyRecord):
    title: Optional[str] = None
    sku: Optional[str] = None
    price: Optional[str] = None
    inventory_quantity: Optional[int] = None
    metafields: list[Metafield] = Field(default_factory=list)


class Product(ShopifyRecord):
    title: Optional[str] = None
    handle: Optional[str] = None
    status: Optional[str] = None
    vendor: Optional[str] = None
    product_type: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    updated_at: Optional[datetime] = None
    product_variants: list[ProductVariant] = Field(default_factory=list)
    product_images: list[ProductImage] = Field(default_factory=list)
    metafields: list[Metafield] = Field(default_factory=list)
    collections: list["Collection"] = Field(default_factory=list)


class Collection(ShopifyRecord):
    title: Optional[str] = None
    handle: Optional[str] = None
    updated_at: Optional[datetime] = None
    products: list[Product] = Field(default_factory=list)
    metafields: list[Metafield] = Field(default_factory=list)


class Order(ShopifyRecord):
    name: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    display_financial_status: Optional[str] = None
    line_items: list[LineItem] = Field(default_factory=list)
    fulfillment_order_line_items: list[FulfillmentOrderLineItem] = Field(
        default_factory=list
    )
    metafields: list[Metafield] = Field(default_factory=list)


class Customer(ShopifyRecord):
    """Parent-only schema; customers are never exported as connection nodes."""

    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    orders: list[Order] = Field(default_factory=list)
    metafields: list[Metafield] = Field(default_factory=list)


Product.model_rebuild()
