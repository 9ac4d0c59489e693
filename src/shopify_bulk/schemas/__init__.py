"""Response and record schemas."""
from .bulk_ops import BulkOperation, BulkOperationStatus
from .graphql import GraphQLErrorItem, GraphQLResponse, QueryCost, ThrottleStatus
from .resources import (
    Collection,
    Customer,
    FulfillmentOrderLineItem,
    LineItem,
    Metafield,
    Order,
    Product,
    ProductImage,
    ProductVariant,
    ShopifyRecord,
)

__all__ = [
    "BulkOperation",
    "BulkOperationStatus",
    "GraphQLErrorItem",
    "GraphQLResponse",
    "QueryCost",
    "ThrottleStatus",
    "ShopifyRecord",
    "Collection",
    "Customer",
    "FulfillmentOrderLineItem",
    "LineItem",
    "Metafield",
    "Order",
    "Product",
    "ProductImage",
    "ProductVariant",
]
