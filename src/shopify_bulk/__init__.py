"""Shopify bulk export client: run bulk queries and reconcile typed results."""
from .config import ShopifyClientConfig
from .shopify import ShopifyBulkClient

__all__ = ["ShopifyClientConfig", "ShopifyBulkClient"]
