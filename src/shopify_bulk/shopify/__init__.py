"""Shopify integration modules."""
from .bulk_client import ShopifyBulkClient
from .downloader import BulkResultDownloader
from .exceptions import (
    BulkOperationCanceledError,
    BulkOperationError,
    BulkOperationFailedError,
    BulkOperationMismatchError,
    BulkOperationNotFoundError,
    BulkOperationTimeoutError,
    BulkOperationWaitCancelled,
    BulkResultParseError,
    MalformedGlobalIdError,
    MissingParentIdError,
    OrphanedChildrenError,
    ShopifyBulkApiError,
    ShopifyBulkClientError,
    ShopifyBulkGraphQLError,
    ShopifyBulkUserError,
    ShopifyThrottledError,
    UnknownChildFieldError,
    UnknownResourceTypeError,
)
from .graphql_client import ShopifyGraphQLClient
from .jsonl_parser import BulkResultReconciler, parse_bulk_lines, parse_bulk_result_file
from .throttle import compute_throttle_delay
from .type_resolver import DEFAULT_RESOLVER, GlobalId, TypeResolver

__all__ = [
    "ShopifyBulkClient",
    "ShopifyGraphQLClient",
    "BulkResultDownloader",
    "BulkResultReconciler",
    "parse_bulk_lines",
    "parse_bulk_result_file",
    "compute_throttle_delay",
    "DEFAULT_RESOLVER",
    "GlobalId",
    "TypeResolver",
    "ShopifyBulkClientError",
    "ShopifyBulkApiError",
    "ShopifyBulkGraphQLError",
    "ShopifyBulkUserError",
    "ShopifyThrottledError",
    "BulkOperationError",
    "BulkOperationFailedError",
    "BulkOperationCanceledError",
    "BulkOperationMismatchError",
    "BulkOperationNotFoundError",
    "BulkOperationTimeoutError",
    "BulkOperationWaitCancelled",
    "BulkResultParseError",
    "MalformedGlobalIdError",
    "UnknownResourceTypeError",
    "MissingParentIdError",
    "OrphanedChildrenError",
    "UnknownChildFieldError",
]
