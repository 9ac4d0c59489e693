"""Custom exceptions for Shopify Bulk Client."""
from typing import Any, Optional


class ShopifyBulkClientError(Exception):
    """Base exception for all Shopify Bulk Client errors."""


class ShopifyBulkApiError(ShopifyBulkClientError):
    """Raised for transport failures (HTTP non-2xx, network, undecodable body)."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        body: Optional[str] = None,
    ):
        self.status = status
        self.body = body
        super().__init__(message)


class ShopifyBulkGraphQLError(ShopifyBulkClientError):
    """Raised when GraphQL returns root-level errors.

    The first error message is the representative reason.
    """

    def __init__(self, errors: list, data: Optional[dict] = None):
        self.errors = errors
        self.data = data
        super().__init__(_first_message(errors))


class ShopifyBulkUserError(ShopifyBulkGraphQLError):
    """Raised when a mutation returns userErrors (validation failure)."""

    def __init__(self, operation: str, user_errors: list):
        self.operation = operation
        self.user_errors = user_errors
        super().__init__(user_errors)
        self.args = (f"{operation} userErrors: {user_errors}",)


class ShopifyThrottledError(ShopifyBulkGraphQLError):
    """Raised after the throttle back-off delay has been paid."""

    def __init__(self, errors: list, cost: Any, delay: int, data: Optional[dict] = None):
        self.cost = cost
        self.delay = delay
        super().__init__(errors, data=data)


class BulkOperationError(ShopifyBulkClientError):
    """Base for job-state outcomes; carries the terminal snapshot."""

    def __init__(self, message: str, operation: Any = None):
        self.operation = operation
        super().__init__(message)


class BulkOperationFailedError(BulkOperationError):
    """Raised when a job ended FAILED/EXPIRED or COMPLETED with an error code."""


class BulkOperationCanceledError(BulkOperationError):
    """Raised when a job ended CANCELED instead of producing a result."""


class BulkOperationTimeoutError(BulkOperationError):
    """Raised when a wait loop exceeds its deadline."""

    def __init__(self, message: str, operation: Any = None, elapsed: float = 0.0):
        self.elapsed = elapsed
        super().__init__(message, operation)


class BulkOperationWaitCancelled(BulkOperationError):
    """Raised when the caller's stop event is set between polls."""


class BulkOperationNotFoundError(ShopifyBulkApiError):
    """Raised when the shop has no current bulk operation."""


class BulkOperationMismatchError(ShopifyBulkClientError, ValueError):
    """Raised when the current job is not the one the caller expects."""

    def __init__(self, expected_id: str, actual_id: Optional[str]):
        self.expected_id = expected_id
        self.actual_id = actual_id
        super().__init__(
            f"Bulk operation ID doesn't match, got={actual_id}, want={expected_id}"
        )


class BulkResultParseError(ShopifyBulkClientError):
    """Raised when a bulk result file cannot be reconciled."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"{message} (line {line_number})"
        super().__init__(message)


class MalformedGlobalIdError(BulkResultParseError):
    """Raised when a GID does not look like scheme://namespace/Type/123."""

    def __init__(self, gid: str, line_number: Optional[int] = None):
        self.gid = gid
        super().__init__(f"malformed gid=`{gid}`", line_number)


class UnknownResourceTypeError(BulkResultParseError):
    """Raised when a child GID names a resource type with no schema."""

    def __init__(self, resource_type: str, line_number: Optional[int] = None):
        self.resource_type = resource_type
        super().__init__(f"`{resource_type}` not implemented type", line_number)


class MissingParentIdError(BulkResultParseError):
    """Raised when a parent schema or record has no usable id."""


class OrphanedChildrenError(BulkResultParseError):
    """Raised when child lines reference parents absent from the stream."""

    def __init__(self, parent_ids: list[str]):
        self.parent_ids = parent_ids
        super().__init__(f"No parent record for __parentId: {', '.join(parent_ids)}")


class UnknownChildFieldError(BulkResultParseError):
    """Raised when a parent schema has no list field for a child collection."""

    def __init__(self, field_name: str, parent_type: str):
        self.field_name = field_name
        self.parent_type = parent_type
        super().__init__(f"Field '{field_name}' not defined on the parent type {parent_type}")


def _first_message(errors: Any) -> str:
    if isinstance(errors, str):
        return errors
    if not errors:
        return "GraphQL error"
    first = errors[0]
    if isinstance(first, dict):
        return first.get("message", str(first))
    return getattr(first, "message", str(first))
