"""Pydantic models for Shopify Bulk Operations API responses."""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BulkOperationStatus(str, Enum):
    """Bulk operation state machine.

    CREATED -> RUNNING -> COMPLETED | FAILED, with the side path
    RUNNING -> CANCELING -> CANCELED. EXPIRED is set by Shopify when a
    completed result file is no longer downloadable.
    """

    CREATED = "CREATED"
    RUNNING = "RUNNING"
    CANCELING = "CANCELING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELED = "CANCELED"
    EXPIRED = "EXPIRED"


IN_FLIGHT_STATUSES = frozenset(
    {
        BulkOperationStatus.CREATED,
        BulkOperationStatus.RUNNING,
        BulkOperationStatus.CANCELING,
    }
)

CANCELABLE_STATUSES = frozenset(
    {BulkOperationStatus.CREATED, BulkOperationStatus.RUNNING}
)


class BulkOperation(BaseModel):
    """Shopify BulkOperation snapshot (read-only from the client's side)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="GID of bulk operation (e.g., gid://shopify/BulkOperation/123)")
    status: BulkOperationStatus
    error_code: Optional[str] = Field(None, description="Error code if FAILED")
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    object_count: Optional[int] = Field(None, description="Number of objects processed")
    file_size: Optional[int] = Field(None, description="Result file size in bytes")
    url: Optional[str] = Field(
        None, description="JSONL download URL (present when COMPLETED)"
    )
    partial_data_url: Optional[str] = Field(None, description="Partial JSONL URL if job failed mid-run")
    query: Optional[str] = None
    type: Optional[str] = Field(None, description="QUERY or MUTATION")

    @property
    def is_in_flight(self) -> bool:
        return self.status in IN_FLIGHT_STATUSES

    @property
    def is_terminal(self) -> bool:
        """Check if operation has reached terminal state."""
        return not self.is_in_flight

    @property
    def is_cancelable(self) -> bool:
        return self.status in CANCELABLE_STATUSES

    @property
    def is_success(self) -> bool:
        """Check if operation completed successfully."""
        return self.status == BulkOperationStatus.COMPLETED and not self.error_code
