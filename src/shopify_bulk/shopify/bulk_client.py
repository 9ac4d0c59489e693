"""Async Shopify GraphQL Bulk Operations Client."""
import asyncio
import logging
from time import monotonic
from typing import Optional, Union

import aiohttp
from pydantic import ValidationError

from ..config import ShopifyClientConfig
from ..schemas.bulk_ops import BulkOperation, BulkOperationStatus
from ..schemas.resources import ShopifyRecord
from .downloader import BulkResultDownloader
from .exceptions import (
    BulkOperationCanceledError,
    BulkOperationFailedError,
    BulkOperationMismatchError,
    BulkOperationNotFoundError,
    BulkOperationTimeoutError,
    BulkOperationWaitCancelled,
    ShopifyBulkApiError,
    ShopifyBulkUserError,
)
from .graphql_client import ShopifyGraphQLClient
from .graphql_strings import (
    MUTATION_BULK_CANCEL,
    MUTATION_BULK_RUN_QUERY,
    QUERY_CURRENT_BULK_OPERATION,
)
from .jsonl_parser import parse_bulk_result_file
from .type_resolver import DEFAULT_RESOLVER, TypeResolver

# Marks "use config.poll_timeout"; None means wait without a deadline.
CONFIG_TIMEOUT = object()


class ShopifyBulkClient:
    """Async client for Shopify GraphQL Admin Bulk Operations API.

    Shopify runs at most one bulk query per shop. Every composite operation
    waits for the current job to become terminal before submitting; the raw
    submit_job() does not. Nothing here coordinates separate processes.
    """

    def __init__(
        self,
        config: ShopifyClientConfig,
        session: aiohttp.ClientSession,
        graphql_client: Optional[ShopifyGraphQLClient] = None,
        downloader: Optional[BulkResultDownloader] = None,
        resolver: TypeResolver = DEFAULT_RESOLVER,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Shopify Bulk Client.

        Args:
            config: Immutable client configuration
            session: Injected aiohttp ClientSession
            graphql_client: Optional transport (created from config if None)
            downloader: Optional result fetcher (created if None)
            resolver: Resource type table for child records
            logger: Optional logger instance
        """
        self.config = config
        self.session = session
        self.logger = logger or logging.getLogger(__name__)
        self.graphql = graphql_client or ShopifyGraphQLClient(
            config, session, logger=self.logger
        )
        self.downloader = downloader or BulkResultDownloader(
            session,
            chunk_size=config.download_chunk_size,
            read_timeout=config.request_timeout,
            logger=self.logger,
        )
        self.resolver = resolver

    @property
    def shop_domain(self) -> str:
        return self.config.shop_domain

    async def submit_job(self, bulk_query: str) -> str:
        """Submit a bulk operation query job to Shopify.

        Does not check for an in-flight job; use run_query_only() or
        run_bulk_query() when exclusivity matters.

        Args:
            bulk_query: GraphQL query string for bulk operation

        Returns:
            GID of the created bulk operation

        Raises:
            ShopifyBulkUserError: If GraphQL returns userErrors
            ShopifyBulkApiError: If no operation id comes back
        """
        data = await self.graphql.execute(
            MUTATION_BULK_RUN_QUERY, {"query": bulk_query}
        )

        mutation_result = data.get("bulkOperationRunQuery") or {}
        user_errors = mutation_result.get("userErrors") or []
        if user_errors:
            raise ShopifyBulkUserError("bulkOperationRunQuery", user_errors)

        op_data = mutation_result.get("bulkOperation") or {}
        operation_id = op_data.get("id")
        if not operation_id:
            raise ShopifyBulkApiError("Posted operation ID is nil")

        self.logger.info(
            f"Submitted bulk job: id={operation_id}, status={op_data.get('status')}"
        )
        return operation_id

    async def current_operation(self) -> Optional[BulkOperation]:
        """Fetch a fresh snapshot of the current (or most recent) bulk query."""
        data = await self.graphql.execute(QUERY_CURRENT_BULK_OPERATION)
        node = data.get("currentBulkOperation")
        if node is None:
            return None

        try:
            return BulkOperation.model_validate(node)
        except ValidationError as e:
            raise ShopifyBulkApiError(f"Unexpected currentBulkOperation: {e}") from e

    async def wait_until_terminal(
        self,
        poll_interval: Optional[float] = None,
        timeout: Union[float, None, object] = CONFIG_TIMEOUT,
        stop_event: Optional[asyncio.Event] = None,
    ) -> Optional[BulkOperation]:
        """Poll currentBulkOperation until it leaves CREATED/RUNNING/CANCELING.

        Args:
            poll_interval: Seconds between polls (config default if None)
            timeout: Deadline in seconds; None waits indefinitely
                (config.poll_timeout if omitted)
            stop_event: Checked between polls; when set the wait is abandoned

        Returns:
            Terminal snapshot, or None if the shop has no bulk operation

        Raises:
            BulkOperationWaitCancelled: If stop_event is set
            BulkOperationTimeoutError: If the deadline passes
        """
        interval = self.config.poll_interval if poll_interval is None else poll_interval
        deadline = self.config.poll_timeout if timeout is CONFIG_TIMEOUT else timeout
        start_time = monotonic()

        operation = await self.current_operation()
        while operation is not None and operation.is_in_flight:
            if stop_event is not None and stop_event.is_set():
                raise BulkOperationWaitCancelled(
                    f"Stopped waiting for bulk operation {operation.id}",
                    operation,
                )

            elapsed = monotonic() - start_time
            if deadline is not None and elapsed > deadline:
                raise BulkOperationTimeoutError(
                    f"Bulk poll timeout after {elapsed:.1f}s for op={operation.id}",
                    operation,
                    elapsed=elapsed,
                )

            self.logger.debug(
                f"Poll: id={operation.id}, status={operation.status.value}, "
                f"elapsed={elapsed:.1f}s"
            )
            await asyncio.sleep(interval)
            operation = await self.current_operation()

        return operation

    async def cancel(
        self,
        poll_interval: Optional[float] = None,
        timeout: Union[float, None, object] = CONFIG_TIMEOUT,
    ) -> None:
        """Cancel the current job if it is CREATED or RUNNING and wait it out.

        A no-op when there is no job or it is already terminal or CANCELING,
        including a job that finishes while the cancel request is in flight.
        """
        operation = await self.current_operation()
        if operation is None or not operation.is_cancelable:
            return

        self.logger.info(f"Canceling running bulk operation: id={operation.id}")
        data = await self.graphql.execute(MUTATION_BULK_CANCEL, {"id": operation.id})

        mutation_result = data.get("bulkOperationCancel") or {}
        user_errors = mutation_result.get("userErrors") or []
        if user_errors:
            latest = await self.current_operation()
            if latest is None or latest.is_terminal:
                self.logger.info(
                    f"Bulk operation finished before cancel: id={operation.id}, "
                    f"status={latest.status.value if latest else None}"
                )
                return
            raise ShopifyBulkUserError("bulkOperationCancel", user_errors)

        final = await self.wait_until_terminal(poll_interval, timeout)
        self.logger.info(
            f"Bulk operation canceled: id={operation.id}, "
            f"status={final.status.value if final else None}"
        )

    async def get_operation(self, expected_id: Optional[str] = None) -> BulkOperation:
        """Current snapshot, checked against ``expected_id`` when given.

        Raises:
            BulkOperationNotFoundError: If the shop has no bulk operation
            BulkOperationMismatchError: If the current job is a different one
        """
        operation = await self.current_operation()
        if operation is None:
            raise BulkOperationNotFoundError(
                f"No current bulk operation for shop={self.shop_domain}"
            )
        if expected_id is not None and operation.id != expected_id:
            raise BulkOperationMismatchError(expected_id, operation.id)
        return operation

    async def resolve_result_url(
        self,
        expected_id: Optional[str] = None,
        poll_interval: Optional[float] = None,
        timeout: Union[float, None, object] = CONFIG_TIMEOUT,
        stop_event: Optional[asyncio.Event] = None,
    ) -> Optional[str]:
        """Wait for the current job and return its JSONL URL.

        Returns:
            Download URL, or None when the job completed with zero objects

        Raises:
            BulkOperationMismatchError: If ``expected_id`` is not the current job
            BulkOperationCanceledError: If the job ended CANCELED
            BulkOperationFailedError: If it ended FAILED/EXPIRED or with an error code
            ShopifyBulkApiError: If COMPLETED without a URL
        """
        await self.get_operation(expected_id)

        operation = await self.wait_until_terminal(
            poll_interval, timeout=timeout, stop_event=stop_event
        )
        if operation is None:
            raise BulkOperationNotFoundError(
                f"Bulk operation disappeared for shop={self.shop_domain}"
            )

        if operation.status == BulkOperationStatus.CANCELED:
            raise BulkOperationCanceledError(
                f"Bulk operation canceled: id={operation.id}", operation
            )

        if operation.status != BulkOperationStatus.COMPLETED:
            raise BulkOperationFailedError(
                f"Bulk operation didn't complete, status={operation.status.value}, "
                f"error_code={operation.error_code}, "
                f"partial_data_url={operation.partial_data_url}",
                operation,
            )

        if operation.error_code:
            raise BulkOperationFailedError(
                f"Bulk operation error: {operation.error_code}", operation
            )

        if operation.object_count == 0:
            self.logger.info(f"Bulk operation completed with no objects: {operation.id}")
            return None

        if not operation.url:
            raise ShopifyBulkApiError(
                f"Bulk operation COMPLETED but url missing: {operation.id}"
            )

        self.logger.info(
            f"Bulk operation completed: id={operation.id}, "
            f"objects={operation.object_count}, file_size={operation.file_size}"
        )
        return operation.url

    async def run_query_only(
        self,
        bulk_query: str,
        timeout: Union[float, None, object] = CONFIG_TIMEOUT,
    ) -> str:
        """Wait for any in-flight job, submit, and return the new job's GID."""
        await self.wait_until_terminal(timeout=timeout)
        return await self.submit_job(bulk_query)

    async def fetch_results(
        self,
        url: str,
        model: type[ShopifyRecord],
    ) -> list[ShopifyRecord]:
        """Download a result URL and reconcile it into ``model`` records."""
        path = await self.downloader.download(url)
        try:
            return await parse_bulk_result_file(path, model, self.resolver)
        finally:
            await self.downloader.remove(path)

    async def run_bulk_query(
        self,
        bulk_query: str,
        model: type[ShopifyRecord],
        poll_interval: Optional[float] = None,
        timeout: Union[float, None, object] = CONFIG_TIMEOUT,
        stop_event: Optional[asyncio.Event] = None,
    ) -> list[ShopifyRecord]:
        """Run a bulk query end to end and return typed, nested records.

        Pipeline:
        1. Wait until the shop's bulk slot is free
        2. Submit the query
        3. Wait for completion and resolve the result URL
        4. Download and reconcile the JSONL result

        ``timeout`` bounds each wait separately; pass None for no deadline.
        """
        await self.wait_until_terminal(
            poll_interval, timeout=timeout, stop_event=stop_event
        )

        operation_id = await self.submit_job(bulk_query)

        url = await self.resolve_result_url(
            operation_id,
            poll_interval=poll_interval,
            timeout=timeout,
            stop_event=stop_event,
        )
        if url is None:
            return []

        return await self.fetch_results(url, model)
