"""Async GraphQL transport for the Shopify Admin API."""
import asyncio
import json
import logging
from typing import Any, Optional

import aiohttp
from pydantic import ValidationError

from ..config import ShopifyClientConfig
from ..schemas.graphql import GraphQLResponse
from .exceptions import (
    ShopifyBulkApiError,
    ShopifyBulkGraphQLError,
    ShopifyThrottledError,
)
from .throttle import compute_throttle_delay


class ShopifyGraphQLClient:
    """Executes single GraphQL requests against one shop.

    Transport failures are raised as-is; only the throttle back-off sleep is
    handled here.
    """

    def __init__(
        self,
        config: ShopifyClientConfig,
        session: aiohttp.ClientSession,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize the transport.

        Args:
            config: Immutable client configuration (endpoint, token, timeouts)
            session: Injected aiohttp ClientSession
            logger: Optional logger instance
        """
        self.config = config
        self.session = session
        self.logger = logger or logging.getLogger(__name__)

    @property
    def graphql_endpoint(self) -> str:
        return self.config.graphql_endpoint

    async def execute(
        self,
        query: str,
        variables: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Run a query or mutation and return its ``data`` object.

        Raises:
            ShopifyBulkApiError: On non-2xx, network or decoding failure
            ShopifyThrottledError: When throttled (after the back-off delay)
            ShopifyBulkGraphQLError: On any other root-level errors
        """
        payload = {"query": query, "variables": variables or {}}

        attempt = 0
        while True:
            response = await self._post_graphql(payload)

            if not response.errors:
                return response.data or {}

            errors = [e.model_dump(exclude_none=True) for e in response.errors]

            if response.is_throttled:
                cost = response.extensions.cost
                delay = compute_throttle_delay(cost)
                if delay > 0:
                    self.logger.warning(
                        "Throttled: requested=%s available=%s restore_rate=%s, sleeping %ss",
                        cost.requested_query_cost,
                        cost.throttle_status.currently_available,
                        cost.throttle_status.restore_rate,
                        delay,
                    )
                    await asyncio.sleep(delay)

                if attempt < self.config.throttle_retries:
                    attempt += 1
                    self.logger.info(
                        "Resubmitting throttled request, retry=%s/%s",
                        attempt,
                        self.config.throttle_retries,
                    )
                    continue

                raise ShopifyThrottledError(
                    errors, cost=cost, delay=delay, data=response.data
                )

            raise ShopifyBulkGraphQLError(errors, data=response.data)

    async def _post_graphql(self, payload: dict) -> GraphQLResponse:
        """Execute one GraphQL POST and decode the envelope."""
        headers = {
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": self.config.access_token.get_secret_value(),
        }
        timeout = aiohttp.ClientTimeout(total=self.config.request_timeout)

        try:
            async with self.session.post(
                self.graphql_endpoint,
                json=payload,
                headers=headers,
                timeout=timeout,
            ) as resp:
                response_text = await resp.text()
                status = resp.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ShopifyBulkApiError(f"Network error: {e}") from e

        if not 200 <= status < 300:
            raise ShopifyBulkApiError(
                f"HTTP {status}: {response_text[:500]}",
                status=status,
                body=response_text,
            )

        try:
            return GraphQLResponse.model_validate(json.loads(response_text))
        except (ValueError, ValidationError) as e:
            raise ShopifyBulkApiError(
                f"Undecodable GraphQL response: {e}",
                status=status,
                body=response_text,
            ) from e
