"""Back-off computation for Shopify's cost-based rate limiting."""
import logging
import math
from decimal import Decimal

from ..schemas.graphql import QueryCost


logger = logging.getLogger(__name__)


def _exact(value: float) -> Decimal:
    # str() round-trips the JSON literal, so 0.1 stays 0.1 rather than its binary expansion.
    return Decimal(str(value))


def compute_throttle_delay(cost: QueryCost) -> int:
    """Seconds to wait until the bucket can afford the requested cost.

    ceil((requestedQueryCost - currentlyAvailable) / restoreRate), or 0 when
    the budget already covers the request.
    """
    requested = _exact(cost.requested_query_cost)
    available = _exact(cost.throttle_status.currently_available)
    restore_rate = _exact(cost.throttle_status.restore_rate)

    if available >= requested:
        return 0
    if restore_rate <= 0:
        logger.warning(
            "Throttled with non-positive restoreRate=%s; skipping back-off",
            cost.throttle_status.restore_rate,
        )
        return 0

    return math.ceil((requested - available) / restore_rate)
