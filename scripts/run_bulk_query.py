#!/usr/bin/env python3
"""CLI entry point for running a Shopify bulk export.

Usage:
    # Export orders with their line items
    python scripts/run_bulk_query.py --query-file orders.graphql --model Order --output orders.json

    # Show the shop's current bulk operation
    python scripts/run_bulk_query.py --status

    # Cancel the running bulk operation
    python scripts/run_bulk_query.py --cancel

Configuration comes from SHOPIFY_STORE_DOMAIN, SHOPIFY_ADMIN_ACCESS_TOKEN and
SHOPIFY_API_VERSION.
"""
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

import aiohttp

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from shopify_bulk.config import ShopifyClientConfig
from shopify_bulk.schemas import resources
from shopify_bulk.shopify import ShopifyBulkClient, ShopifyBulkClientError


MODELS = {
    "Order": resources.Order,
    "Product": resources.Product,
    "Collection": resources.Collection,
    "Customer": resources.Customer,
}


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


async def run(args: argparse.Namespace) -> int:
    config = ShopifyClientConfig.from_env()

    async with aiohttp.ClientSession() as session:
        client = ShopifyBulkClient(config=config, session=session)

        if args.status:
            operation = await client.current_operation()
            if operation is None:
                print("No bulk operation")
            else:
                print(operation.model_dump_json(indent=2, by_alias=True))
            return 0

        if args.cancel:
            await client.cancel()
            return 0

        query = Path(args.query_file).read_text(encoding="utf-8")
        records = await client.run_bulk_query(
            query, MODELS[args.model], poll_interval=args.poll_interval
        )

    payload = [record.model_dump(mode="json", by_alias=True) for record in records]
    if args.output:
        Path(args.output).write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logging.getLogger(__name__).info(
            "Wrote %s %s records to %s", len(records), args.model, args.output
        )
    else:
        print(json.dumps(payload, indent=2))
    return 0


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Shopify bulk query export")
    action = parser.add_mutually_exclusive_group(required=True)
    action.add_argument("--query-file", type=str, help="File holding the bulk query")
    action.add_argument(
        "--status", action="store_true", help="Print the current bulk operation"
    )
    action.add_argument(
        "--cancel", action="store_true", help="Cancel the running bulk operation"
    )
    parser.add_argument(
        "--model",
        choices=sorted(MODELS),
        default="Order",
        help="Top-level record type of the query",
    )
    parser.add_argument("--output", type=str, help="Write JSON here instead of stdout")
    parser.add_argument(
        "--poll-interval", type=float, default=None, help="Seconds between polls"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    setup_logging(args.verbose)

    try:
        sys.exit(asyncio.run(run(args)))
    except (ShopifyBulkClientError, ValueError) as e:
        logging.getLogger(__name__).error("Bulk export failed: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
