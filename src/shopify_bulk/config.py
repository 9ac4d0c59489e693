"""Per-client configuration for the Shopify Admin GraphQL API."""
import os
from collections.abc import Mapping
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator


DEFAULT_API_VERSION = "2024-10"


class ShopifyClientConfig(BaseModel):
    """Immutable settings shared by the transport and the bulk client."""

    model_config = ConfigDict(frozen=True)

    shop_domain: str = Field(..., description="e.g., mystore.myshopify.com")
    access_token: SecretStr = Field(..., description="Admin API access token")
    api_version: str = Field(
        DEFAULT_API_VERSION, description="API version; empty or 'latest' omits it"
    )
    api_path_prefix: str = "admin/api"
    request_timeout: float = Field(60.0, gt=0, description="Seconds per HTTP request")
    poll_interval: float = Field(1.0, ge=0, description="Seconds between status polls")
    poll_timeout: Optional[float] = Field(
        3600.0, gt=0, description="Wait loop deadline in seconds (None = unbounded)"
    )
    throttle_retries: int = Field(
        0, ge=0, description="Resubmissions after a throttle back-off (0 = fail after delay)"
    )
    download_chunk_size: int = Field(64 * 1024, gt=0)

    @field_validator("shop_domain")
    @classmethod
    def _strip_domain(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        for scheme in ("https://", "http://"):
            if value.startswith(scheme):
                value = value[len(scheme):]
        if not value:
            raise ValueError("shop_domain must not be empty")
        return value

    @property
    def graphql_endpoint(self) -> str:
        prefix = self.api_path_prefix.strip("/")
        if self.api_version and self.api_version != "latest":
            prefix = f"{prefix}/{self.api_version}"
        return f"https://{self.shop_domain}/{prefix}/graphql.json"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ShopifyClientConfig":
        """Build a config from SHOPIFY_* environment variables.

        Raises:
            ValueError: If the store domain or access token is not set
        """
        env = os.environ if environ is None else environ

        shop_domain = env.get("SHOPIFY_STORE_DOMAIN")
        if not shop_domain:
            raise ValueError("SHOPIFY_STORE_DOMAIN environment variable not configured")

        access_token = env.get("SHOPIFY_ADMIN_ACCESS_TOKEN")
        if not access_token:
            raise ValueError(
                "SHOPIFY_ADMIN_ACCESS_TOKEN environment variable not configured"
            )

        values: dict = {
            "shop_domain": shop_domain,
            "access_token": access_token,
            "api_version": env.get("SHOPIFY_API_VERSION", DEFAULT_API_VERSION),
        }
        if env.get("SHOPIFY_BULK_POLL_INTERVAL"):
            values["poll_interval"] = float(env["SHOPIFY_BULK_POLL_INTERVAL"])
        if env.get("SHOPIFY_BULK_POLL_TIMEOUT"):
            timeout = env["SHOPIFY_BULK_POLL_TIMEOUT"]
            values["poll_timeout"] = None if timeout.lower() == "none" else float(timeout)
        if env.get("SHOPIFY_THROTTLE_RETRIES"):
            values["throttle_retries"] = int(env["SHOPIFY_THROTTLE_RETRIES"])

        return cls(**values)
