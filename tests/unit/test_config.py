"""Unit tests for ShopifyClientConfig."""
import pytest
from pydantic import ValidationError

from shopify_bulk.config import ShopifyClientConfig


def test_endpoint_with_version():
    config = ShopifyClientConfig(
        shop_domain="https://mystore.myshopify.com/",
        access_token="shpat_secret",
        api_version="2024-10",
    )

    assert config.shop_domain == "mystore.myshopify.com"
    assert config.graphql_endpoint == (
        "https://mystore.myshopify.com/admin/api/2024-10/graphql.json"
    )


@pytest.mark.parametrize("version", ["", "latest"])
def test_endpoint_without_version(version):
    config = ShopifyClientConfig(
        shop_domain="mystore.myshopify.com", access_token="t", api_version=version
    )

    assert config.graphql_endpoint == "https://mystore.myshopify.com/admin/api/graphql.json"


def test_config_is_immutable_and_hides_token():
    config = ShopifyClientConfig(shop_domain="mystore.myshopify.com", access_token="shpat_secret")

    with pytest.raises(ValidationError):
        config.api_version = "2025-01"
    assert "shpat_secret" not in repr(config)
    assert config.access_token.get_secret_value() == "shpat_secret"


def test_empty_domain_rejected():
    with pytest.raises(ValidationError):
        ShopifyClientConfig(shop_domain="  ", access_token="t")


def test_from_env():
    config = ShopifyClientConfig.from_env(
        {
            "SHOPIFY_STORE_DOMAIN": "mystore.myshopify.com",
            "SHOPIFY_ADMIN_ACCESS_TOKEN": "shpat_secret",
            "SHOPIFY_API_VERSION": "2025-01",
            "SHOPIFY_BULK_POLL_INTERVAL": "5",
            "SHOPIFY_BULK_POLL_TIMEOUT": "none",
            "SHOPIFY_THROTTLE_RETRIES": "2",
        }
    )

    assert config.api_version == "2025-01"
    assert config.poll_interval == 5.0
    assert config.poll_timeout is None
    assert config.throttle_retries == 2


def test_from_env_defaults():
    config = ShopifyClientConfig.from_env(
        {"SHOPIFY_STORE_DOMAIN": "mystore.myshopify.com", "SHOPIFY_ADMIN_ACCESS_TOKEN": "t"}
    )

    assert config.api_version == "2024-10"
    assert config.poll_timeout == 3600.0
    assert config.throttle_retries == 0


@pytest.mark.parametrize(
    "env, missing",
    [
        ({"SHOPIFY_ADMIN_ACCESS_TOKEN": "t"}, "SHOPIFY_STORE_DOMAIN"),
        ({"SHOPIFY_STORE_DOMAIN": "mystore.myshopify.com"}, "SHOPIFY_ADMIN_ACCESS_TOKEN"),
    ],
)
def test_from_env_missing(env, missing):
    with pytest.raises(ValueError, match=missing):
        ShopifyClientConfig.from_env(env)
