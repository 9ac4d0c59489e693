"""Resolve a child record's schema from the resource type in its GID."""
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import NamedTuple, Optional

from ..schemas.resources import (
    Collection,
    FulfillmentOrderLineItem,
    LineItem,
    Metafield,
    Order,
    Product,
    ProductImage,
    ProductVariant,
    ShopifyRecord,
)
from .exceptions import MalformedGlobalIdError, UnknownResourceTypeError


GID_PATTERN = re.compile(
    r"^(?P<scheme>[A-Za-z][A-Za-z0-9+.-]*)://"
    r"(?P<namespace>[^/]+)/(?P<resource_type>\w+)/(?P<object_id>\d+)$"
)


class GlobalId(NamedTuple):
    """Parsed ``scheme://namespace/<ResourceType>/<digits>`` identifier."""

    scheme: str
    namespace: str
    resource_type: str
    object_id: str

    @classmethod
    def parse(cls, gid: str, line_number: Optional[int] = None) -> "GlobalId":
        match = GID_PATTERN.match(gid) if isinstance(gid, str) else None
        if match is None:
            raise MalformedGlobalIdError(str(gid), line_number)
        return cls(**match.groupdict())


class ResolvedType(NamedTuple):
    model: type[ShopifyRecord]
    field_name: str


class TypeResolver:
    """Fixed table of resource type -> (record schema, parent collection name).

    The collection name is the resource type pluralized, e.g. ``LineItem`` ->
    ``LineItems``. There is no fallback for unknown types.
    """

    def __init__(self, mapping: Mapping[str, type[ShopifyRecord]]):
        self._types = MappingProxyType(
            {
                resource_type: ResolvedType(model, f"{resource_type}s")
                for resource_type, model in mapping.items()
            }
        )

    @property
    def resource_types(self) -> frozenset[str]:
        return frozenset(self._types)

    def resolve_type(self, resource_type: str, line_number: Optional[int] = None) -> ResolvedType:
        try:
            return self._types[resource_type]
        except KeyError:
            raise UnknownResourceTypeError(resource_type, line_number) from None

    def resolve(self, gid: str, line_number: Optional[int] = None) -> ResolvedType:
        return self.resolve_type(GlobalId.parse(gid, line_number).resource_type, line_number)


DEFAULT_RESOLVER = TypeResolver(
    {
        "LineItem": LineItem,
        "FulfillmentOrderLineItem": FulfillmentOrderLineItem,
        "Metafield": Metafield,
        "Order": Order,
        "Product": Product,
        "ProductVariant": ProductVariant,
        "Collection": Collection,
        "ProductImage": ProductImage,
    }
)
