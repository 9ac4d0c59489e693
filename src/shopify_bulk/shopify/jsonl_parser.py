"""Reconcile a bulk operation JSONL result into nested typed records.

Shopify flattens connections in bulk exports: every node of a nested
connection is written as its own line carrying ``__parentId``. Parent lines
are decoded in arrival order; child lines are buffered per parent id and
collection until the whole stream has been read, then attached.
"""
import json
import logging
from collections.abc import Iterable, Mapping
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, NamedTuple, Union, get_args, get_origin

import aiofiles
from pydantic import ValidationError
from pydantic.alias_generators import to_pascal

from ..schemas.resources import ShopifyRecord
from .exceptions import (
    BulkResultParseError,
    MissingParentIdError,
    OrphanedChildrenError,
    UnknownChildFieldError,
)
from .type_resolver import DEFAULT_RESOLVER, TypeResolver


logger = logging.getLogger(__name__)

PARENT_ID_KEY = "__parentId"


class ChildCollection(NamedTuple):
    attribute: str
    item_type: type[ShopifyRecord]


@lru_cache(maxsize=None)
def child_collections(model: type[ShopifyRecord]) -> Mapping[str, ChildCollection]:
    """Map collection names (``LineItems``) to list fields (``line_items``)."""
    table: dict[str, ChildCollection] = {}
    for name, field in model.model_fields.items():
        if get_origin(field.annotation) is not list:
            continue
        args = get_args(field.annotation)
        if (
            len(args) == 1
            and isinstance(args[0], type)
            and issubclass(args[0], ShopifyRecord)
        ):
            table[to_pascal(name)] = ChildCollection(name, args[0])
    return MappingProxyType(table)


class BulkResultReconciler:
    """Single-pass reconciler; feed lines with add_line(), then build()."""

    def __init__(
        self,
        model: type[ShopifyRecord],
        resolver: TypeResolver = DEFAULT_RESOLVER,
    ):
        if "id" not in model.model_fields:
            raise MissingParentIdError(f"No id field on parent type {model.__name__}")

        self.model = model
        self.resolver = resolver
        self._collections = child_collections(model)
        self._records: list[ShopifyRecord] = []
        self._children: dict[str, dict[str, list[ShopifyRecord]]] = {}
        self._line_number = 0
        self._child_count = 0

    def add_line(self, line: Union[bytes, str]) -> None:
        self._line_number += 1
        if isinstance(line, bytes):
            try:
                line = line.decode("utf-8")
            except UnicodeDecodeError as e:
                raise BulkResultParseError(
                    f"Invalid UTF-8: {e}", self._line_number
                ) from e
        if not line.strip():
            return

        try:
            node = json.loads(line)
        except ValueError as e:
            raise BulkResultParseError(f"Invalid JSON: {e}", self._line_number) from e
        if not isinstance(node, dict):
            raise BulkResultParseError("Expected a JSON object", self._line_number)

        if PARENT_ID_KEY in node:
            self._add_child(node.pop(PARENT_ID_KEY), node)
        else:
            self._records.append(self._decode(self.model, node))

    def _add_child(self, parent_id: Any, node: dict) -> None:
        if not parent_id or not isinstance(parent_id, str):
            raise BulkResultParseError(
                f"Invalid {PARENT_ID_KEY}: {parent_id!r}", self._line_number
            )

        gid = node.get("id")
        if not gid:
            raise BulkResultParseError(
                "Connection type must query `id` field", self._line_number
            )

        resolved = self.resolver.resolve(gid, self._line_number)
        collection = self._collections.get(resolved.field_name)
        if collection is None or not issubclass(resolved.model, collection.item_type):
            raise UnknownChildFieldError(resolved.field_name, self.model.__name__)

        child = self._decode(resolved.model, node)
        self._children.setdefault(parent_id, {}).setdefault(
            resolved.field_name, []
        ).append(child)
        self._child_count += 1

    def _decode(self, model: type[ShopifyRecord], node: dict) -> ShopifyRecord:
        try:
            return model.model_validate(node)
        except ValidationError as e:
            raise BulkResultParseError(
                f"Cannot decode {model.__name__}: {e}", self._line_number
            ) from e

    def build(self) -> list[ShopifyRecord]:
        """Attach buffered children and return parents in arrival order."""
        if self._children:
            index: dict[str, list[ShopifyRecord]] = {}
            for record in self._records:
                if not record.id:
                    raise MissingParentIdError(
                        f"No id on parent record of type {self.model.__name__}"
                    )
                index.setdefault(record.id, []).append(record)

            orphans = [pid for pid in self._children if pid not in index]
            if orphans:
                raise OrphanedChildrenError(orphans)

            for parent_id, collections in self._children.items():
                for field_name, children in collections.items():
                    attribute = self._collections[field_name].attribute
                    for parent in index[parent_id]:
                        setattr(parent, attribute, list(children))

        logger.debug(
            "Reconciled %s %s records with %s child records",
            len(self._records),
            self.model.__name__,
            self._child_count,
        )
        return list(self._records)


def parse_bulk_lines(
    lines: Iterable[Union[bytes, str]],
    model: type[ShopifyRecord],
    resolver: TypeResolver = DEFAULT_RESOLVER,
) -> list[ShopifyRecord]:
    """Reconcile an in-memory iterable of JSONL lines."""
    reconciler = BulkResultReconciler(model, resolver)
    for line in lines:
        reconciler.add_line(line)
    return reconciler.build()


async def parse_bulk_result_file(
    path: Union[str, Path],
    model: type[ShopifyRecord],
    resolver: TypeResolver = DEFAULT_RESOLVER,
) -> list[ShopifyRecord]:
    """Reconcile a downloaded JSONL result file in one forward pass."""
    reconciler = BulkResultReconciler(model, resolver)
    async with aiofiles.open(path, mode="rb") as f:
        async for line in f:
            reconciler.add_line(line)
    return reconciler.build()
