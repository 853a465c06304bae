"""
Static per-entity schema and field resolution.

Each filterable entity type is registered once with an explicit table of
its filterable fields::

    schema = SchemaRegistry()
    schema.register(Address, {"city": str, "zip": "string"})
    schema.register(Person, {
        "age": int,
        "name": str,
        "address": Address,             # to-one relationship
        "orders": list[Order],          # to-many relationship
    })

    schema.resolve_field_type(Person, "address.city")  # -> str

Resolution results are memoized per ``(entity_type, field_name)``.
"""

from __future__ import annotations

import datetime
import logging
import threading
import uuid as uuid_module
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, get_args, get_origin

from .exceptions import RelationshipTraversalError, UnknownFieldError

logger = logging.getLogger(__name__)

_TYPE_ALIASES: dict[str, type] = {
    "string": str,
    "text": str,
    "str": str,
    "integer": int,
    "int": int,
    "smallinteger": int,
    "biginteger": int,
    "float": float,
    "double": float,
    "decimal": Decimal,
    "numeric": Decimal,
    "boolean": bool,
    "bool": bool,
    "date": datetime.date,
    "datetime": datetime.datetime,
    "time": datetime.time,
    "uuid": uuid_module.UUID,
}


@dataclass(frozen=True)
class Relationship:
    """Declared link from one entity to another."""

    target: type
    many: bool = False


class SchemaRegistry:
    """Registry of filterable fields per entity type.

    Safe for concurrent use: registration and the resolution memo are
    guarded by one lock.
    """

    def __init__(self) -> None:
        self._entities: dict[type, dict[str, Any]] = {}
        self._cache: dict[tuple[type, str], type] = {}
        # Bumped by every registration; a resolution started under an older
        # generation is not memoized
        self._generation = 0
        self._lock = threading.Lock()

    # -- registration --------------------------------------------------------

    def register(self, entity_type: type, fields: Mapping[str, Any]) -> None:
        """Declare the filterable fields of *entity_type*.

        Field types may be Python types, type-name aliases (``"integer"``,
        ``"datetime"``, ...), registered entity types, ``list[Entity]`` or
        :class:`Relationship` instances. Re-registering replaces the table.
        """
        table = {name: _normalize(name, declared) for name, declared in fields.items()}
        with self._lock:
            self._entities[entity_type] = table
            self._cache.clear()
            self._generation += 1

    def is_registered(self, entity_type: type) -> bool:
        with self._lock:
            return entity_type in self._entities

    def fields(self, entity_type: type) -> dict[str, Any]:
        """Return a copy of the declared field table (empty if unregistered)."""
        with self._lock:
            return dict(self._entities.get(entity_type, {}))

    # -- resolution ----------------------------------------------------------

    def resolve_field_type(self, entity_type: type, field_name: str) -> type:
        """
        Resolve *field_name* (optionally a dotted path) to its value type.

        Raises:
            UnknownFieldError: If the path does not name a filterable scalar.
            RelationshipTraversalError: If the path traverses a scalar.
        """
        key = (entity_type, field_name)
        with self._lock:
            cached = self._cache.get(key)
            generation = self._generation
        if cached is not None:
            return cached

        logger.debug("Resolving %s.%s", _entity_name(entity_type), field_name)
        value_type = self._resolve(entity_type, field_name)
        with self._lock:
            if self._generation == generation:
                self._cache[key] = value_type
        return value_type

    def _resolve(self, entity_type: type, field_name: str) -> type:
        parts = field_name.split(".")
        current = entity_type
        for index, part in enumerate(parts):
            with self._lock:
                table = self._entities.get(current)
            if table is None:
                raise UnknownFieldError(
                    part, _entity_name(current), [], full_path=field_name
                )
            if part not in table:
                raise UnknownFieldError(
                    part, _entity_name(current), list(table), full_path=field_name
                )

            declared = table[part]
            target = self._relationship_target(declared)
            if index == len(parts) - 1:
                if target is not None:
                    # A relationship itself is not a filterable value
                    scalars = [
                        name
                        for name, value in table.items()
                        if self._relationship_target(value) is None
                    ]
                    raise UnknownFieldError(
                        part, _entity_name(current), scalars, full_path=field_name
                    )
                return declared
            if target is None:
                raise RelationshipTraversalError(
                    part, _entity_name(current), full_path=field_name
                )
            current = target
        raise UnknownFieldError(field_name, _entity_name(entity_type), [])

    def _relationship_target(self, declared: Any) -> type | None:
        if isinstance(declared, Relationship):
            return declared.target
        with self._lock:
            return declared if declared in self._entities else None


def _normalize(name: str, declared: Any) -> Any:
    if isinstance(declared, str):
        alias = _TYPE_ALIASES.get(declared.lower())
        if alias is None:
            raise ValueError(f"Unknown type name {declared!r} for field {name!r}")
        return alias
    if get_origin(declared) in (list, tuple, set, frozenset):
        args = get_args(declared)
        if not args or not isinstance(args[0], type):
            raise ValueError(f"Cannot read the item type of {declared!r} for {name!r}")
        return Relationship(args[0], many=True)
    if isinstance(declared, Relationship | type):
        return declared
    raise ValueError(f"Unsupported field type {declared!r} for field {name!r}")


def _entity_name(entity_type: Any) -> str:
    return getattr(entity_type, "__name__", str(entity_type))
