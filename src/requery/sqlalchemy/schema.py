"""
Generate static schema tables from SQLAlchemy declarative models.

The table is read from the mapper once, at registration time; resolution
afterwards goes through :class:`~requery.schema.SchemaRegistry` only.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import inspect

from ..schema import Relationship

if TYPE_CHECKING:
    from ..schema import SchemaRegistry

logger = logging.getLogger(__name__)


def fields_from_model(model: type[Any]) -> dict[str, Any]:
    """
    Build ``{name: value_type}`` for a mapped model.

    Columns contribute their ``python_type``; columns whose type does not
    report one are skipped. Relationships contribute a
    :class:`~requery.schema.Relationship` to the target class.
    """
    mapper = inspect(model)
    fields: dict[str, Any] = {}
    for key, prop in mapper.column_attrs.items():
        try:
            fields[key] = prop.columns[0].type.python_type
        except NotImplementedError:
            logger.debug("Skipping %s.%s: no python type", model.__name__, key)
    for key, rel in mapper.relationships.items():
        fields[key] = Relationship(rel.mapper.class_, many=bool(rel.uselist))
    return fields


def register_model(
    schema: SchemaRegistry,
    model: type[Any],
    *,
    recursive: bool = True,
) -> None:
    """Register *model* (and, by default, every model reachable from it)."""
    pending = [model]
    seen: set[type[Any]] = set()
    while pending:
        current = pending.pop()
        if current in seen:
            continue
        seen.add(current)
        fields = fields_from_model(current)
        schema.register(current, fields)
        if recursive:
            pending.extend(
                f.target for f in fields.values() if isinstance(f, Relationship)
            )
