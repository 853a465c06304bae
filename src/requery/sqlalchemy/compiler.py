"""
Compile a predicate into a SQLAlchemy filter expression.

The compiler walks ``predicate.to_dict()``: ``and`` / ``or`` / ``not``
composites map onto ``and_`` / ``or_`` / ``not_`` and leaves are delegated
to a :class:`SQLAlchemyOperatorRegistry`. Dotted attribute paths traverse
mapped relationships with ``has()`` (to-one) or ``any()`` (to-many).

In-memory evaluation reads a missing to-one row as a NULL value, so the
compiled SQL does the same: a negated leaf is pushed inside ``has()``, and
a null check that holds for NULL also matches when the related row is
absent.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar, cast

from sqlalchemy import and_, false, inspect, not_, or_, true

from ..base import LOGICAL_AND, LOGICAL_NOT, LOGICAL_OR
from ..exceptions import RelationshipTraversalError, UnknownFieldError
from ..operators import NULL_CHECK_OPERATORS, PredicateOperator
from .operators import DEFAULT_SQLA_REGISTRY

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, Select

    from ..base import Predicate
    from .operators import SQLAlchemyOperatorRegistry

S = TypeVar("S", bound="Select[Any]")

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def compile_predicate(
    model: type[Any],
    predicate: Predicate[Any],
    *,
    registry: SQLAlchemyOperatorRegistry | None = None,
) -> ColumnElement[bool]:
    """
    Build a SQLAlchemy boolean expression equivalent to *predicate*.

    Args:
        model: The mapped SQLAlchemy model class the predicate filters.
        predicate: Any predicate tree built from this library's nodes.
        registry: Optional custom operator registry. Falls back to
            ``DEFAULT_SQLA_REGISTRY``.

    Raises:
        UnknownFieldError: If a leaf names an attribute the model lacks.
        RelationshipTraversalError: If a dotted path crosses a column.
    """
    reg = registry or DEFAULT_SQLA_REGISTRY
    return _compile_node(model, predicate.to_dict(), reg)


def apply_predicate(
    stmt: S,
    model: type[Any],
    predicate: Predicate[Any],
    *,
    registry: SQLAlchemyOperatorRegistry | None = None,
) -> S:
    """Add the compiled *predicate* to the ``WHERE`` clause of *stmt*."""
    return cast("S", stmt.where(compile_predicate(model, predicate, registry=registry)))


# ---------------------------------------------------------------------------
# Internal compilation
# ---------------------------------------------------------------------------


def _compile_node(
    model: type[Any],
    data: dict[str, Any],
    registry: SQLAlchemyOperatorRegistry,
) -> ColumnElement[bool]:
    op_str = data.get("op", "")

    if op_str == LOGICAL_NOT:
        return _compile_not(model, data, registry)
    if op_str in (LOGICAL_AND, LOGICAL_OR):
        return _compile_logical(model, op_str, data.get("conditions", []), registry)
    return _compile_leaf(model, data, registry)


def _compile_logical(
    model: type[Any],
    op_str: str,
    conditions: list[dict[str, Any]],
    registry: SQLAlchemyOperatorRegistry,
) -> ColumnElement[bool]:
    compiled = [_compile_node(model, c, registry) for c in conditions]
    if op_str == LOGICAL_AND:
        return and_(*compiled) if compiled else true()
    return or_(*compiled) if compiled else false()


def _compile_not(
    model: type[Any],
    data: dict[str, Any],
    registry: SQLAlchemyOperatorRegistry,
) -> ColumnElement[bool]:
    negate = False
    while data.get("op") == LOGICAL_NOT:
        conditions = data.get("conditions", [])
        if len(conditions) != 1:
            raise ValueError(f"'not' expects exactly one condition, got {len(conditions)}")
        data = conditions[0]
        negate = not negate

    if data.get("op") in (LOGICAL_AND, LOGICAL_OR):
        inner = _compile_node(model, data, registry)
        return not_(inner) if negate else inner
    return _compile_leaf(model, data, registry, negate=negate)


def _compile_leaf(
    model: type[Any],
    data: dict[str, Any],
    registry: SQLAlchemyOperatorRegistry,
    full_path: str | None = None,
    *,
    negate: bool = False,
) -> ColumnElement[bool]:
    attr: str | None = data.get("attr")
    if not attr:
        raise ValueError(f"Predicate leaf missing 'attr': {data}")
    full_path = full_path or attr

    mapper = inspect(model)
    name, _, rest = attr.partition(".")

    if name in mapper.relationships:
        relationship = mapper.relationships[name]
        if not rest:
            raise UnknownFieldError(
                name, model.__name__, _column_names(mapper), full_path=full_path
            )
        nested = {**data, "attr": rest}
        target = relationship.mapper.class_
        rel_attr = getattr(model, name)
        if relationship.uselist:
            # EXISTS is two-valued: negation stays outside
            exists = rel_attr.any(_compile_leaf(target, nested, registry, full_path))
            return cast("ColumnElement[bool]", not_(exists) if negate else exists)

        clause = rel_attr.has(
            _compile_leaf(target, nested, registry, full_path, negate=negate)
        )
        if _matches_missing(PredicateOperator(data["op"]), negate):
            return or_(~rel_attr.has(), clause)
        return cast("ColumnElement[bool]", clause)

    if name not in mapper.all_orm_descriptors:
        raise UnknownFieldError(
            name,
            model.__name__,
            _column_names(mapper) + list(mapper.relationships.keys()),
            full_path=full_path,
        )
    if rest:
        raise RelationshipTraversalError(name, model.__name__, full_path=full_path)

    column = getattr(model, name)
    clause = registry.apply(PredicateOperator(data["op"]), column, data.get("val"))
    return not_(clause) if negate else clause


def _matches_missing(op: PredicateOperator, negate: bool) -> bool:
    """Whether the leaf holds for a NULL value, i.e. an absent related row."""
    if op not in NULL_CHECK_OPERATORS:
        return False
    return (op is PredicateOperator.IS_NULL) is not negate


def _column_names(mapper: Any) -> list[str]:
    return list(mapper.column_attrs.keys())
