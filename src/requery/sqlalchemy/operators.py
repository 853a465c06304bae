"""
SQLAlchemy operator compilation.

``SQLA_OPERATORS`` maps every :class:`PredicateOperator` to a function
``(column, value) -> ColumnElement[bool]``. ``contains`` escapes
``%`` and ``_`` in the value so they match literally.
"""

from __future__ import annotations

import operator as op_module
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, cast

from ..operators import PredicateOperator

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement

SQLAlchemyClause = Callable[[Any, Any], "ColumnElement[bool]"]


def _between(column: Any, bounds: Any) -> ColumnElement[bool]:
    low, high = bounds
    return cast("ColumnElement[bool]", column.between(low, high))


SQLA_OPERATORS: Mapping[PredicateOperator, SQLAlchemyClause] = {
    PredicateOperator.EQ: op_module.eq,
    PredicateOperator.NE: op_module.ne,
    PredicateOperator.GT: op_module.gt,
    PredicateOperator.GE: op_module.ge,
    PredicateOperator.LT: op_module.lt,
    PredicateOperator.LE: op_module.le,
    PredicateOperator.IN: lambda column, value: column.in_(list(value)),
    PredicateOperator.BETWEEN: _between,
    PredicateOperator.CONTAINS: lambda column, value: column.contains(
        str(value), autoescape=True
    ),
    PredicateOperator.IS_NULL: lambda column, _: column.is_(None),
    PredicateOperator.IS_NOT_NULL: lambda column, _: column.is_not(None),
}


class SQLAlchemyOperatorRegistry:
    """Clause builders keyed by :class:`PredicateOperator`."""

    def __init__(
        self, operators: Mapping[PredicateOperator, SQLAlchemyClause] | None = None
    ) -> None:
        self._operators: dict[PredicateOperator, SQLAlchemyClause] = dict(
            SQLA_OPERATORS if operators is None else operators
        )

    def register(self, name: PredicateOperator, apply: SQLAlchemyClause) -> None:
        self._operators[name] = apply

    def unregister(self, name: PredicateOperator) -> None:
        self._operators.pop(name, None)

    def get(self, name: PredicateOperator) -> SQLAlchemyClause | None:
        return self._operators.get(name)

    def has(self, name: PredicateOperator) -> bool:
        return name in self._operators

    @property
    def supported_operators(self) -> set[PredicateOperator]:
        return set(self._operators)

    def apply(self, name: PredicateOperator, column: Any, value: Any) -> ColumnElement[bool]:
        """
        Look up the operator and build its clause.

        Raises:
            ValueError: If the operator is not registered.
        """
        apply = self._operators.get(name)
        if apply is None:
            raise ValueError(f"Unsupported operator for SQLAlchemy: {name}")
        return apply(column, value)


DEFAULT_SQLA_REGISTRY: SQLAlchemyOperatorRegistry = SQLAlchemyOperatorRegistry()
