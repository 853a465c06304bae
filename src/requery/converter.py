"""
Forward conversion: filter DSL → predicate tree.

``PredicateConverter.build_predicate`` dispatches on the wrapper variant:

- empty   → :class:`MatchAllPredicate`
- simple  → AND of one leaf per condition, in order
- complex → recursive group combination (see :class:`~requery.model.Group`)

Each leaf resolves its field type through the schema, checks the number of
literals against the operator and coerces every literal. Any failure aborts
the whole build.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, TypeVar

from .base import AndPredicate, MatchAllPredicate, OrPredicate, Predicate
from .coercion import coerce_value
from .exceptions import UnsupportedOperatorArityError
from .field import FieldPredicate
from .model import Condition, FilterWrapper, Group
from .operators import (
    OPERATOR_ARITY,
    TO_PREDICATE_OPERATOR,
    FilterOperator,
    GroupOperator,
)

if TYPE_CHECKING:
    from .evaluator import MemoryOperatorRegistry
    from .schema import SchemaRegistry

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PredicateConverter:
    """Build predicates from filter wrappers against a registered schema."""

    def __init__(
        self,
        schema: SchemaRegistry,
        *,
        registry: MemoryOperatorRegistry | None = None,
    ) -> None:
        self._schema = schema
        self._registry = registry

    def build_predicate(
        self,
        wrapper: FilterWrapper[Any],
        entity_type: type[T],
    ) -> Predicate[T]:
        predicate: Predicate[T] = wrapper.resolve(
            lambda conditions: self.simple_filter_predicate(conditions, entity_type),
            lambda group: self.complex_filter_predicate(group, entity_type),
            self.no_filter_predicate,
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Built predicate for %s: %s",
                entity_type.__name__,
                predicate.to_dict(),
            )
        return predicate

    def no_filter_predicate(self) -> Predicate[Any]:
        return MatchAllPredicate()

    def simple_filter_predicate(
        self,
        conditions: Sequence[Condition],
        entity_type: type[T],
    ) -> Predicate[T]:
        leaves = [self.condition_predicate(c, entity_type) for c in conditions]
        return _combine(GroupOperator.AND, leaves)

    def complex_filter_predicate(
        self,
        group: Group,
        entity_type: type[T],
    ) -> Predicate[T]:
        parts = [self._operation_predicate(op, entity_type) for op in group.operations]

        if group.non_priority_operators:
            result = parts[0]
            for connective, part in zip(group.non_priority_operators, parts[1:]):
                result = _combine(connective, [result, part])
        else:
            result = _combine(group.operator, parts)

        if group.right_side_operands is not None:
            right = self.complex_filter_predicate(group.right_side_operands, entity_type)
            result = _combine(group.operator, [result, right])
        return result

    def condition_predicate(
        self,
        condition: Condition,
        entity_type: type[T],
    ) -> Predicate[T]:
        value_type = self._schema.resolve_field_type(entity_type, condition.field)
        values = condition.values
        _check_arity(condition.operator, condition.field, len(values))
        coerced = tuple(
            coerce_value(v, value_type, field=condition.field) for v in values
        )
        return FieldPredicate(
            condition.field,
            TO_PREDICATE_OPERATOR[condition.operator],
            _leaf_value(condition.operator, coerced),
            registry=self._registry,
        )

    def _operation_predicate(
        self,
        operation: Condition | Group,
        entity_type: type[T],
    ) -> Predicate[T]:
        if isinstance(operation, Group):
            return self.complex_filter_predicate(operation, entity_type)
        return self.condition_predicate(operation, entity_type)


def _combine(op: GroupOperator, predicates: list[Predicate[T]]) -> Predicate[T]:
    """Combine predicates with the given connective."""
    if not predicates:
        return MatchAllPredicate()
    if len(predicates) == 1:
        return predicates[0]
    if op is GroupOperator.AND:
        return AndPredicate(*predicates)
    return OrPredicate(*predicates)


def _check_arity(operator: FilterOperator, field: str, count: int) -> None:
    low, high = OPERATOR_ARITY[operator]
    if count < low or (high is not None and count > high):
        if high is None:
            expected = f"at least {low}"
        elif low == high:
            expected = str(low)
        else:
            expected = f"{low}-{high}"
        raise UnsupportedOperatorArityError(operator.value, field, expected, count)


def _leaf_value(operator: FilterOperator, values: tuple[Any, ...]) -> Any:
    if operator in (FilterOperator.IS_NULL, FilterOperator.IS_NOT_NULL):
        return None
    if operator in (FilterOperator.IN, FilterOperator.BETWEEN):
        return values
    return values[0]
