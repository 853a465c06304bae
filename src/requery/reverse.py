"""
Reverse conversion: predicate tree → filter DSL.

Binary composition with ``&`` / ``|`` produces left-deep trees whose
connectives can change at every level, e.g. ``(a & b) | c``. The factory
reads such a tree as a left-to-right fold:

- the left spine is flattened into ``operations``; when its connectives are
  not all the group's own ``operator`` they are recorded in
  ``non_priority_operators``;
- a trailing operand that is a composite of the other connective is the
  asymmetric right-hand side and is recorded in ``right_side_operands``;
- any other composite operand becomes a nested :class:`Group`.

A root group with neither artifact, an AND connective and only conditions
collapses to the simple (flat list) form.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from .base import AndPredicate, MatchAllPredicate, NotPredicate, OrPredicate, Predicate
from .exceptions import UnsupportedPredicateShapeError
from .field import FieldPredicate
from .model import ComplexFilter, Condition, EmptyFilter, FilterWrapper, Group, SimpleFilter
from .operators import (
    FROM_PREDICATE_OPERATOR,
    NEGATED_OPERATORS,
    FilterOperator,
    GroupOperator,
)

if TYPE_CHECKING:
    from .schema import SchemaRegistry

    _Composite = AndPredicate[Any] | OrPredicate[Any]

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ReversePredicateFactory:
    """Reconstruct filter DSL from predicate trees built by this library."""

    def __init__(self, schema: SchemaRegistry | None = None) -> None:
        self._schema = schema

    def build_dsl(
        self,
        predicate: Predicate[T],
        entity_type: type[T],
    ) -> FilterWrapper[Predicate[T]]:
        """
        Return the filter wrapper that rebuilds an equivalent predicate.

        Raises:
            UnsupportedPredicateShapeError: If a node has no DSL equivalent.
            UnknownFieldError: If a leaf names a field missing from the schema.
        """
        group = self.create(predicate, entity_type)
        if group is None:
            return EmptyFilter()
        if _is_flat(group):
            logger.debug("Reconstructed simple filter for %s", entity_type.__name__)
            return SimpleFilter(tuple(group.operations))  # type: ignore[arg-type]
        logger.debug("Reconstructed complex filter for %s", entity_type.__name__)
        return ComplexFilter(group)

    def create(self, predicate: Predicate[T], entity_type: type[T]) -> Group | None:
        """Reconstruct the raw group; ``None`` when *predicate* matches all."""
        node = _prune(predicate)
        if node is None:
            return None
        if isinstance(node, AndPredicate | OrPredicate):
            return self._group(node, entity_type)
        return Group(
            operator=GroupOperator.AND,
            operations=[self._condition(node, entity_type)],
        )

    # -- structure -----------------------------------------------------------

    def _group(self, node: _Composite, entity_type: type[Any]) -> Group:
        op = _connective(node)
        children = list(node.predicates)

        right: Group | None = None
        last = children[-1]
        if isinstance(last, AndPredicate | OrPredicate) and _connective(last) is not op:
            right = self._group(last, entity_type)
            children.pop()

        operations, connectives = self._linearize(children, op, entity_type)
        uniform = all(c is op for c in connectives)
        return Group(
            operator=op,
            operations=operations,
            non_priority_operators=None if uniform else connectives,
            right_side_operands=right,
        )

    def _linearize(
        self,
        children: list[Predicate[Any]],
        op: GroupOperator,
        entity_type: type[Any],
    ) -> tuple[list[Condition | Group], list[GroupOperator]]:
        first, *rest = children
        if isinstance(first, AndPredicate | OrPredicate):
            operations, connectives = self._linearize(
                list(first.predicates), _connective(first), entity_type
            )
        else:
            operations, connectives = [self._condition(first, entity_type)], []

        pending = list(rest)
        while pending:
            child = pending.pop(0)
            if isinstance(child, AndPredicate | OrPredicate) and _connective(child) is op:
                # Same connective on the right: associative, splice in place
                pending[:0] = list(child.predicates)
                continue
            operations.append(self._operand(child, entity_type))
            connectives.append(op)
        return operations, connectives

    def _operand(self, node: Predicate[Any], entity_type: type[Any]) -> Condition | Group:
        if isinstance(node, AndPredicate | OrPredicate):
            return self._group(node, entity_type)
        return self._condition(node, entity_type)

    # -- leaves --------------------------------------------------------------

    def _condition(self, node: Predicate[Any], entity_type: type[Any]) -> Condition:
        negated = False
        if isinstance(node, NotPredicate):
            negated = True
            node = node.predicate
        if not isinstance(node, FieldPredicate):
            raise UnsupportedPredicateShapeError(
                f"Cannot express {type(node).__name__} as a filter condition",
                node=node,
            )

        op = node.op
        if negated:
            inverted = NEGATED_OPERATORS.get(op)
            if inverted is None:
                raise UnsupportedPredicateShapeError(
                    f"Negated operator '{op.value}' has no filter equivalent",
                    node=node,
                )
            op = inverted

        operator = FROM_PREDICATE_OPERATOR.get(op)
        if operator is None:
            raise UnsupportedPredicateShapeError(
                f"Operator '{op.value}' on field '{node.field}' has no filter equivalent",
                node=node,
            )
        if self._schema is not None:
            self._schema.resolve_field_type(entity_type, node.field)

        return Condition(
            field=node.field,
            operator=operator,
            value=_condition_value(operator, node.value),
        )


def _prune(node: Predicate[Any]) -> Predicate[Any] | None:
    """
    Normalise a tree before reconstruction; ``None`` stands for match-all.

    Match-all is the identity of AND and absorbs OR; single-child
    composites collapse to their child; double negation cancels.
    """
    if isinstance(node, MatchAllPredicate):
        return None
    if isinstance(node, AndPredicate):
        kept = [c for c in (_prune(p) for p in node.predicates) if c is not None]
        if not kept:
            return None
        return kept[0] if len(kept) == 1 else AndPredicate(*kept)
    if isinstance(node, OrPredicate):
        if not node.predicates:
            raise UnsupportedPredicateShapeError("Empty OR matches nothing", node=node)
        pruned = [_prune(p) for p in node.predicates]
        if any(c is None for c in pruned):
            return None
        kept = [c for c in pruned if c is not None]
        return kept[0] if len(kept) == 1 else OrPredicate(*kept)
    if isinstance(node, NotPredicate):
        inner = node.predicate
        if isinstance(inner, NotPredicate):
            return _prune(inner.predicate)
        pruned_inner = _prune(inner)
        if pruned_inner is None:
            raise UnsupportedPredicateShapeError(
                "Negated match-all matches nothing", node=node
            )
        if not isinstance(pruned_inner, FieldPredicate):
            raise UnsupportedPredicateShapeError(
                "Only single conditions can be negated", node=node
            )
        return NotPredicate(pruned_inner)
    if isinstance(node, FieldPredicate):
        return node
    raise UnsupportedPredicateShapeError(
        f"Unsupported predicate node: {type(node).__name__}", node=node
    )


def _connective(node: _Composite) -> GroupOperator:
    return GroupOperator.AND if isinstance(node, AndPredicate) else GroupOperator.OR


def _is_flat(group: Group) -> bool:
    return (
        group.non_priority_operators is None
        and group.right_side_operands is None
        and group.operator is GroupOperator.AND
        and all(isinstance(op, Condition) for op in group.operations)
    )


def _condition_value(operator: FilterOperator, value: Any) -> Any:
    if operator in (FilterOperator.IS_NULL, FilterOperator.IS_NOT_NULL):
        return None
    if isinstance(value, list | tuple | set | frozenset):
        return list(value)
    return value
