"""
In-memory operator evaluation.

Every :class:`PredicateOperator` maps to a function
``(field_value, condition_value) -> bool`` in ``MEMORY_OPERATORS``.
Comparisons follow SQL NULL semantics: a ``None`` field value never
satisfies anything but ``is_null``.

A :class:`MemoryOperatorRegistry` starts from that table; entries can be
overridden or removed per registry::

    registry = MemoryOperatorRegistry()
    registry.register(PredicateOperator.EQ, lambda a, b: str(a).lower() == b)
"""

from __future__ import annotations

import operator as op_module
from collections.abc import Callable, Mapping
from typing import Any

from .operators import PredicateOperator

MemoryEvaluator = Callable[[Any, Any], bool]


def _known(compare: Callable[[Any, Any], Any]) -> MemoryEvaluator:
    def evaluate(field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        return bool(compare(field_value, condition_value))

    return evaluate


def _between(field_value: Any, bounds: Any) -> bool:
    low, high = bounds
    return bool(low <= field_value <= high)


def _contains(field_value: Any, fragment: Any) -> bool:
    return str(fragment) in str(field_value)


MEMORY_OPERATORS: Mapping[PredicateOperator, MemoryEvaluator] = {
    PredicateOperator.EQ: lambda actual, expected: bool(actual == expected),
    PredicateOperator.NE: _known(op_module.ne),
    PredicateOperator.GT: _known(op_module.gt),
    PredicateOperator.GE: _known(op_module.ge),
    PredicateOperator.LT: _known(op_module.lt),
    PredicateOperator.LE: _known(op_module.le),
    PredicateOperator.IN: _known(lambda actual, options: actual in options),
    PredicateOperator.BETWEEN: _known(_between),
    PredicateOperator.CONTAINS: _known(_contains),
    PredicateOperator.IS_NULL: lambda actual, _: actual is None,
    PredicateOperator.IS_NOT_NULL: lambda actual, _: actual is not None,
}


class MemoryOperatorRegistry:
    """Evaluation functions keyed by :class:`PredicateOperator`."""

    def __init__(
        self, operators: Mapping[PredicateOperator, MemoryEvaluator] | None = None
    ) -> None:
        self._operators: dict[PredicateOperator, MemoryEvaluator] = dict(
            MEMORY_OPERATORS if operators is None else operators
        )

    def register(self, name: PredicateOperator, evaluate: MemoryEvaluator) -> None:
        self._operators[name] = evaluate

    def unregister(self, name: PredicateOperator) -> None:
        self._operators.pop(name, None)

    def get(self, name: PredicateOperator) -> MemoryEvaluator | None:
        return self._operators.get(name)

    def has(self, name: PredicateOperator) -> bool:
        return name in self._operators

    @property
    def supported_operators(self) -> set[PredicateOperator]:
        return set(self._operators)

    def evaluate(
        self,
        name: PredicateOperator,
        field_value: Any,
        condition_value: Any,
    ) -> bool:
        """
        Look up the operator and evaluate.

        Raises:
            ValueError: If the operator is not registered.
        """
        evaluate = self._operators.get(name)
        if evaluate is None:
            raise ValueError(f"Unsupported operator for in-memory evaluation: {name}")
        return evaluate(field_value, condition_value)


DEFAULT_MEMORY_REGISTRY: MemoryOperatorRegistry = MemoryOperatorRegistry()
