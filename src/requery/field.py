from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, TypeVar

from .base import Predicate
from .evaluator import DEFAULT_MEMORY_REGISTRY
from .operators import NULL_CHECK_OPERATORS, PredicateOperator

if TYPE_CHECKING:
    from .evaluator import MemoryOperatorRegistry

T = TypeVar("T", contravariant=True)


class FieldPredicate(Predicate[T]):
    """
    Leaf predicate comparing a single field against a value.

    Delegates in-memory evaluation to a :class:`MemoryOperatorRegistry`.
    Falls back to the default registry when none is injected.
    """

    def __init__(
        self,
        field: str,
        op: PredicateOperator | str,
        value: Any = None,
        *,
        registry: MemoryOperatorRegistry | None = None,
    ) -> None:
        self.field = field
        self.op = PredicateOperator(op)
        self.value = value
        self._registry = registry if registry is not None else DEFAULT_MEMORY_REGISTRY

    def is_satisfied_by(self, candidate: T) -> bool:
        actual, many = self._resolve_field(candidate, self.field)
        if many:
            return any(
                self._registry.evaluate(self.op, item, self.value) for item in actual
            )
        return self._registry.evaluate(self.op, actual, self.value)

    def is_unknown_for(self, candidate: T) -> bool:
        """
        True when SQL would evaluate this leaf to NULL for *candidate*.

        That is a comparison against a single missing value; null checks
        and collection traversals (``EXISTS``) are always known.
        """
        if self.op in NULL_CHECK_OPERATORS:
            return False
        actual, many = self._resolve_field(candidate, self.field)
        return not many and actual is None

    # -- field resolution ----------------------------------------------------

    @staticmethod
    def _resolve_field(obj: Any, field_path: str) -> tuple[Any, bool]:
        """
        Resolve a dot-separated field path on *obj*.

        Supports nested attribute access (``address.city``) and implicit
        list traversal (``orders.total`` where ``orders`` is a list). The
        second element of the result tells whether a collection was
        traversed, in which case the first element is the list of values.
        A missing to-one link resolves to ``None``.
        """
        current: list[Any] = [obj]
        many = False
        for part in field_path.split("."):
            resolved: list[Any] = []
            for item in current:
                if item is None:
                    value = None
                elif isinstance(item, Mapping):
                    value = item.get(part)
                else:
                    value = getattr(item, part, None)
                if isinstance(value, list | tuple):
                    many = True
                    resolved.extend(value)
                else:
                    resolved.append(value)
            current = resolved
        if many:
            return current, True
        return current[0], False

    # -- serialisation -------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": self.op.value,
            "attr": self.field,
            "val": self.value,
        }
