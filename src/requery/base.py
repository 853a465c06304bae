from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

T = TypeVar("T", contravariant=True)

# Logical node keys used by ``to_dict()``
LOGICAL_AND = "and"
LOGICAL_OR = "or"
LOGICAL_NOT = "not"


class Predicate(ABC, Generic[T]):
    """Composable boolean expression with logic operator support."""

    @abstractmethod
    def is_satisfied_by(self, candidate: T) -> bool:
        """Evaluate the predicate against an in-memory candidate."""
        ...

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """
        Return a dictionary representation of the predicate.

        The shape (``op``/``attr``/``val`` leaves, ``op``/``conditions``
        composites) is what the SQL compiler walks.
        """
        ...

    def is_unknown_for(self, candidate: T) -> bool:
        """True when SQL three-valued logic yields NULL for *candidate*."""
        return False

    def __and__(self, other: Predicate[T]) -> Predicate[T]:
        return AndPredicate(self, other)

    def __or__(self, other: Predicate[T]) -> Predicate[T]:
        return OrPredicate(self, other)

    def __invert__(self) -> Predicate[T]:
        return NotPredicate(self)

    def merge(self, other: Predicate[T]) -> Predicate[T]:
        """Merge with another predicate using logical AND."""
        return self & other


class MatchAllPredicate(Predicate[T]):
    """Identity predicate: matches every candidate."""

    def is_satisfied_by(self, candidate: T) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        return {"op": LOGICAL_AND, "conditions": []}

    def __and__(self, other: Predicate[T]) -> Predicate[T]:
        return other

    def __or__(self, other: Predicate[T]) -> Predicate[T]:
        return self


class AndPredicate(Predicate[T]):
    """Logical AND composite predicate."""

    def __init__(self, *predicates: Predicate[T]) -> None:
        self.predicates = predicates

    def is_satisfied_by(self, candidate: T) -> bool:
        return all(p.is_satisfied_by(candidate) for p in self.predicates)

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": LOGICAL_AND,
            "conditions": [p.to_dict() for p in self.predicates],
        }


class OrPredicate(Predicate[T]):
    """Logical OR composite predicate."""

    def __init__(self, *predicates: Predicate[T]) -> None:
        self.predicates = predicates

    def is_satisfied_by(self, candidate: T) -> bool:
        return any(p.is_satisfied_by(candidate) for p in self.predicates)

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": LOGICAL_OR,
            "conditions": [p.to_dict() for p in self.predicates],
        }


class NotPredicate(Predicate[T]):
    """Logical NOT composite predicate."""

    def __init__(self, predicate: Predicate[T]) -> None:
        self.predicate = predicate

    def is_satisfied_by(self, candidate: T) -> bool:
        # NOT NULL is NULL, which filters the row out
        if self.predicate.is_unknown_for(candidate):
            return False
        return not self.predicate.is_satisfied_by(candidate)

    def is_unknown_for(self, candidate: T) -> bool:
        return self.predicate.is_unknown_for(candidate)

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": LOGICAL_NOT,
            "conditions": [self.predicate.to_dict()],
        }
