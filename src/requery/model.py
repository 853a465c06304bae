"""
Filter DSL model.

``Condition`` is a single field/operator/value unit, ``Group`` a logical
combination of conditions and nested groups. ``FilterWrapper`` is the sum
type over the three shapes a filter can take: nothing, a flat list of
conditions (implicitly AND-combined) or a single group.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .operators import FilterOperator, GroupOperator, normalize_operator

T = TypeVar("T")
R = TypeVar("R")


class Condition(BaseModel):
    """One filter unit: ``field`` compared to ``value`` using ``operator``."""

    model_config = ConfigDict(frozen=True)

    field: str = Field(min_length=1)
    operator: FilterOperator
    value: Any = None

    @field_validator("operator", mode="before")
    @classmethod
    def _normalize_operator(cls, v: Any) -> Any:
        if isinstance(v, str):
            return normalize_operator(v)
        return v

    @property
    def values(self) -> tuple[Any, ...]:
        """The supplied literals; ``None`` means none were supplied."""
        if self.value is None:
            return ()
        if isinstance(self.value, list | tuple):
            return tuple(self.value)
        return (self.value,)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class Group(BaseModel):
    """
    Logical grouping of conditions and nested groups.

    ``non_priority_operators`` and ``right_side_operands`` are
    reconstruction artifacts written by the reverse factory when a predicate
    tree does not fold into one uniform connective:

    - ``non_priority_operators[i]`` joins the result accumulated so far with
      ``operations[i + 1]`` (left-to-right fold);
    - ``right_side_operands`` is joined to the folded operations with
      ``operator``.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    operator: GroupOperator
    operations: list[Condition | Group] = Field(min_length=1)
    non_priority_operators: list[GroupOperator] | None = None
    right_side_operands: Group | None = None

    @field_validator("operator", mode="before")
    @classmethod
    def _normalize_operator(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("non_priority_operators", mode="before")
    @classmethod
    def _normalize_connectives(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [c.strip().upper() if isinstance(c, str) else c for c in v]
        return v

    @model_validator(mode="after")
    def _check_connective_count(self) -> Group:
        if (
            self.non_priority_operators is not None
            and len(self.non_priority_operators) != len(self.operations) - 1
        ):
            raise ValueError(
                "nonPriorityOperators must have exactly one connective per "
                f"adjacent pair of operations ({len(self.operations) - 1}), "
                f"got {len(self.non_priority_operators)}"
            )
        return self

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


Group.model_rebuild()


class FilterWrapper(ABC, Generic[T]):
    """Tagged container: empty, simple (flat conditions) or complex (group).

    ``T`` is the predicate type the filter converts to; it is not stored.
    """

    @abstractmethod
    def resolve(
        self,
        on_simple: Callable[[Sequence[Condition]], R],
        on_complex: Callable[[Group], R],
        on_empty: Callable[[], R],
    ) -> R:
        """Dispatch to the callback matching this variant."""
        ...

    @property
    def is_empty(self) -> bool:
        return False

    def to_json_value(self) -> Any:
        """DSL value for re-serialisation; ``None`` when empty."""
        return self.resolve(
            lambda conditions: [c.to_dict() for c in conditions],
            lambda group: group.to_dict(),
            lambda: None,
        )


@dataclass(frozen=True)
class EmptyFilter(FilterWrapper[T]):
    """No filter was supplied."""

    def resolve(
        self,
        on_simple: Callable[[Sequence[Condition]], R],
        on_complex: Callable[[Group], R],
        on_empty: Callable[[], R],
    ) -> R:
        return on_empty()

    @property
    def is_empty(self) -> bool:
        return True


@dataclass(frozen=True)
class SimpleFilter(FilterWrapper[T]):
    """Flat, ordered, implicitly AND-combined conditions."""

    conditions: tuple[Condition, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "conditions", tuple(self.conditions))

    def resolve(
        self,
        on_simple: Callable[[Sequence[Condition]], R],
        on_complex: Callable[[Group], R],
        on_empty: Callable[[], R],
    ) -> R:
        return on_simple(self.conditions)


@dataclass(frozen=True)
class ComplexFilter(FilterWrapper[T]):
    """A single, possibly nested, group."""

    group: Group

    def resolve(
        self,
        on_simple: Callable[[Sequence[Condition]], R],
        on_complex: Callable[[Group], R],
        on_empty: Callable[[], R],
    ) -> R:
        return on_complex(self.group)
