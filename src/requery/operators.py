from __future__ import annotations

from enum import Enum


class PredicateOperator(str, Enum):
    """Operators understood by predicate leaves."""

    # Standard comparison
    EQ = "="
    NE = "!="
    GT = ">"
    GE = ">="
    LT = "<"
    LE = "<="

    # Set / range
    IN = "in"
    BETWEEN = "between"

    # String
    CONTAINS = "contains"

    # Null checks
    IS_NULL = "is_null"
    IS_NOT_NULL = "is_not_null"


class FilterOperator(str, Enum):
    """Operators accepted in a filter DSL condition."""

    EQ = "eq"
    NE = "ne"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    LIKE = "like"
    IN = "in"
    BETWEEN = "between"
    IS_NULL = "is_null"
    IS_NOT_NULL = "is_not_null"


class GroupOperator(str, Enum):
    """Connective joining the operations of a group."""

    AND = "AND"
    OR = "OR"


# Map common spellings to FilterOperator values
OPERATOR_ALIASES: dict[str, FilterOperator] = {
    "=": FilterOperator.EQ,
    "==": FilterOperator.EQ,
    "!=": FilterOperator.NE,
    "<>": FilterOperator.NE,
    ">": FilterOperator.GT,
    ">=": FilterOperator.GTE,
    "ge": FilterOperator.GTE,
    "<": FilterOperator.LT,
    "<=": FilterOperator.LTE,
    "le": FilterOperator.LTE,
    "contains": FilterOperator.LIKE,
    "null": FilterOperator.IS_NULL,
    "isnull": FilterOperator.IS_NULL,
    "not_null": FilterOperator.IS_NOT_NULL,
    "isnotnull": FilterOperator.IS_NOT_NULL,
}

# (min, max) number of literals; None means unbounded
OPERATOR_ARITY: dict[FilterOperator, tuple[int, int | None]] = {
    FilterOperator.EQ: (1, 1),
    FilterOperator.NE: (1, 1),
    FilterOperator.GT: (1, 1),
    FilterOperator.GTE: (1, 1),
    FilterOperator.LT: (1, 1),
    FilterOperator.LTE: (1, 1),
    FilterOperator.LIKE: (1, 1),
    FilterOperator.IN: (1, None),
    FilterOperator.BETWEEN: (2, 2),
    FilterOperator.IS_NULL: (0, 0),
    FilterOperator.IS_NOT_NULL: (0, 0),
}

TO_PREDICATE_OPERATOR: dict[FilterOperator, PredicateOperator] = {
    FilterOperator.EQ: PredicateOperator.EQ,
    FilterOperator.NE: PredicateOperator.NE,
    FilterOperator.GT: PredicateOperator.GT,
    FilterOperator.GTE: PredicateOperator.GE,
    FilterOperator.LT: PredicateOperator.LT,
    FilterOperator.LTE: PredicateOperator.LE,
    FilterOperator.LIKE: PredicateOperator.CONTAINS,
    FilterOperator.IN: PredicateOperator.IN,
    FilterOperator.BETWEEN: PredicateOperator.BETWEEN,
    FilterOperator.IS_NULL: PredicateOperator.IS_NULL,
    FilterOperator.IS_NOT_NULL: PredicateOperator.IS_NOT_NULL,
}

FROM_PREDICATE_OPERATOR: dict[PredicateOperator, FilterOperator] = {
    v: k for k, v in TO_PREDICATE_OPERATOR.items()
}

# Two-valued under SQL NULL logic; every other operator is unknown on NULL
NULL_CHECK_OPERATORS: frozenset[PredicateOperator] = frozenset(
    {PredicateOperator.IS_NULL, PredicateOperator.IS_NOT_NULL}
)

# Negations that stay inside the DSL enumeration. Under SQL NULL logic
# NOT (f = x) and f != x agree, NULL rows being rejected by both.
NEGATED_OPERATORS: dict[PredicateOperator, PredicateOperator] = {
    PredicateOperator.EQ: PredicateOperator.NE,
    PredicateOperator.NE: PredicateOperator.EQ,
    PredicateOperator.IS_NULL: PredicateOperator.IS_NOT_NULL,
    PredicateOperator.IS_NOT_NULL: PredicateOperator.IS_NULL,
}


def normalize_operator(raw: str) -> str:
    """Lower-case *raw* and resolve aliases to a ``FilterOperator`` value."""
    key = raw.strip().lower()
    alias = OPERATOR_ALIASES.get(key)
    return alias.value if alias is not None else key
