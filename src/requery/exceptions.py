"""
Filter exception hierarchy with fuzzy-match suggestions.

All exceptions inherit from ``FilterError`` and provide ``to_dict()`` for
API-friendly error responses. Failures while building a predicate or a DSL
tree are ``ConversionError`` subclasses so callers can catch them as one.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class FilterError(Exception):
    """Base exception for all filter errors."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class FilterParseError(FilterError):
    """Filter DSL input is malformed."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.message = message
        self.path = path
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "FILTER_PARSE_ERROR",
            "message": self.message,
            "path": self.path,
        }


class UnknownOperatorError(FilterParseError):
    """
    Unknown DSL operator.

    Provides fuzzy-matched suggestions for likely intended operators.
    """

    def __init__(
        self,
        operator: str,
        valid_operators: list[str],
        path: str | None = None,
    ) -> None:
        self.operator = operator
        self.valid_operators = valid_operators
        self.suggestions = get_close_matches(operator, valid_operators, n=3, cutoff=0.6)

        message = f"Unknown operator: '{operator}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        message += f" Valid operators: {', '.join(sorted(valid_operators))}"
        super().__init__(message, path=path)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "OPERATOR_NOT_FOUND",
            "operator": self.operator,
            "suggestions": self.suggestions,
            "valid_operators": sorted(self.valid_operators),
            "path": self.path,
        }


class ConversionError(FilterError):
    """Base for failures converting between DSL and predicate trees."""


class UnknownFieldError(ConversionError):
    """
    Field is not a declared, filterable attribute of the entity.

    Example error message::

        Invalid field 'nme' on 'Person'.
        Did you mean one of these?
          • name

        Available fields: age, name, status
    """

    def __init__(
        self,
        invalid_field: str,
        entity_name: str,
        available_fields: list[str],
        full_path: str | None = None,
        cutoff: float = 0.6,
    ) -> None:
        self.invalid_field = invalid_field
        self.entity_name = entity_name
        self.available_fields = available_fields
        self.full_path = full_path or invalid_field

        self.suggestions = get_close_matches(
            invalid_field, available_fields, n=5, cutoff=cutoff
        )

        super().__init__(self._build_message())

    def _build_message(self) -> str:
        lines = [f"Invalid field '{self.invalid_field}' on '{self.entity_name}'."]
        if self.suggestions:
            lines.append("Did you mean one of these?")
            for s in self.suggestions:
                lines.append(f"  • {s}")

        sorted_fields = sorted(self.available_fields)
        preview = ", ".join(sorted_fields[:15])
        if len(sorted_fields) > 15:
            preview += ", ..."
        lines.append(f"Available fields: {preview}")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "FIELD_NOT_FOUND",
            "field": self.invalid_field,
            "entity": self.entity_name,
            "full_path": self.full_path,
            "suggestions": self.suggestions,
            "available_fields": sorted(self.available_fields),
        }


class RelationshipTraversalError(UnknownFieldError):
    """
    A dotted path tries to traverse a scalar field.

    Happens when a path like ``name.something`` is used, but ``name`` is a
    scalar, not a relationship to another entity.
    """

    def __init__(
        self,
        field: str,
        entity_name: str,
        full_path: str | None = None,
    ) -> None:
        self.field = field
        super().__init__(field, entity_name, [], full_path=full_path)

    def _build_message(self) -> str:
        return (
            f"Cannot traverse '{self.field}' on '{self.entity_name}': "
            f"it is not a relationship. Full path: '{self.full_path}'"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "RELATIONSHIP_TRAVERSAL_ERROR",
            "field": self.field,
            "entity": self.entity_name,
            "full_path": self.full_path,
        }


class TypeCoercionError(ConversionError):
    """A literal cannot be converted to the field's declared type."""

    def __init__(self, value: Any, value_type: type, field: str | None = None) -> None:
        self.value = value
        self.value_type = value_type
        self.field = field
        target = f" for field '{field}'" if field else ""
        super().__init__(
            f"Cannot coerce {value!r} to {value_type.__name__}{target}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "TYPE_COERCION_ERROR",
            "field": self.field,
            "value": repr(self.value),
            "type": self.value_type.__name__,
        }


class UnsupportedOperatorArityError(ConversionError):
    """The number of supplied literals does not fit the operator."""

    def __init__(self, operator: str, field: str, expected: str, actual: int) -> None:
        self.operator = operator
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Operator '{operator}' on field '{field}' expects {expected} "
            f"value(s), got {actual}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "OPERATOR_ARITY_ERROR",
            "operator": self.operator,
            "field": self.field,
            "expected": self.expected,
            "actual": self.actual,
        }


class UnsupportedPredicateShapeError(ConversionError):
    """A predicate node cannot be expressed in the filter DSL."""

    def __init__(self, message: str, node: Any = None) -> None:
        self.node = node
        super().__init__(message)
