"""JsonFilterSyntax — JSON filter DSL ↔ FilterWrapper."""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .config import DEFAULT_CONFIG, FilterConfig
from .exceptions import FilterParseError, UnknownOperatorError
from .model import ComplexFilter, Condition, EmptyFilter, FilterWrapper, Group, SimpleFilter
from .operators import FilterOperator, normalize_operator

_VALID_OPERATORS: frozenset[str] = frozenset(m.value for m in FilterOperator)


class JsonFilterSyntax:
    """
    Parse the JSON filter DSL.

    Simple form: ``{"field": ..., "operator": ..., "value": ...}`` or an
    array of such objects. Complex form: ``{"operator": "AND"|"OR",
    "operations": [...]}``, recursively. Input may be JSON text or an
    already-decoded value.
    """

    def __init__(self, config: FilterConfig | None = None) -> None:
        self._config = config or DEFAULT_CONFIG

    # -- parsing -------------------------------------------------------------

    def parse_simple(self, raw: Any) -> FilterWrapper[Any]:
        data = self._load(raw)
        if data is None:
            return EmptyFilter()
        if isinstance(data, dict):
            items: list[Any] = [data]
        elif isinstance(data, list):
            items = data
        else:
            raise FilterParseError(
                "Simple filter must be an object or an array of objects",
                path="<root>",
            )
        if not items:
            return EmptyFilter()
        return SimpleFilter(
            tuple(self._condition(item, f"<root>[{i}]") for i, item in enumerate(items))
        )

    def parse_complex(self, raw: Any) -> FilterWrapper[Any]:
        data = self._load(raw)
        if data is None:
            return EmptyFilter()
        return ComplexFilter(self._group(data, "<root>", depth=1))

    # -- serialisation -------------------------------------------------------

    def dump(self, wrapper: FilterWrapper[Any]) -> str | None:
        """Serialise *wrapper* back to DSL JSON; ``None`` when empty."""
        value = wrapper.to_json_value()
        if value is None:
            return None
        return json.dumps(value, separators=(",", ":"))

    # -- internals -----------------------------------------------------------

    def _load(self, raw: Any) -> Any:
        if raw is None:
            return None
        if isinstance(raw, str | bytes | bytearray):
            if not raw.strip():
                return None
            try:
                return json.loads(raw)
            except ValueError as exc:
                # JSONDecodeError, or UnicodeDecodeError for undecodable bytes
                raise FilterParseError(f"Invalid JSON: {exc}", path="<root>") from exc
        return raw

    def _condition(self, data: Any, path: str) -> Condition:
        if not isinstance(data, dict):
            raise FilterParseError(
                f"Expected a condition object, got {type(data).__name__}", path=path
            )
        raw_op = data.get("operator")
        if not raw_op or not isinstance(raw_op, str):
            raise FilterParseError("Missing or empty 'operator'", path=path)
        if normalize_operator(raw_op) not in _VALID_OPERATORS:
            raise UnknownOperatorError(raw_op, sorted(_VALID_OPERATORS), path=path)
        try:
            return Condition.model_validate(data)
        except PydanticValidationError as exc:
            raise FilterParseError(_describe(exc), path=path) from exc

    def _group(self, data: Any, path: str, depth: int) -> Group:
        if not isinstance(data, dict):
            raise FilterParseError(
                f"Expected a group object, got {type(data).__name__}", path=path
            )
        if depth > self._config.max_depth:
            raise FilterParseError(
                f"Group nesting exceeds the maximum depth of {self._config.max_depth}",
                path=path,
            )

        raw_operations = data.get("operations")
        if not isinstance(raw_operations, list) or not raw_operations:
            raise FilterParseError(
                "Group requires a non-empty 'operations' list", path=path
            )
        operations: list[Condition | Group] = []
        for idx, item in enumerate(raw_operations):
            child_path = f"{path}.operations[{idx}]"
            if isinstance(item, dict) and "operations" in item:
                operations.append(self._group(item, child_path, depth + 1))
            else:
                operations.append(self._condition(item, child_path))

        raw_right = data.get("rightSideOperands", data.get("right_side_operands"))
        right = (
            self._group(raw_right, f"{path}.rightSideOperands", depth + 1)
            if raw_right is not None
            else None
        )
        payload = {
            "operator": data.get("operator"),
            "operations": operations,
            "nonPriorityOperators": data.get(
                "nonPriorityOperators", data.get("non_priority_operators")
            ),
            "rightSideOperands": right,
        }
        try:
            return Group.model_validate(payload)
        except PydanticValidationError as exc:
            raise FilterParseError(_describe(exc), path=path) from exc


def _describe(exc: PydanticValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or '<value>'}: {err['msg']}"
        for err in exc.errors()
    )
