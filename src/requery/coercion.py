"""
Literal coercion against a field's declared type.

Unlike a best-effort cast, every mismatch raises
:class:`~requery.exceptions.TypeCoercionError` so that a filter never
silently compares a column against a value of the wrong type.
"""

from __future__ import annotations

import datetime
import uuid as uuid_module
from decimal import Decimal
from enum import Enum
from typing import Any

from .exceptions import TypeCoercionError

_TRUE_STRINGS = frozenset({"true", "1", "yes"})
_FALSE_STRINGS = frozenset({"false", "0", "no"})


def coerce_value(value: Any, value_type: type, *, field: str | None = None) -> Any:
    """
    Coerce a single filter literal to *value_type*.

    Raises:
        TypeCoercionError: If the literal cannot represent a *value_type*.
    """
    if isinstance(value, dict | list | tuple | set):
        raise TypeCoercionError(value, value_type, field)
    try:
        return _coerce(value, value_type)
    except (TypeError, ValueError, ArithmeticError) as exc:
        raise TypeCoercionError(value, value_type, field) from exc


def _coerce(value: Any, vt: type) -> Any:
    if vt is bool:
        return _to_bool(value)
    if issubclass(vt, Enum):
        return _to_enum(value, vt)
    # datetime is a date subclass; check it first
    if vt is datetime.datetime:
        return _to_datetime(value)
    if vt is datetime.date:
        return _to_date(value)
    if vt is datetime.time:
        return _to_time(value)
    if vt is int:
        return _to_int(value)
    if vt is float:
        return _to_float(value)
    if vt is Decimal:
        return _to_decimal(value)
    if vt is str:
        return _to_str(value)
    if vt is uuid_module.UUID:
        return _to_uuid(value)
    if isinstance(value, vt):
        return value
    return vt(value)


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        low = value.strip().lower()
        if low in _TRUE_STRINGS:
            return True
        if low in _FALSE_STRINGS:
            return False
    raise ValueError(f"Not a boolean: {value!r}")


def _to_enum(value: Any, vt: type[Enum]) -> Enum:
    if isinstance(value, vt):
        return value
    try:
        return vt(value)
    except ValueError:
        if isinstance(value, str) and value in vt.__members__:
            return vt[value]
        raise


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError("bool is not an integer literal")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"Not an integral number: {value!r}")
        return int(value)
    if isinstance(value, Decimal):
        if value != value.to_integral_value():
            raise ValueError(f"Not an integral number: {value!r}")
        return int(value)
    if isinstance(value, str):
        return int(value.strip())
    raise TypeError(f"Cannot read an integer from {type(value).__name__}")


def _to_float(value: Any) -> float:
    if isinstance(value, bool):
        raise TypeError("bool is not a numeric literal")
    if isinstance(value, int | float | Decimal | str):
        return float(value)
    raise TypeError(f"Cannot read a float from {type(value).__name__}")


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise TypeError("bool is not a numeric literal")
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, int | Decimal):
        return Decimal(value)
    if isinstance(value, str):
        return Decimal(value.strip())
    raise TypeError(f"Cannot read a decimal from {type(value).__name__}")


def _to_str(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        raise TypeError("bool is not a string literal")
    if isinstance(value, int | float | Decimal | uuid_module.UUID):
        return str(value)
    raise TypeError(f"Cannot read a string from {type(value).__name__}")


def _to_datetime(value: Any) -> datetime.datetime:
    if isinstance(value, datetime.datetime):
        result = value
    elif isinstance(value, str):
        result = datetime.datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    else:
        raise TypeError(f"Cannot read a datetime from {type(value).__name__}")
    if result.tzinfo is not None:
        result = result.astimezone(datetime.timezone.utc)
    return result


def _to_date(value: Any) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        return datetime.date.fromisoformat(value.strip())
    raise TypeError(f"Cannot read a date from {type(value).__name__}")


def _to_time(value: Any) -> datetime.time:
    if isinstance(value, datetime.time):
        return value
    if isinstance(value, str):
        return datetime.time.fromisoformat(value.strip())
    raise TypeError(f"Cannot read a time from {type(value).__name__}")


def _to_uuid(value: Any) -> uuid_module.UUID:
    if isinstance(value, uuid_module.UUID):
        return value
    if isinstance(value, str):
        return uuid_module.UUID(value.strip())
    raise TypeError(f"Cannot read a UUID from {type(value).__name__}")
