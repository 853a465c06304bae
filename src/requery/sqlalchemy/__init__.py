"""
Predicate-to-SQLAlchemy compilation.

Public API:
    - ``compile_predicate(model, predicate)`` — compile a predicate to a
      ``ColumnElement[bool]``
    - ``apply_predicate(stmt, model, predicate)`` — add it to a ``Select``
    - ``register_model(schema, model)`` / ``fields_from_model(model)`` —
      derive the static field table from a mapped model
    - ``SQLAlchemyOperatorRegistry`` / ``DEFAULT_SQLA_REGISTRY`` — the
      operator → clause table, overridable per call
"""

from .compiler import apply_predicate, compile_predicate
from .operators import DEFAULT_SQLA_REGISTRY, SQLA_OPERATORS, SQLAlchemyOperatorRegistry
from .schema import fields_from_model, register_model

__all__ = [
    "compile_predicate",
    "apply_predicate",
    "fields_from_model",
    "register_model",
    "DEFAULT_SQLA_REGISTRY",
    "SQLA_OPERATORS",
    "SQLAlchemyOperatorRegistry",
]
