from .adapter import HttpFilterAdapter, JsonHttpFilterAdapter
from .base import (
    AndPredicate,
    MatchAllPredicate,
    NotPredicate,
    OrPredicate,
    Predicate,
)
from .coercion import coerce_value
from .config import DEFAULT_CONFIG, FilterConfig
from .converter import PredicateConverter
from .evaluator import (
    DEFAULT_MEMORY_REGISTRY,
    MEMORY_OPERATORS,
    MemoryOperatorRegistry,
)
from .exceptions import (
    ConversionError,
    FilterError,
    FilterParseError,
    RelationshipTraversalError,
    TypeCoercionError,
    UnknownFieldError,
    UnknownOperatorError,
    UnsupportedOperatorArityError,
    UnsupportedPredicateShapeError,
)
from .factory import (
    DefaultFilterFactory,
    FilterFactory,
    HttpMethod,
    RequestEntity,
)
from .field import FieldPredicate
from .model import (
    ComplexFilter,
    Condition,
    EmptyFilter,
    FilterWrapper,
    Group,
    SimpleFilter,
)
from .operators import FilterOperator, GroupOperator, PredicateOperator
from .resolver import FilterResolver
from .reverse import ReversePredicateFactory
from .schema import Relationship, SchemaRegistry
from .syntax import JsonFilterSyntax

__all__ = [
    # DSL model
    "Condition",
    "Group",
    "FilterWrapper",
    "EmptyFilter",
    "SimpleFilter",
    "ComplexFilter",
    "FilterOperator",
    "GroupOperator",
    # Predicates
    "Predicate",
    "AndPredicate",
    "OrPredicate",
    "NotPredicate",
    "MatchAllPredicate",
    "FieldPredicate",
    "PredicateOperator",
    # In-memory evaluation
    "MemoryOperatorRegistry",
    "MEMORY_OPERATORS",
    "DEFAULT_MEMORY_REGISTRY",
    # Schema
    "SchemaRegistry",
    "Relationship",
    "coerce_value",
    # Conversion
    "PredicateConverter",
    "ReversePredicateFactory",
    "DefaultFilterFactory",
    "FilterFactory",
    "HttpMethod",
    "RequestEntity",
    # Boundary
    "JsonFilterSyntax",
    "HttpFilterAdapter",
    "JsonHttpFilterAdapter",
    "FilterResolver",
    # Configuration
    "FilterConfig",
    "DEFAULT_CONFIG",
    # Exceptions
    "FilterError",
    "FilterParseError",
    "UnknownOperatorError",
    "ConversionError",
    "UnknownFieldError",
    "RelationshipTraversalError",
    "TypeCoercionError",
    "UnsupportedOperatorArityError",
    "UnsupportedPredicateShapeError",
]
