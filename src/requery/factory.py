"""
Filter facade.

``DefaultFilterFactory`` is the single entry point: DSL → predicate,
predicate → DSL, and assembly of outbound requests that carry a filter on
to another service.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar

from .config import DEFAULT_CONFIG, FilterConfig
from .converter import PredicateConverter
from .reverse import ReversePredicateFactory
from .syntax import JsonFilterSyntax

if TYPE_CHECKING:
    from .base import Predicate
    from .evaluator import MemoryOperatorRegistry
    from .model import FilterWrapper
    from .schema import SchemaRegistry

T = TypeVar("T")
B = TypeVar("B")


class HttpMethod(str, Enum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"


@dataclass(frozen=True)
class RequestEntity(Generic[B]):
    """Outbound request data: body, headers, method, target and body type."""

    body: B | None
    method: HttpMethod
    url: str
    headers: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    body_type: Any = None


class FilterFactory(Protocol):
    def to_predicate(
        self, wrapper: FilterWrapper[Any], entity_type: type[T]
    ) -> Predicate[T]: ...

    def to_wrapper(
        self, predicate: Predicate[T], entity_type: type[T]
    ) -> FilterWrapper[Predicate[T]]: ...

    def to_request_entity(
        self,
        body: B | None,
        headers: Mapping[str, str | Sequence[str]] | None,
        method: HttpMethod | str,
        url: str,
        body_type: Any = None,
    ) -> RequestEntity[B]: ...


class DefaultFilterFactory:
    """Compose the forward converter and the reverse factory."""

    def __init__(
        self,
        converter: PredicateConverter,
        reverse_factory: ReversePredicateFactory,
        *,
        syntax: JsonFilterSyntax | None = None,
        config: FilterConfig | None = None,
    ) -> None:
        self._converter = converter
        self._reverse_factory = reverse_factory
        self._config = config or DEFAULT_CONFIG
        self._syntax = syntax or JsonFilterSyntax(self._config)

    @classmethod
    def create(
        cls,
        schema: SchemaRegistry,
        *,
        config: FilterConfig | None = None,
        registry: MemoryOperatorRegistry | None = None,
    ) -> DefaultFilterFactory:
        """Wire the default converter and reverse factory around *schema*."""
        return cls(
            PredicateConverter(schema, registry=registry),
            ReversePredicateFactory(schema),
            config=config,
        )

    def to_predicate(
        self, wrapper: FilterWrapper[Any], entity_type: type[T]
    ) -> Predicate[T]:
        return self._converter.build_predicate(wrapper, entity_type)

    def to_wrapper(
        self, predicate: Predicate[T], entity_type: type[T]
    ) -> FilterWrapper[Predicate[T]]:
        return self._reverse_factory.build_dsl(predicate, entity_type)

    def to_request_entity(
        self,
        body: B | None,
        headers: Mapping[str, str | Sequence[str]] | None,
        method: HttpMethod | str,
        url: str,
        body_type: Any = None,
    ) -> RequestEntity[B]:
        normalized = {
            name: (value,) if isinstance(value, str) else tuple(value)
            for name, value in (headers or {}).items()
        }
        return RequestEntity(
            body=body,
            method=HttpMethod(method.upper()) if isinstance(method, str) else method,
            url=url,
            headers=normalized,
            body_type=body_type,
        )

    def filter_query_params(self, wrapper: FilterWrapper[Any]) -> dict[str, str]:
        """Query parameters that carry *wrapper* to a service using this library."""
        dumped = self._syntax.dump(wrapper)
        if dumped is None:
            return {}
        param = wrapper.resolve(
            lambda _conditions: self._config.filter_param,
            lambda _group: self._config.complex_filter_param,
            lambda: self._config.filter_param,
        )
        return {param: dumped}
