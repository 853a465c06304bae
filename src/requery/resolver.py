"""FilterResolver — pick an adapter for a request and build its predicate."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, TypeVar

from .model import EmptyFilter, FilterWrapper

if TYPE_CHECKING:
    from .adapter import HttpFilterAdapter
    from .base import Predicate
    from .factory import FilterFactory

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FilterResolver:
    """
    Resolve the filter of an inbound request into a predicate.

    Adapters are tried in order; the first whose ``supports`` returns True
    adapts the request. A request no adapter supports has no filter.
    """

    def __init__(
        self,
        adapters: Sequence[HttpFilterAdapter],
        factory: FilterFactory,
    ) -> None:
        self._adapters = tuple(adapters)
        self._factory = factory

    def resolve_wrapper(self, request: Any) -> FilterWrapper[Any]:
        logger.debug(
            "%d active adapters will be tested against the request",
            len(self._adapters),
        )
        for adapter in self._adapters:
            name = type(adapter).__name__
            logger.debug("Invoking %s.supports", name)
            if adapter.supports(request):
                logger.debug("%s supports this request and will adapt it", name)
                return adapter.adapt(request)
        return EmptyFilter()

    def resolve(self, request: Any, entity_type: type[T]) -> Predicate[T]:
        return self._factory.to_predicate(self.resolve_wrapper(request), entity_type)
