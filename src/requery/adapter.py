"""HttpFilterAdapter — read a filter DSL from an inbound request."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from .config import DEFAULT_CONFIG, FilterConfig
from .exceptions import FilterParseError
from .model import EmptyFilter, FilterWrapper
from .syntax import JsonFilterSyntax

logger = logging.getLogger(__name__)


@runtime_checkable
class HttpFilterAdapter(Protocol):
    """Select and parse the filter carried by a request."""

    def supports(self, request: Any) -> bool:
        """Return True if this adapter can read a filter from *request*."""
        ...

    def adapt(self, request: Any) -> FilterWrapper[Any]:
        """Parse the filter; never raises for malformed input."""
        ...


class JsonHttpFilterAdapter:
    """
    Read JSON filters from the ``filter`` / ``complexFilter`` query
    parameters (names come from :class:`FilterConfig`).

    *request* is either a mapping of query parameters or an object exposing
    one as ``query_params`` (Starlette / FastAPI requests do).
    """

    def __init__(
        self,
        syntax: JsonFilterSyntax | None = None,
        config: FilterConfig | None = None,
    ) -> None:
        self._config = config or DEFAULT_CONFIG
        self._syntax = syntax or JsonFilterSyntax(self._config)

    def supports(self, request: Any) -> bool:
        params = query_params(request)
        return (
            params.get(self._config.filter_param) is not None
            or params.get(self._config.complex_filter_param) is not None
        )

    def adapt(self, request: Any) -> FilterWrapper[Any]:
        params = query_params(request)
        filter_json = params.get(self._config.filter_param)
        complex_filter_json = params.get(self._config.complex_filter_param)

        try:
            if filter_json is not None:
                return self._syntax.parse_simple(filter_json)
            if complex_filter_json is not None:
                return self._syntax.parse_complex(complex_filter_json)
            return EmptyFilter()
        except FilterParseError:
            logger.exception("Ignoring malformed filter in request")
            return EmptyFilter()


def query_params(request: Any) -> Mapping[str, Any]:
    """Return the query-parameter mapping of *request*."""
    params = getattr(request, "query_params", request)
    if not isinstance(params, Mapping):
        raise TypeError(
            f"Cannot read query parameters from {type(request).__name__}"
        )
    return params
