"""Filter configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class FilterConfig(BaseModel):
    """Settings shared by the syntax layer, the HTTP adapter and the facade.

    Attributes:
        filter_param: Query parameter carrying the simple (flat list) form.
        complex_filter_param: Query parameter carrying the grouped form.
        max_depth: Maximum group nesting accepted from external input.
    """

    model_config = ConfigDict(frozen=True)

    filter_param: str = "filter"
    complex_filter_param: str = "complexFilter"
    max_depth: int = Field(default=16, ge=1)


DEFAULT_CONFIG = FilterConfig()
