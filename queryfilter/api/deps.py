from __future__ import annotations

import logging
from typing import Any, Mapping

from fastapi import Request
from pydantic import TypeAdapter, ValidationError

from queryfilter.core.config import Settings, settings as default_settings
from queryfilter.schemas.filter_params import FilterQueryParams

_LOG = logging.getLogger("queryfilter.binding")
_BOOL = TypeAdapter(bool)

_SCALAR_PARAMS = ("search", "page", "page_size", "all", "order_by", "order_direction")


def _values(query_params: Mapping[str, Any], name: str) -> list:
    if hasattr(query_params, "getlist"):
        return list(query_params.getlist(name))
    raw = query_params.get(name)
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        return list(raw)
    return [raw]


def bind_filter_params(
    query_params: Mapping[str, Any], app_settings: Settings | None = None
) -> FilterQueryParams | None:
    """Bind raw query-string values; None when they do not fit the expected shape."""
    cfg = app_settings or default_settings
    data: dict[str, Any] = {
        "page_size": cfg.FILTER_DEFAULT_PAGE_SIZE,
        "order_by": cfg.FILTER_DEFAULT_ORDER_BY,
        "order_direction": cfg.FILTER_DEFAULT_ORDER_DIRECTION,
    }
    for name in _SCALAR_PARAMS:
        values = _values(query_params, name)
        if values:
            data[name] = values[-1]
    if "page_size" not in query_params:
        limit = _values(query_params, "limit")
        if limit:
            data["page_size"] = limit[-1]
    data["filter"] = [str(value) for value in _values(query_params, "filter")]
    try:
        if "order_direction" not in query_params:
            desc = _values(query_params, "desc")
            if desc:
                data["order_direction"] = "desc" if _BOOL.validate_python(desc[-1]) else "asc"
        return FilterQueryParams(**data)
    except ValidationError as exc:
        _LOG.debug("query parameters rejected: %s", exc.errors())
        return None


def filter_params(request: Request) -> FilterQueryParams | None:
    return bind_filter_params(request.query_params)
