from queryfilter.schemas.filter_params import FilterQueryParams, PageMeta
from queryfilter.services.field_metadata import (
    Capability,
    FieldDescriptor,
    FieldRegistry,
    ModelResolutionError,
    field_registry,
    parse_filter_tag,
    resolve_fields,
)
from queryfilter.services.filter_operators import FilterOperator, ParsedFilter, parse_filter_phrase
from queryfilter.services.filter_scope import QueryFeature, ScopeOutcome, apply_filter_scope, filter_by_query
from queryfilter.services.pagination import PageWindow, page_meta, paginate, pagination_headers

__all__ = [
    "Capability",
    "FieldDescriptor",
    "FieldRegistry",
    "FilterOperator",
    "FilterQueryParams",
    "ModelResolutionError",
    "PageMeta",
    "PageWindow",
    "ParsedFilter",
    "QueryFeature",
    "ScopeOutcome",
    "apply_filter_scope",
    "field_registry",
    "filter_by_query",
    "page_meta",
    "paginate",
    "pagination_headers",
    "parse_filter_phrase",
    "parse_filter_tag",
    "resolve_fields",
]
