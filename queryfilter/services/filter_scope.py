"""Compose search, filter, ordering and pagination onto a SQLAlchemy query.

The composer is fail-open: it never raises to the caller. When the scoped
model cannot be resolved (no entity, or not a mapped class) search and
filter are skipped and the query comes back *unfiltered*, while ordering and
pagination still apply. Callers that need to tell "nothing was requested"
apart from "filtering was requested but could not be applied" should use
``apply_filter_scope`` and inspect ``ScopeOutcome.model_resolved``.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Sequence

from sqlalchemy import and_, asc, column, desc

from queryfilter.core.config import Settings, settings as default_settings
from queryfilter.schemas.filter_params import FilterQueryParams
from queryfilter.services.field_metadata import (
    FieldDescriptor,
    FieldRegistry,
    ModelResolutionError,
    field_registry,
    mapper_for,
)
from queryfilter.services.pagination import PageWindow, paginate
from queryfilter.services.predicates import build_filter, build_search

_LOG = logging.getLogger("queryfilter.scope")


class QueryFeature(enum.Flag):
    NONE = 0
    SEARCH = 1
    FILTER = 2
    PAGINATE = 4
    ORDER_BY = 8
    ALL = SEARCH | FILTER | PAGINATE | ORDER_BY


@dataclass
class ScopeOutcome:
    query: object
    model_resolved: bool = False
    search_applied: bool = False
    filter_applied: bool = False
    ordered: bool = False
    page: PageWindow | None = None


def _query_entity(query):
    try:
        descriptions = query.column_descriptions
    except Exception:
        return None
    if len(descriptions) != 1:
        return None
    return descriptions[0].get("entity")


def _resolve_model(query, model):
    target = model if model is not None else _query_entity(query)
    if target is None:
        raise ModelResolutionError("no model bound to the query")
    mapper_for(target)
    return target


def _order_attribute(model, fields: Sequence[FieldDescriptor], name: str):
    for field in fields:
        if field.param == name:
            return getattr(model, field.name)
    mapper = mapper_for(model)
    for prop in mapper.column_attrs:
        if prop.key == name or getattr(prop.columns[0], "name", None) == name:
            return getattr(model, prop.key)
    return None


def _apply_order(query, model, fields, params: FilterQueryParams, cfg: Settings):
    name = (params.order_by or "").strip() or cfg.FILTER_DEFAULT_ORDER_BY
    if model is None:
        target = column(name)
    else:
        target = _order_attribute(model, fields, name)
        if target is None and name != cfg.FILTER_DEFAULT_ORDER_BY:
            _LOG.debug("unknown order_by %r on %s, using default", name, model.__name__)
            target = _order_attribute(model, fields, cfg.FILTER_DEFAULT_ORDER_BY)
        if target is None:
            _LOG.debug("no orderable column %r on %s", name, model.__name__)
            return query, False
    direction = asc if params.order_direction == "asc" else desc
    return query.order_by(direction(target)), True


def apply_filter_scope(
    query,
    params: FilterQueryParams | None,
    features: QueryFeature = QueryFeature.ALL,
    model=None,
    *,
    registry: FieldRegistry | None = None,
    app_settings: Settings | None = None,
) -> ScopeOutcome:
    outcome = ScopeOutcome(query=query)
    if params is None:
        _LOG.debug("query parameters not bound, scope skipped")
        return outcome
    cfg = app_settings or default_settings
    registry = registry or field_registry

    resolved = None
    fields: tuple[FieldDescriptor, ...] = ()
    try:
        resolved = _resolve_model(query, model)
        fields = registry.get(resolved)
        outcome.model_resolved = True
    except ModelResolutionError as exc:
        if features & (QueryFeature.SEARCH | QueryFeature.FILTER) and (params.search or params.filter):
            _LOG.warning("filter scope returned unfiltered query: %s", exc)
    except Exception:
        _LOG.warning("filter fields could not be resolved, query left unfiltered", exc_info=True)

    if outcome.model_resolved:
        try:
            clauses = []
            if features & QueryFeature.SEARCH and params.search:
                search_clause = build_search(resolved, fields, params.search)
                if search_clause is not None:
                    clauses.append(search_clause)
                    outcome.search_applied = True
            if features & QueryFeature.FILTER and params.filter:
                filter_clause = build_filter(resolved, fields, params.filter)
                if filter_clause is not None:
                    clauses.append(filter_clause)
                    outcome.filter_applied = True
            if clauses:
                outcome.query = outcome.query.where(clauses[0] if len(clauses) == 1 else and_(*clauses))
        except Exception:
            _LOG.warning("filter scope failed on %s, predicates dropped", resolved.__name__, exc_info=True)
            outcome.query = query
            outcome.search_applied = outcome.filter_applied = False

    if features & QueryFeature.ORDER_BY:
        try:
            outcome.query, outcome.ordered = _apply_order(outcome.query, resolved, fields, params, cfg)
        except Exception:
            _LOG.warning("order_by %r could not be applied", params.order_by, exc_info=True)

    if features & QueryFeature.PAGINATE:
        window = paginate(params.page, params.page_size, params.all, cfg)
        if window is not None:
            try:
                outcome.query = outcome.query.offset(window.offset).limit(window.limit)
                outcome.page = window
            except Exception:
                _LOG.warning("pagination could not be applied", exc_info=True)

    return outcome


def filter_by_query(
    params: FilterQueryParams | None,
    features: QueryFeature = QueryFeature.ALL,
    model=None,
    *,
    registry: FieldRegistry | None = None,
    app_settings: Settings | None = None,
):
    """Return a scope callable: ``filter_by_query(params, QueryFeature.ALL)(db.query(User))``.

    The scope never raises; see the module docstring for the fail-open rules.
    """
    def _scope(query):
        return apply_filter_scope(
            query, params, features, model, registry=registry, app_settings=app_settings
        ).query

    return _scope
