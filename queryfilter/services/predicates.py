from __future__ import annotations

from typing import Iterable, Sequence

from sqlalchemy import String, and_, cast, func, or_
from sqlalchemy.sql.elements import ColumnElement

from queryfilter.services.field_metadata import FieldDescriptor
from queryfilter.services.filter_operators import (
    FilterOperator,
    ParsedFilter,
    coerce_filter_value,
    column_python_type,
    parse_filter_phrase,
)


def _combine(clauses: Sequence[ColumnElement], conjunction) -> ColumnElement | None:
    if not clauses:
        return None
    if len(clauses) == 1:
        return clauses[0]
    return conjunction(*clauses)


def _as_text(attribute):
    if column_python_type(attribute) is str:
        return attribute
    return cast(attribute, String)


def build_comparison(attribute, parsed: ParsedFilter) -> ColumnElement:
    op = parsed.operator
    if op is FilterOperator.CONTAINS:
        return _as_text(attribute).like(f"%{parsed.value}%")
    value = coerce_filter_value(attribute, parsed.value)
    if op is FilterOperator.NE:
        return attribute != value
    if op is FilterOperator.GTE:
        return attribute >= value
    if op is FilterOperator.LTE:
        return attribute <= value
    if op is FilterOperator.GT:
        return attribute > value
    if op is FilterOperator.LT:
        return attribute < value
    return attribute == value


def build_search(model, fields: Iterable[FieldDescriptor], phrase: str | None) -> ColumnElement | None:
    """OR of case-insensitive substring matches over every searchable field."""
    if not phrase or not phrase.strip():
        return None
    pattern = f"%{phrase.lower()}%"
    clauses = [
        func.lower(_as_text(getattr(model, field.name))).like(pattern)
        for field in fields
        if field.searchable
    ]
    return _combine(clauses, or_)


def build_filter(model, fields: Iterable[FieldDescriptor], phrases: Iterable[str]) -> ColumnElement | None:
    """AND of every condition found in ``phrases`` on filterable fields.

    A phrase that targets no filterable field contributes nothing.
    """
    filterable = [field for field in fields if field.filterable]
    per_phrase: list[ColumnElement] = []
    for phrase in phrases:
        clauses = []
        for field in filterable:
            parsed = parse_filter_phrase(phrase, field.param)
            if parsed is None:
                continue
            clauses.append(build_comparison(getattr(model, field.name), parsed))
        combined = _combine(clauses, and_)
        if combined is not None:
            per_phrase.append(combined)
    return _combine(per_phrase, and_)
