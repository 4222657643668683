from __future__ import annotations

import enum
import logging
import re
import threading
from dataclasses import dataclass
from typing import Iterable

from sqlalchemy import Column, inspect
from sqlalchemy.orm import Mapper

from queryfilter.core.config import Settings, settings as default_settings

_LOG = logging.getLogger("queryfilter.fields")

_PARAM_NAME_RE = re.compile(r"^\w+$")
_TAG_SEPARATOR = ";"
_PARAM_PREFIX = "param:"


class ModelResolutionError(LookupError):
    """Raised when the scoped target is not a single mapped model class."""


class Capability(enum.Enum):
    SEARCHABLE = "searchable"
    FILTERABLE = "filterable"


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    param: str
    column: str
    table: str | None
    capabilities: frozenset[Capability]

    @property
    def searchable(self) -> bool:
        return Capability.SEARCHABLE in self.capabilities

    @property
    def filterable(self) -> bool:
        return Capability.FILTERABLE in self.capabilities


def parse_filter_tag(tag) -> tuple[frozenset[Capability], str | None]:
    if not isinstance(tag, str):
        return frozenset(), None
    capabilities: set[Capability] = set()
    param: str | None = None
    for raw_token in tag.split(_TAG_SEPARATOR):
        token = raw_token.strip()
        if not token:
            continue
        if token.startswith(_PARAM_PREFIX):
            candidate = token[len(_PARAM_PREFIX):].strip()
            if param is None and _PARAM_NAME_RE.fullmatch(candidate):
                param = candidate
            continue
        try:
            capabilities.add(Capability(token.lower()))
        except ValueError:
            continue
    return frozenset(capabilities), param


def mapper_for(model) -> Mapper:
    if not isinstance(model, type):
        raise ModelResolutionError(f"expected a mapped class, got {model!r}")
    mapper = inspect(model, raiseerr=False)
    if not isinstance(mapper, Mapper):
        raise ModelResolutionError(f"{model.__name__} is not a mapped class")
    return mapper


def resolve_fields(model, *, tag_key: str | None = None) -> tuple[FieldDescriptor, ...]:
    """Derive the descriptor table of a mapped model from its column tags.

    Only columns carrying a tag with at least one capability are returned;
    everything else is invisible to search and filter.
    """
    mapper = mapper_for(model)
    key = tag_key or default_settings.FILTER_TAG_KEY
    descriptors: list[FieldDescriptor] = []
    seen_params: set[str] = set()
    for prop in mapper.column_attrs:
        column = prop.columns[0]
        # column_property() expressions carry no tag
        if not isinstance(column, Column):
            continue
        capabilities, param = parse_filter_tag(column.info.get(key))
        if not capabilities:
            continue
        column_name = getattr(column, "name", None) or prop.key
        param = param or column_name
        if param in seen_params:
            _LOG.warning(
                "duplicate filter param %r on %s.%s ignored", param, mapper.class_.__name__, prop.key
            )
            continue
        seen_params.add(param)
        table = getattr(getattr(column, "table", None), "name", None)
        descriptors.append(
            FieldDescriptor(
                name=prop.key,
                param=param,
                column=column_name,
                table=table,
                capabilities=capabilities,
            )
        )
    return tuple(descriptors)


class FieldRegistry:
    """Per-model descriptor cache, published once per model type.

    Reads after publication take no lock; derivation happens under a lock
    so each model is resolved at most once.
    """

    def __init__(self, app_settings: Settings | None = None):
        self._settings = app_settings or default_settings
        self._descriptors: dict[type, tuple[FieldDescriptor, ...]] = {}
        self._lock = threading.Lock()

    def get(self, model) -> tuple[FieldDescriptor, ...]:
        cached = self._descriptors.get(model)
        if cached is not None:
            return cached
        with self._lock:
            cached = self._descriptors.get(model)
            if cached is None:
                cached = resolve_fields(model, tag_key=self._settings.FILTER_TAG_KEY)
                self._descriptors[model] = cached
                _LOG.debug("resolved %d filter fields for %s", len(cached), model.__name__)
        return cached

    def register(self, model, descriptors: Iterable[FieldDescriptor]) -> tuple[FieldDescriptor, ...]:
        """Install an explicit descriptor table for ``model`` instead of reading column tags."""
        mapper_for(model)
        table = tuple(descriptors)
        params = [d.param for d in table]
        if len(params) != len(set(params)):
            raise ValueError(f"filter params must be unique per model: {params}")
        with self._lock:
            self._descriptors[model] = table
        return table

    def clear(self) -> None:
        with self._lock:
            self._descriptors.clear()


field_registry = FieldRegistry()
