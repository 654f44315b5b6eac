"""
Schema catalog — entity name → column set, semantic types and relations.

The catalog wraps the SQLAlchemy ORM mapper of each registered model and
exposes a small, immutable description of it. Everything derived from user
input is checked against this description before any attribute lookup on a
model happens, so the catalog is the allow-list for columns and relations.

Descriptors are built lazily on first use and cached for the lifetime of the
catalog. Population is lock-guarded; reads are lock-free.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Float,
    Integer,
    Numeric,
    String,
    Text,
    TypeDecorator,
)
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import registry as orm_registry

from .descriptors import (
    ColumnDescriptor,
    EntityDescriptor,
    RelationDescriptor,
    SemanticType,
)
from .exceptions import UnknownEntityError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.types import TypeEngine


def semantic_type_of(type_: TypeEngine[Any]) -> SemanticType | None:
    """Map a SQLAlchemy column type to a :class:`SemanticType`."""
    if isinstance(type_, TypeDecorator):
        type_ = type_.impl_instance
    # Order matters: Text is a String, DateTime is checked before Date.
    if isinstance(type_, Boolean):
        return SemanticType.BOOLEAN
    if isinstance(type_, Integer):
        return SemanticType.INTEGER
    if isinstance(type_, Float | Numeric):
        return SemanticType.FLOAT
    if isinstance(type_, DateTime):
        return SemanticType.DATETIME
    if isinstance(type_, Date):
        return SemanticType.DATE
    if isinstance(type_, Text):
        return SemanticType.TEXT
    if isinstance(type_, String):
        return SemanticType.STRING
    return None


def _is_mapped(cls: type[Any]) -> bool:
    return sa_inspect(cls, raiseerr=False) is not None


class SchemaCatalog:
    """
    Registry of queryable entities keyed by table name.

    Usage::

        catalog = SchemaCatalog(Base)          # every mapped class
        catalog = SchemaCatalog([Post, Tag])   # selected models only
        catalog.column_type("posts", "views")  # SemanticType.INTEGER
        catalog.has_column("posts", "nope")    # False
    """

    def __init__(self, source: Any = None) -> None:
        self._models: dict[str, type[Any]] = {}
        self._descriptors: dict[str, EntityDescriptor] = {}
        self._lock = threading.Lock()
        if source is None:
            return
        if isinstance(source, orm_registry):
            self.register_all(m.class_ for m in source.mappers)
        elif isinstance(source, type) and _is_mapped(source):
            self.register(source)
        elif isinstance(source, type) and isinstance(
            getattr(source, "registry", None), orm_registry
        ):
            # A declarative base: every class mapped through its registry.
            self.register_all(m.class_ for m in source.registry.mappers)
        else:
            self.register_all(source)

    # -- registration -------------------------------------------------------

    def register(self, model: type[Any], name: str | None = None) -> str:
        """Register a mapped class; returns the entity name used."""
        entity = name or sa_inspect(model).local_table.name
        with self._lock:
            self._models[entity] = model
            self._descriptors.pop(entity, None)
        return entity

    def register_all(self, models: Iterable[type[Any]]) -> None:
        for model in models:
            self.register(model)

    # -- lookups ------------------------------------------------------------

    @property
    def entities(self) -> list[str]:
        return sorted(self._models)

    def model(self, entity: str) -> type[Any]:
        try:
            return self._models[entity]
        except KeyError:
            raise UnknownEntityError(entity) from None

    def entity_for(self, model: type[Any]) -> str:
        """Return the entity name a model class is registered under."""
        for entity, registered in self._models.items():
            if registered is model:
                return entity
        raise UnknownEntityError(getattr(model, "__name__", repr(model)))

    def describe(self, entity: str) -> EntityDescriptor:
        descriptor = self._descriptors.get(entity)
        if descriptor is not None:
            return descriptor
        model = self.model(entity)
        built = self._build(entity, model)
        with self._lock:
            # A concurrent populator may have won; both values are identical.
            return self._descriptors.setdefault(entity, built)

    def columns(self, entity: str) -> tuple[ColumnDescriptor, ...]:
        return self.describe(entity).columns

    def column_type(self, entity: str, column: str) -> SemanticType | None:
        col = self.describe(entity).column(column)
        return col.type if col is not None else None

    def has_column(self, entity: str, column: str) -> bool:
        return self.describe(entity).column(column) is not None

    def relation(self, entity: str, name: str) -> RelationDescriptor | None:
        return self.describe(entity).relation(name)

    def primary_key(self, entity: str) -> str:
        return self.describe(entity).primary_key

    # -- internal -----------------------------------------------------------

    def _build(self, entity: str, model: type[Any]) -> EntityDescriptor:
        mapper = sa_inspect(model)
        pk_columns = set(mapper.primary_key)
        columns: list[ColumnDescriptor] = []
        primary_key: str | None = None
        for attr in mapper.column_attrs:
            column = attr.columns[0]
            is_pk = column in pk_columns
            if is_pk and primary_key is None:
                primary_key = attr.key
            columns.append(
                ColumnDescriptor(
                    name=attr.key,
                    type=semantic_type_of(column.type),
                    primary_key=is_pk,
                )
            )
        relations = tuple(
            RelationDescriptor(
                name=rel.key,
                to_many=bool(rel.uselist),
                target=rel.mapper.local_table.name,
            )
            for rel in mapper.relationships
        )
        return EntityDescriptor(
            name=entity,
            columns=tuple(columns),
            relations=relations,
            primary_key=primary_key or "id",
        )
