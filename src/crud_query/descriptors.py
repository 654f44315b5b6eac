"""Immutable entity, column and relation descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable


class SemanticType(str, Enum):
    """Logical data type of a column, independent of storage."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    DATE = "date"
    DATETIME = "datetime"
    STRING = "string"
    TEXT = "text"


@dataclass(frozen=True)
class ColumnDescriptor:
    name: str
    type: SemanticType | None
    primary_key: bool = False


@dataclass(frozen=True)
class RelationDescriptor:
    name: str
    to_many: bool
    target: str


@dataclass(frozen=True)
class EntityDescriptor:
    """Immutable description of one entity."""

    name: str
    columns: tuple[ColumnDescriptor, ...]
    relations: tuple[RelationDescriptor, ...]
    primary_key: str

    def column(self, name: str) -> ColumnDescriptor | None:
        for col in self.columns:
            if col.name == name:
                return col
        return None

    def relation(self, name: str) -> RelationDescriptor | None:
        for rel in self.relations:
            if rel.name == name:
                return rel
        return None

    @property
    def column_names(self) -> tuple[str, ...]:
        return tuple(col.name for col in self.columns)


@runtime_checkable
class SchemaSource(Protocol):
    """Anything that can describe an entity (see ``SchemaCatalog``)."""

    def describe(self, entity: str) -> EntityDescriptor:
        """Return the descriptor for ``entity``."""
        ...
