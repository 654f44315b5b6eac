"""
QueryContext — the decoded intent of one request.

Every pipeline stage receives a context and returns a new one; contexts are
frozen and never shared between requests.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .predicates import Exclusion, Predicate


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, raw: str | None) -> SortDirection:
        """Unknown or missing directions fall back to ascending."""
        if raw and raw.strip().lower() == cls.DESC.value:
            return cls.DESC
        return cls.ASC


@dataclass(frozen=True)
class SortKey:
    """Ordering on a column, or on the cardinality of a to-many relation."""

    column: str
    direction: SortDirection = SortDirection.ASC
    relation: str | None = None

    @property
    def is_derived(self) -> bool:
        return self.relation is not None


# -- shape directives ---------------------------------------------------------


@dataclass(frozen=True)
class All:
    pass


@dataclass(frozen=True)
class CountOnly:
    pass


@dataclass(frozen=True)
class FirstOnly:
    pass


@dataclass(frozen=True)
class DistinctColumn:
    column: str


@dataclass(frozen=True)
class Paginate:
    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(frozen=True)
class Take:
    count: int


ShapeDirective = All | CountOnly | FirstOnly | DistinctColumn | Paginate | Take


@dataclass(frozen=True)
class QueryContext:
    """
    Immutable, request-local representation of a query.

    Attributes:
        entity: Entity name in the schema catalog.
        scopes: Named scopes to apply, in request order.
        filters: Conjunctive filter predicates.
        exclusions: NOT IN conditions.
        sort: Sort keys in request order.
        shape: The single active result shape.
        relations: Relation paths to eager-load.
    """

    entity: str
    scopes: tuple[str, ...] = ()
    filters: tuple[Predicate, ...] = ()
    exclusions: tuple[Exclusion, ...] = ()
    sort: tuple[SortKey, ...] = ()
    shape: ShapeDirective = field(default_factory=All)
    relations: tuple[str, ...] = ()

    def evolve(self, **changes: Any) -> QueryContext:
        """Return a copy with ``changes`` applied."""
        return replace(self, **changes)

    @property
    def returns_entities(self) -> bool:
        return not isinstance(self.shape, CountOnly | DistinctColumn)
