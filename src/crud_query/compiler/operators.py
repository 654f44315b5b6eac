"""Built-in operator strategies: equality, substring, range and set."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, true

from ..predicates import (
    Contains,
    Equals,
    Exclusion,
    PredicateOperator,
    Range,
    SetIn,
)
from .strategy import SQLAlchemyOperator, SQLAlchemyOperatorRegistry

if TYPE_CHECKING:
    from sqlalchemy.sql.elements import ColumnElement


class EqualOperator(SQLAlchemyOperator[Equals]):
    operator = PredicateOperator.EQ

    def apply(self, column: Any, predicate: Equals) -> ColumnElement[bool]:
        return column == predicate.value  # type: ignore[no-any-return]


class ContainsOperator(SQLAlchemyOperator[Contains]):
    """Substring match; LIKE wildcards in the value match literally."""

    operator = PredicateOperator.CONTAINS

    def apply(self, column: Any, predicate: Contains) -> ColumnElement[bool]:
        clause = column.contains(predicate.value, autoescape=True)
        return clause  # type: ignore[no-any-return]


class RangeOperator(SQLAlchemyOperator[Range]):
    operator = PredicateOperator.RANGE

    def apply(self, column: Any, predicate: Range) -> ColumnElement[bool]:
        bounds: list[ColumnElement[bool]] = []
        if predicate.lower is not None:
            bounds.append(
                column >= predicate.lower
                if predicate.lower_inclusive
                else column > predicate.lower
            )
        if predicate.upper is not None:
            bounds.append(
                column <= predicate.upper
                if predicate.upper_inclusive
                else column < predicate.upper
            )
        return and_(*bounds) if bounds else true()


class InOperator(SQLAlchemyOperator[SetIn]):
    operator = PredicateOperator.IN

    def apply(self, column: Any, predicate: SetIn) -> ColumnElement[bool]:
        return column.in_(list(predicate.values))  # type: ignore[no-any-return]


class NotInOperator(SQLAlchemyOperator[Exclusion]):
    operator = PredicateOperator.NOT_IN

    def apply(self, column: Any, predicate: Exclusion) -> ColumnElement[bool]:
        return column.not_in(list(predicate.values))  # type: ignore[no-any-return]


def build_default_sqla_registry() -> SQLAlchemyOperatorRegistry:
    """Create a registry with all built-in SQLAlchemy operators."""
    return SQLAlchemyOperatorRegistry(
        [
            EqualOperator(),
            ContainsOperator(),
            RangeOperator(),
            InOperator(),
            NotInOperator(),
        ]
    )


DEFAULT_SQLA_REGISTRY: SQLAlchemyOperatorRegistry = build_default_sqla_registry()
