"""
Operator strategies: one class compiles one predicate variant.

A strategy declares the :class:`PredicateOperator` it handles and turns a
model attribute plus a typed predicate into a boolean clause. The registry
dispatches on ``predicate.op``, so adding an operator means adding a
predicate variant and registering a strategy for it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy import ColumnElement

    from ..predicates import Exclusion, Predicate, PredicateOperator

P = TypeVar("P", bound="Predicate | Exclusion")


class SQLAlchemyOperator(ABC, Generic[P]):
    """Compile predicates of type ``P`` against a mapped column."""

    operator: ClassVar[PredicateOperator]

    @abstractmethod
    def apply(self, column: Any, predicate: P) -> ColumnElement[bool]:
        """Return the clause restricting ``column`` by ``predicate``."""


class SQLAlchemyOperatorRegistry:
    """
    Strategies keyed by the operator tag of the predicate they compile.

    Usage::

        registry = SQLAlchemyOperatorRegistry([EqualOperator(), InOperator()])
        clause = registry.compile(Post, Equals("status", "draft"))
    """

    def __init__(self, operators: Iterable[SQLAlchemyOperator[Any]] = ()) -> None:
        self._strategies: dict[PredicateOperator, SQLAlchemyOperator[Any]] = {}
        self.register_all(operators)

    def register(self, strategy: SQLAlchemyOperator[Any]) -> None:
        """Add ``strategy``; it replaces any strategy for the same operator."""
        self._strategies[strategy.operator] = strategy

    def register_all(self, strategies: Iterable[SQLAlchemyOperator[Any]]) -> None:
        for strategy in strategies:
            self.register(strategy)

    def get(self, operator: PredicateOperator) -> SQLAlchemyOperator[Any] | None:
        return self._strategies.get(operator)

    def has(self, operator: PredicateOperator) -> bool:
        return operator in self._strategies

    @property
    def supported_operators(self) -> frozenset[PredicateOperator]:
        return frozenset(self._strategies)

    def compile(
        self, model: type[Any], predicate: Predicate | Exclusion
    ) -> ColumnElement[bool]:
        """
        Compile one predicate against ``model``.

        Raises:
            ValueError: No strategy is registered for ``predicate.op``.
        """
        strategy = self._strategies.get(predicate.op)
        if strategy is None:
            raise ValueError(
                f"Unsupported operator for SQLAlchemy: {predicate.op.value!r}"
            )
        return strategy.apply(getattr(model, predicate.column), predicate)
