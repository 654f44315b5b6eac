"""Predicate variants produced by the builder and decoders."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar


class PredicateOperator(str, Enum):
    """Operators understood by the SQL compiler."""

    EQ = "="
    CONTAINS = "contains"
    RANGE = "range"
    IN = "in"
    NOT_IN = "not_in"


@dataclass(frozen=True)
class Equals:
    op: ClassVar[PredicateOperator] = PredicateOperator.EQ

    column: str
    value: Any

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.op.value, "attr": self.column, "val": self.value}


@dataclass(frozen=True)
class Contains:
    op: ClassVar[PredicateOperator] = PredicateOperator.CONTAINS

    column: str
    value: str

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.op.value, "attr": self.column, "val": self.value}


@dataclass(frozen=True)
class Range:
    """Range with optional bounds; a missing bound means unbounded."""

    op: ClassVar[PredicateOperator] = PredicateOperator.RANGE

    column: str
    lower: Any = None
    upper: Any = None
    lower_inclusive: bool = True
    upper_inclusive: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": self.op.value,
            "attr": self.column,
            "val": {
                "lower": self.lower,
                "upper": self.upper,
                "lower_inclusive": self.lower_inclusive,
                "upper_inclusive": self.upper_inclusive,
            },
        }


@dataclass(frozen=True)
class SetIn:
    op: ClassVar[PredicateOperator] = PredicateOperator.IN

    column: str
    values: tuple[Any, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.op.value, "attr": self.column, "val": list(self.values)}


@dataclass(frozen=True)
class Exclusion:
    """Records whose ``column`` holds any of ``values`` are excluded."""

    op: ClassVar[PredicateOperator] = PredicateOperator.NOT_IN

    column: str
    values: tuple[Any, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.op.value, "attr": self.column, "val": list(self.values)}


Predicate = Equals | Contains | Range | SetIn
