"""
Expression decoders — one raw parameter value → typed predicates.

Supported syntax (``..`` is the configurable range separator)::

    42            exact value
    18..30        inclusive range
    ..30          upper bound only
    18..          lower bound only
    >=18  >18     one-sided range (inclusive / exclusive)
    <=30  <30

Decoding is best-effort: a token that does not parse for the target type
contributes no constraint, and a value with no usable token yields no
predicate at all. Decoders never raise on user input.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from .descriptors import SemanticType
from .predicates import Equals, Predicate, Range
from .utils import parse_date, parse_datetime, parse_number

# Longest prefixes first so ">=" wins over ">".
_COMPARISONS: tuple[tuple[str, bool, bool], ...] = (
    # (prefix, is_lower_bound, inclusive)
    (">=", True, True),
    ("<=", False, True),
    (">", True, False),
    ("<", False, False),
)


class ExpressionDecoder:
    """Base for per-type decoders."""

    def __init__(self, range_separator: str = "..") -> None:
        self.range_separator = range_separator

    def parse_bound(self, raw: str) -> Any | None:
        """Parse one bound; ``None`` when the token is malformed."""
        raise NotImplementedError

    def single(self, column: str, value: Any) -> Predicate:
        """Predicate for a lone literal."""
        return Equals(column, value)

    def decode(self, column: str, raw: str) -> list[Predicate]:
        text = raw.strip()
        if not text:
            return []

        if self.range_separator in text:
            return self._decode_range(column, text)

        for prefix, is_lower, inclusive in _COMPARISONS:
            if text.startswith(prefix):
                return self._decode_comparison(
                    column, text[len(prefix) :], is_lower, inclusive
                )

        value = self.parse_bound(text)
        if value is None:
            return []
        return [self.single(column, value)]

    def _decode_range(self, column: str, text: str) -> list[Predicate]:
        low_raw, _, high_raw = text.partition(self.range_separator)
        lower = self.parse_bound(low_raw) if low_raw.strip() else None
        upper = self.parse_bound(high_raw) if high_raw.strip() else None
        if lower is None and upper is None:
            return []
        return [Range(column, lower=lower, upper=upper)]

    def _decode_comparison(
        self, column: str, raw: str, is_lower: bool, inclusive: bool
    ) -> list[Predicate]:
        bound = self.parse_bound(raw)
        if bound is None:
            return []
        if is_lower:
            return [Range(column, lower=bound, lower_inclusive=inclusive)]
        return [Range(column, upper=bound, upper_inclusive=inclusive)]


class NumericDecoder(ExpressionDecoder):
    def parse_bound(self, raw: str) -> int | float | None:
        return parse_number(raw)


class DateDecoder(ExpressionDecoder):
    """Calendar-date bounds; a lone date covers that whole day."""

    def parse_bound(self, raw: str) -> date | None:
        return parse_date(raw)

    def single(self, column: str, value: Any) -> Predicate:
        return Range(column, lower=value, upper=value)


class DateTimeDecoder(ExpressionDecoder):
    """Full timestamps; a lone timestamp is an exact match."""

    def parse_bound(self, raw: str) -> datetime | None:
        return parse_datetime(raw)


def build_default_decoders(
    range_separator: str = "..",
) -> dict[SemanticType, ExpressionDecoder]:
    """Create the decoder table keyed by semantic type."""
    numeric = NumericDecoder(range_separator)
    return {
        SemanticType.INTEGER: numeric,
        SemanticType.FLOAT: numeric,
        SemanticType.DATE: DateDecoder(range_separator),
        SemanticType.DATETIME: DateTimeDecoder(range_separator),
    }
