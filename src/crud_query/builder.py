"""
PredicateBuilder — raw query parameters → filter predicates and exclusions.

This is the injection-safety boundary: a parameter name is only ever used as
a column after it has been matched against the entity descriptor and the
denylist. Values are decoded per semantic type; anything malformed simply
constrains nothing.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .config import DEFAULT_CONFIG, QueryConfig
from .decoders import build_default_decoders
from .descriptors import SemanticType
from .predicates import Contains, Equals, Exclusion, SetIn
from .utils import (
    get_param,
    parse_bool,
    parse_date,
    parse_datetime,
    parse_number,
    split_list,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .decoders import ExpressionDecoder
    from .descriptors import EntityDescriptor, SchemaSource
    from .predicates import Predicate

logger = logging.getLogger(__name__)

_NUMERIC = (SemanticType.INTEGER, SemanticType.FLOAT)
_TEXTUAL = (SemanticType.STRING, SemanticType.TEXT)


def coerce_value(type_: SemanticType | None, raw: str) -> Any | None:
    """Convert a raw token to the column's Python type; ``None`` if invalid."""
    if type_ is SemanticType.BOOLEAN:
        return parse_bool(raw)
    if type_ is SemanticType.INTEGER:
        number = parse_number(raw)
        return number if isinstance(number, int) else None
    if type_ is SemanticType.FLOAT:
        return parse_number(raw)
    if type_ is SemanticType.DATE:
        return parse_date(raw)
    if type_ is SemanticType.DATETIME:
        return parse_datetime(raw)
    return raw


class PredicateBuilder:
    """Build ``(filters, exclusions)`` for an entity from request params."""

    def __init__(
        self,
        schema: SchemaSource,
        config: QueryConfig | None = None,
        decoders: dict[SemanticType, ExpressionDecoder] | None = None,
    ) -> None:
        self._schema = schema
        self._config = config or DEFAULT_CONFIG
        self._decoders = decoders or build_default_decoders(
            self._config.range_separator
        )

    def build(
        self, entity: str, params: Mapping[str, Any]
    ) -> tuple[list[Predicate], list[Exclusion]]:
        descriptor = self._schema.describe(entity)
        return self.filters(descriptor, params), self.exclusions(descriptor, params)

    # -- filters ------------------------------------------------------------

    def eligible_columns(self, descriptor: EntityDescriptor) -> list[str]:
        return [
            col.name
            for col in descriptor.columns
            if not self._config.is_denied(col.name)
        ]

    def filters(
        self, descriptor: EntityDescriptor, params: Mapping[str, Any]
    ) -> list[Predicate]:
        strict = parse_bool(get_param(params, self._config.strict_key) or "")
        out: list[Predicate] = []
        for name in self.eligible_columns(descriptor):
            if name not in params:
                continue
            raw = get_param(params, name)
            if raw is None:
                continue
            column = descriptor.column(name)
            type_ = column.type if column is not None else None
            out.extend(self._column_predicates(name, type_, raw, strict))
        return out

    def _column_predicates(
        self,
        column: str,
        type_: SemanticType | None,
        raw: str,
        strict: bool,
    ) -> list[Predicate]:
        if type_ is SemanticType.BOOLEAN:
            return [Equals(column, parse_bool(raw))]

        if type_ in _NUMERIC:
            tokens = raw.split(self._config.list_separator)
            if len(tokens) > 1:
                return self._numeric_set(column, type_, tokens)
            return self._decoders[type_].decode(column, raw)

        if type_ in (SemanticType.DATE, SemanticType.DATETIME):
            return self._decoders[type_].decode(column, raw)

        if type_ in _TEXTUAL:
            return [Equals(column, raw) if strict else Contains(column, raw)]

        logger.debug("No filter semantics for column %r (type %r)", column, type_)
        return []

    def _numeric_set(
        self, column: str, type_: SemanticType, tokens: list[str]
    ) -> list[Predicate]:
        values = [coerce_value(type_, token) for token in tokens]
        kept = tuple(v for v in values if v is not None)
        if not kept:
            return []
        return [SetIn(column, kept)]

    # -- exclusions ---------------------------------------------------------

    def exclusions(
        self, descriptor: EntityDescriptor, params: Mapping[str, Any]
    ) -> list[Exclusion]:
        cfg = self._config
        raw = get_param(params, cfg.not_key)
        if not raw:
            return []

        out: list[Exclusion] = []
        for directive in raw.split(cfg.exclusion_separator):
            directive = directive.strip()
            if not directive:
                continue
            name, sep, values_raw = directive.partition(cfg.pair_separator)
            if not sep:
                column, values_raw = descriptor.primary_key, name
            else:
                column = name.strip()
                if not self._exclusion_allowed(descriptor, column):
                    logger.debug(
                        "Ignoring exclusion on %r for %r", column, descriptor.name
                    )
                    continue
            exclusion = self._exclusion(descriptor, column, values_raw)
            if exclusion is not None:
                out.append(exclusion)
        return out

    def _exclusion_allowed(self, descriptor: EntityDescriptor, column: str) -> bool:
        if descriptor.column(column) is None:
            return False
        return column == descriptor.primary_key or not self._config.is_denied(column)

    def _exclusion(
        self, descriptor: EntityDescriptor, column: str, values_raw: str
    ) -> Exclusion | None:
        col = descriptor.column(column)
        type_ = col.type if col is not None else None
        values = tuple(
            v
            for v in (
                coerce_value(type_, token)
                for token in split_list(values_raw, self._config.list_separator)
            )
            if v is not None
        )
        if not values:
            return None
        return Exclusion(column, values)
