"""Sort directives and the active result shape."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .config import DEFAULT_CONFIG, QueryConfig
from .context import (
    All,
    CountOnly,
    DistinctColumn,
    FirstOnly,
    Paginate,
    ShapeDirective,
    SortDirection,
    SortKey,
    Take,
)
from .utils import INT_MAX, get_param, parse_int, split_list

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .descriptors import EntityDescriptor, SchemaSource

logger = logging.getLogger(__name__)

RETURN_COUNT = "count"
RETURN_FIRST = "first"
RETURN_UNIQUE = "unique"


class SortShapeResolver:
    """Interpret ``sort`` and the result-shaping parameters."""

    def __init__(self, schema: SchemaSource, config: QueryConfig | None = None) -> None:
        self._schema = schema
        self._config = config or DEFAULT_CONFIG

    # -- sort ---------------------------------------------------------------

    def sort(self, entity: str, params: Mapping[str, Any]) -> list[SortKey]:
        cfg = self._config
        descriptor = self._schema.describe(entity)
        keys: list[SortKey] = []
        for item in split_list(get_param(params, cfg.sort_key), cfg.list_separator):
            name, _, direction_raw = item.partition(cfg.pair_separator)
            direction = SortDirection.parse(direction_raw)
            key = self._sort_key(descriptor, name.strip(), direction)
            if key is None:
                logger.debug("Ignoring sort key %r for %r", name, entity)
                continue
            keys.append(key)
        return keys

    def _sort_key(
        self, descriptor: EntityDescriptor, name: str, direction: SortDirection
    ) -> SortKey | None:
        if descriptor.column(name) is not None:
            return SortKey(name, direction)

        suffix = self._config.count_suffix
        if not name.endswith(suffix) or len(name) == len(suffix):
            return None
        relation = descriptor.relation(name[: -len(suffix)])
        if relation is None or not relation.to_many:
            return None
        return SortKey(name, direction, relation=relation.name)

    # -- shape --------------------------------------------------------------

    def shape(self, entity: str, params: Mapping[str, Any]) -> ShapeDirective:
        cfg = self._config
        mode = (get_param(params, cfg.return_key) or "").strip()

        if mode == RETURN_COUNT:
            return CountOnly()
        if mode == RETURN_FIRST:
            return FirstOnly()
        if mode.startswith(RETURN_UNIQUE + cfg.pair_separator):
            column = mode[len(RETURN_UNIQUE) + len(cfg.pair_separator) :].strip()
            if self._projectable(entity, column):
                return DistinctColumn(column)
            logger.debug("Ignoring unique projection on %r for %r", column, entity)

        page = parse_int(get_param(params, cfg.page_key))
        limit = parse_int(get_param(params, cfg.limit_key))
        if page is not None and limit is not None and limit >= 1:
            shape = Paginate(page=max(page, 1), page_size=self._cap(limit))
            if shape.offset <= INT_MAX:
                return shape
            logger.debug("Ignoring page %d: offset out of range", page)

        take = parse_int(get_param(params, cfg.take_key))
        if take is not None and take >= 0:
            return Take(self._cap(take))

        return All()

    def _projectable(self, entity: str, column: str) -> bool:
        descriptor = self._schema.describe(entity)
        if descriptor.column(column) is None:
            return False
        return column == descriptor.primary_key or not self._config.is_denied(column)

    def _cap(self, size: int) -> int:
        max_size = self._config.max_page_size
        return min(size, max_size) if max_size is not None else size
