"""QueryParser — request params → :class:`QueryContext`."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .builder import PredicateBuilder
from .config import DEFAULT_CONFIG, QueryConfig
from .context import QueryContext
from .resolver import SortShapeResolver
from .utils import get_param, split_list

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from .descriptors import SchemaSource

    Stage = Callable[[QueryContext, Mapping[str, Any]], QueryContext]


class QueryParser:
    """
    Decode request parameters into an immutable query context.

    Stages run in pipeline order (scopes, filters, exclusions, sort, shape,
    relations); each returns a new context::

        parser = QueryParser(catalog)
        ctx = parser.parse("posts", {"title": "intro", "sort": "views:desc"})
    """

    def __init__(
        self,
        schema: SchemaSource,
        config: QueryConfig | None = None,
        *,
        builder: PredicateBuilder | None = None,
        resolver: SortShapeResolver | None = None,
    ) -> None:
        self._config = config or DEFAULT_CONFIG
        self._builder = builder or PredicateBuilder(schema, self._config)
        self._resolver = resolver or SortShapeResolver(schema, self._config)
        self._schema = schema

    @property
    def config(self) -> QueryConfig:
        return self._config

    @property
    def stages(self) -> tuple[Stage, ...]:
        return (
            self.with_scopes,
            self.with_filters,
            self.with_exclusions,
            self.with_sort,
            self.with_shape,
            self.with_relations,
        )

    def parse(self, entity: str, params: Mapping[str, Any]) -> QueryContext:
        ctx = QueryContext(entity=entity)
        for stage in self.stages:
            ctx = stage(ctx, params)
        return ctx

    # -- stages -------------------------------------------------------------

    def with_scopes(self, ctx: QueryContext, params: Mapping[str, Any]) -> QueryContext:
        names = split_list(
            get_param(params, self._config.scope_key), self._config.list_separator
        )
        return ctx.evolve(scopes=tuple(names))

    def with_filters(
        self, ctx: QueryContext, params: Mapping[str, Any]
    ) -> QueryContext:
        descriptor = self._schema.describe(ctx.entity)
        return ctx.evolve(filters=tuple(self._builder.filters(descriptor, params)))

    def with_exclusions(
        self, ctx: QueryContext, params: Mapping[str, Any]
    ) -> QueryContext:
        descriptor = self._schema.describe(ctx.entity)
        return ctx.evolve(
            exclusions=tuple(self._builder.exclusions(descriptor, params))
        )

    def with_sort(self, ctx: QueryContext, params: Mapping[str, Any]) -> QueryContext:
        return ctx.evolve(sort=tuple(self._resolver.sort(ctx.entity, params)))

    def with_shape(self, ctx: QueryContext, params: Mapping[str, Any]) -> QueryContext:
        return ctx.evolve(shape=self._resolver.shape(ctx.entity, params))

    def with_relations(
        self, ctx: QueryContext, params: Mapping[str, Any]
    ) -> QueryContext:
        names = split_list(
            get_param(params, self._config.with_key), self._config.list_separator
        )
        return ctx.evolve(relations=tuple(dict.fromkeys(names)))
