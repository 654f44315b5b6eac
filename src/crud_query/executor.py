"""
QueryExecutor — run a :class:`QueryContext` against an ``AsyncSession``.

Pipeline order is fixed:

1. named scopes
2. filters, as one conjunctive WHERE group
3. exclusions, as NOT IN conditions
4. the optional ``customize`` hook
5. sort keys in request order, then the primary key as a tie-breaker
6. the shape directive (count / first / distinct / page / take / all)

Relations named in the context are attached as eager-loading options to
every shape that returns entities. Unknown scopes, relations and derived
sort keys are dropped at this boundary; errors raised by the database are
never caught here.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select

from .compiler import build_sqla_filter, order_clauses, relation_loader
from .config import DEFAULT_CONFIG, QueryConfig
from .context import CountOnly, DistinctColumn, FirstOnly, Paginate, Take
from .exceptions import DirectiveError
from .pagination import Page
from .registry import ScopeRegistry

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

    from .catalog import SchemaCatalog
    from .compiler import SQLAlchemyOperatorRegistry
    from .context import QueryContext

    Customize = Callable[[Select[Any]], Select[Any]]

logger = logging.getLogger(__name__)


class QueryExecutor:
    """Apply a decoded query to the persistence layer."""

    def __init__(
        self,
        catalog: SchemaCatalog,
        scopes: ScopeRegistry | None = None,
        config: QueryConfig | None = None,
        *,
        registry: SQLAlchemyOperatorRegistry | None = None,
    ) -> None:
        self._catalog = catalog
        self._scopes = scopes or ScopeRegistry()
        self._config = config or DEFAULT_CONFIG
        self._registry = registry

    # -- statement building -------------------------------------------------

    def statement(
        self, ctx: QueryContext, *, customize: Customize | None = None
    ) -> Select[Any]:
        """Build the filtered, ordered ``SELECT`` (before shaping)."""
        model = self._catalog.model(ctx.entity)
        stmt: Select[Any] = select(model)

        stmt = self._scopes.apply(ctx.entity, ctx.scopes, stmt)

        where = build_sqla_filter(model, ctx.filters, registry=self._registry)
        if where is not None:
            stmt = stmt.where(where)

        excluded = build_sqla_filter(model, ctx.exclusions, registry=self._registry)
        if excluded is not None:
            stmt = stmt.where(excluded)

        if customize is not None:
            stmt = customize(stmt)

        return stmt.order_by(*self.ordering(ctx))

    def ordering(self, ctx: QueryContext) -> list[Any]:
        model = self._catalog.model(ctx.entity)
        clauses: list[Any] = []
        for key in ctx.sort:
            try:
                clauses.extend(order_clauses(model, [key], ctx.entity))
            except DirectiveError as exc:
                logger.debug("Dropping sort key %r: %s", key.column, exc)

        pk = self._catalog.primary_key(ctx.entity)
        sorted_on_pk = any(k.column == pk and not k.is_derived for k in ctx.sort)
        if self._config.tie_break_on_primary_key and not sorted_on_pk:
            clauses.append(getattr(model, pk).asc())
        return clauses

    def loader_options(self, ctx: QueryContext) -> list[Any]:
        """Eager-loading options for the relations that resolve."""
        model = self._catalog.model(ctx.entity)
        options: list[Any] = []
        for path in ctx.relations:
            try:
                options.append(relation_loader(model, path, ctx.entity))
            except DirectiveError as exc:
                logger.debug("Skipping relation %r: %s", path, exc)
        return options

    # -- execution ----------------------------------------------------------

    async def execute(
        self,
        session: AsyncSession,
        ctx: QueryContext,
        *,
        customize: Customize | None = None,
    ) -> Any:
        """
        Run the query and return its shaped result.

        Returns:
            ``int`` for count, an entity or ``None`` for first, a list of
            values for a distinct projection, a :class:`Page` for
            pagination, otherwise a list of entities.
        """
        stmt = self.statement(ctx, customize=customize)
        shape = ctx.shape
        logger.debug("Executing %s query on %r", type(shape).__name__, ctx.entity)

        if isinstance(shape, CountOnly):
            return await self._count(session, stmt)

        if isinstance(shape, DistinctColumn):
            return await self._distinct(session, stmt, ctx, shape.column)

        loaded = stmt.options(*self.loader_options(ctx))

        if isinstance(shape, FirstOnly):
            result = await session.execute(loaded.limit(1))
            return result.scalars().first()

        if isinstance(shape, Paginate):
            total = await self._count(session, stmt)
            result = await session.execute(
                loaded.limit(shape.page_size).offset(shape.offset)
            )
            return Page(
                items=list(result.scalars().all()),
                total=total,
                page=shape.page,
                per_page=shape.page_size,
            )

        if isinstance(shape, Take):
            loaded = loaded.limit(shape.count)

        result = await session.execute(loaded)
        return list(result.scalars().all())

    async def _count(self, session: AsyncSession, stmt: Select[Any]) -> int:
        counted = select(func.count()).select_from(stmt.order_by(None).subquery())
        return int((await session.execute(counted)).scalar_one())

    async def _distinct(
        self,
        session: AsyncSession,
        stmt: Select[Any],
        ctx: QueryContext,
        column_name: str,
    ) -> list[Any]:
        model = self._catalog.model(ctx.entity)
        projected = [
            k for k in ctx.sort if k.column == column_name and not k.is_derived
        ]
        distinct = (
            stmt.with_only_columns(getattr(model, column_name))
            .distinct()
            .order_by(None)
            .order_by(*order_clauses(model, projected, ctx.entity))
        )
        result = await session.execute(distinct)
        return list(result.scalars().all())
