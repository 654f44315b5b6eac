"""
List, create, read, update and delete for one mapped model.

The service owns no transaction: it flushes, and whoever owns the session
commits or rolls back.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import ValidationError as PydanticValidationError

from .config import DEFAULT_CONFIG, QueryConfig
from .context import QueryContext
from .exceptions import EntityNotFoundError, UnknownEntityError, ValidationError
from .executor import QueryExecutor
from .parser import QueryParser

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pydantic import BaseModel
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

    from .catalog import SchemaCatalog
    from .registry import ScopeRegistry

M = TypeVar("M")

logger = logging.getLogger(__name__)


def _validation_errors(exc: PydanticValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ())) or "__root__"
        errors.setdefault(field, []).append(err.get("msg", "Invalid value"))
    return errors


class CrudService(Generic[M]):
    """
    Generic resource operations driven by request parameters.

    Usage::

        service = CrudService(Post, session, catalog, scopes=scopes)
        posts = await service.list({"title": "intro", "sort": "views:desc"})
        post = await service.read(1, {"with": "comments"})

    Subclasses may override :meth:`apply_custom_queries` to add
    entity-specific conditions to listings.
    """

    def __init__(
        self,
        model: type[M],
        session: AsyncSession,
        catalog: SchemaCatalog,
        *,
        scopes: ScopeRegistry | None = None,
        config: QueryConfig | None = None,
        create_schema: type[BaseModel] | None = None,
        update_schema: type[BaseModel] | None = None,
    ) -> None:
        self.model = model
        self.session = session
        self.catalog = catalog
        try:
            self.entity = catalog.entity_for(model)
        except UnknownEntityError:
            self.entity = catalog.register(model)
        self.config = config or DEFAULT_CONFIG
        self.parser = QueryParser(catalog, self.config)
        self.executor = QueryExecutor(catalog, scopes, self.config)
        self.create_schema = create_schema
        self.update_schema = update_schema

    # -- extension points ---------------------------------------------------

    def apply_custom_queries(
        self, stmt: Select[Any], params: Mapping[str, Any]
    ) -> Select[Any]:
        """Hook for subclasses; runs after filters, before ordering."""
        return stmt

    def validate_create(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        return self._validate(self.create_schema, payload)

    def validate_update(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        return self._validate(self.update_schema, payload)

    # -- operations ---------------------------------------------------------

    async def list(self, params: Mapping[str, Any]) -> Any:
        """Query the resource; the result shape follows the parameters."""
        ctx = self.parser.parse(self.entity, params)
        return await self.executor.execute(
            self.session,
            ctx,
            customize=lambda stmt: self.apply_custom_queries(stmt, params),
        )

    async def create(self, payload: Mapping[str, Any]) -> M:
        data = self.validate_create(payload)
        instance = self.model(**self._attributes(data))
        self.session.add(instance)
        await self.session.flush()
        logger.debug("Created %s", self.entity)
        return instance

    async def read(
        self, entity_id: Any, params: Mapping[str, Any] | None = None
    ) -> M:
        ctx = self.parser.with_relations(QueryContext(self.entity), params or {})
        options = self.executor.loader_options(ctx)
        instance = await self.session.get(
            self.model, entity_id, options=options, populate_existing=bool(options)
        )
        if instance is None:
            raise EntityNotFoundError(self.entity, entity_id)
        return instance

    async def update(self, entity_id: Any, payload: Mapping[str, Any]) -> M:
        instance = await self._find_or_fail(entity_id)
        data = self.validate_update(payload)
        for key, value in self._attributes(data).items():
            setattr(instance, key, value)
        await self.session.flush()
        logger.debug("Updated %s id=%r", self.entity, entity_id)
        return instance

    async def delete(self, entity_id: Any) -> None:
        instance = await self._find_or_fail(entity_id)
        await self.session.delete(instance)
        await self.session.flush()
        logger.debug("Deleted %s id=%r", self.entity, entity_id)

    # -- internal -----------------------------------------------------------

    async def _find_or_fail(self, entity_id: Any) -> M:
        instance = await self.session.get(self.model, entity_id)
        if instance is None:
            raise EntityNotFoundError(self.entity, entity_id)
        return instance

    def _attributes(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Keep payload keys that are mapped columns of the entity."""
        attributes = {
            key: value
            for key, value in data.items()
            if self.catalog.has_column(self.entity, key)
        }
        ignored = set(data) - set(attributes)
        if ignored:
            logger.debug(
                "Ignoring unmapped attributes %s on %s", sorted(ignored), self.entity
            )
        return attributes

    @staticmethod
    def _validate(
        schema: type[BaseModel] | None, payload: Mapping[str, Any]
    ) -> dict[str, Any]:
        if schema is None:
            return dict(payload)
        try:
            validated = schema.model_validate(dict(payload))
        except PydanticValidationError as e:
            raise ValidationError(_validation_errors(e)) from e
        return validated.model_dump(exclude_unset=True)
