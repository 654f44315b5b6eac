"""Named, pre-built query filters per entity."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .exceptions import UnknownScopeError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from sqlalchemy import Select

    Scope = Callable[[Select[Any]], Select[Any]]

logger = logging.getLogger(__name__)


class ScopeRegistry:
    """
    Explicit allow-list of scopes; a request can only name what was
    registered here.

    Usage::

        scopes = ScopeRegistry()

        @scopes.scope("posts", "published")
        def published(stmt):
            return stmt.where(Post.published.is_(True))

        stmt = scopes.apply("posts", ["published", "bogus"], select(Post))
    """

    def __init__(self) -> None:
        self._scopes: dict[tuple[str, str], Scope] = {}

    def register(self, entity: str, name: str, fn: Scope) -> None:
        self._scopes[(entity, name)] = fn

    def scope(self, entity: str, name: str | None = None) -> Callable[[Scope], Scope]:
        """Decorator form of :meth:`register`; defaults to the function name."""

        def decorator(fn: Scope) -> Scope:
            self.register(entity, name or fn.__name__, fn)
            return fn

        return decorator

    def names(self, entity: str) -> list[str]:
        return sorted(name for ent, name in self._scopes if ent == entity)

    def get(self, entity: str, name: str) -> Scope:
        try:
            return self._scopes[(entity, name)]
        except KeyError:
            raise UnknownScopeError(entity, name) from None

    def apply(
        self, entity: str, names: Iterable[str], stmt: Select[Any]
    ) -> Select[Any]:
        """Apply scopes in order; unknown names are skipped."""
        for name in names:
            try:
                fn = self.get(entity, name)
            except UnknownScopeError:
                logger.debug("Ignoring unknown scope %r for %r", name, entity)
                continue
            stmt = fn(stmt)
        return stmt
