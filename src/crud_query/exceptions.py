"""Exceptions for the crud-query engine."""

from __future__ import annotations


class CrudQueryError(Exception):
    """Root exception for the entire crud-query package."""


class UnknownEntityError(CrudQueryError, LookupError):
    """Raised when the schema catalog is asked about an unregistered entity.

    This signals a programming error in the caller, never bad user input.
    """

    def __init__(self, entity: str) -> None:
        self.entity = entity
        super().__init__(f"Entity {entity!r} is not registered in the catalog")


class NotFoundError(CrudQueryError):
    """Raised when a target resource does not exist."""


class EntityNotFoundError(NotFoundError):
    """Raised when a specific entity cannot be found by primary key."""

    def __init__(self, entity_type: str, entity_id: object) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id={entity_id!r} not found")


class DirectiveError(CrudQueryError):
    """Base class for best-effort directives that cannot be honoured.

    The executor catches these and drops the directive; the request
    itself still succeeds.
    """


class UnknownScopeError(DirectiveError):
    """Raised when a named scope is not registered for an entity."""

    def __init__(self, entity: str, name: str) -> None:
        self.entity = entity
        self.name = name
        super().__init__(f"Scope {name!r} is not registered for {entity!r}")


class UnsupportedRelationError(DirectiveError):
    """Raised when a relation path does not resolve on the entity."""

    def __init__(self, entity: str, path: str) -> None:
        self.entity = entity
        self.path = path
        super().__init__(f"Relation {path!r} is not available on {entity!r}")


class ValidationError(CrudQueryError):
    """Raised when a create/update payload fails validation.

    Carries structured errors: ``{field: [messages]}``.
    """

    def __init__(self, errors: dict[str, list[str]] | str | None = None) -> None:
        if isinstance(errors, str):
            self.errors: dict[str, list[str]] = {"__root__": [errors]}
        elif errors is None:
            self.errors = {}
        else:
            self.errors = errors
        super().__init__(str(self.errors))


__all__: list[str] = [
    "CrudQueryError",
    "DirectiveError",
    "EntityNotFoundError",
    "NotFoundError",
    "UnknownEntityError",
    "UnknownScopeError",
    "UnsupportedRelationError",
    "ValidationError",
]
