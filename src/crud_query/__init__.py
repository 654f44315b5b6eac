"""
crud-query: query-string driven filtering, sorting and pagination for
SQLAlchemy models.

Usage::

    from crud_query import CrudService, SchemaCatalog

    catalog = SchemaCatalog(Base)
    service = CrudService(Post, session, catalog)
    page = await service.list({"views": "10..", "page": "2", "limit": "20"})
"""

from .builder import PredicateBuilder
from .catalog import SchemaCatalog, semantic_type_of
from .config import DEFAULT_CONFIG, DEFAULT_DENYLIST, QueryConfig
from .context import (
    All,
    CountOnly,
    DistinctColumn,
    FirstOnly,
    Paginate,
    QueryContext,
    ShapeDirective,
    SortDirection,
    SortKey,
    Take,
)
from .crud import CrudService
from .decoders import (
    DateDecoder,
    DateTimeDecoder,
    ExpressionDecoder,
    NumericDecoder,
    build_default_decoders,
)
from .descriptors import (
    ColumnDescriptor,
    EntityDescriptor,
    RelationDescriptor,
    SchemaSource,
    SemanticType,
)
from .exceptions import (
    CrudQueryError,
    DirectiveError,
    EntityNotFoundError,
    NotFoundError,
    UnknownEntityError,
    UnknownScopeError,
    UnsupportedRelationError,
    ValidationError,
)
from .executor import QueryExecutor
from .pagination import Page, QueryStringBuilder
from .parser import QueryParser
from .predicates import (
    Contains,
    Equals,
    Exclusion,
    Predicate,
    PredicateOperator,
    Range,
    SetIn,
)
from .registry import ScopeRegistry
from .resolver import SortShapeResolver

__all__ = [
    # Schema
    "SchemaCatalog",
    "SchemaSource",
    "SemanticType",
    "ColumnDescriptor",
    "RelationDescriptor",
    "EntityDescriptor",
    "semantic_type_of",
    # Configuration
    "QueryConfig",
    "DEFAULT_CONFIG",
    "DEFAULT_DENYLIST",
    # Decoding
    "ExpressionDecoder",
    "NumericDecoder",
    "DateDecoder",
    "DateTimeDecoder",
    "build_default_decoders",
    "PredicateBuilder",
    "SortShapeResolver",
    "QueryParser",
    # Predicates & context
    "PredicateOperator",
    "Predicate",
    "Equals",
    "Contains",
    "Range",
    "SetIn",
    "Exclusion",
    "QueryContext",
    "SortDirection",
    "SortKey",
    "ShapeDirective",
    "All",
    "CountOnly",
    "FirstOnly",
    "DistinctColumn",
    "Paginate",
    "Take",
    # Execution
    "QueryExecutor",
    "ScopeRegistry",
    "CrudService",
    "Page",
    "QueryStringBuilder",
    # Exceptions
    "CrudQueryError",
    "DirectiveError",
    "EntityNotFoundError",
    "NotFoundError",
    "UnknownEntityError",
    "UnknownScopeError",
    "UnsupportedRelationError",
    "ValidationError",
]
