"""
SQL compilation of decoded queries.

Usage::

    from crud_query.compiler import DEFAULT_SQLA_REGISTRY, build_sqla_filter

    clause = build_sqla_filter(Post, ctx.filters)
"""

from __future__ import annotations

from .operators import DEFAULT_SQLA_REGISTRY, build_default_sqla_registry
from .sql import (
    build_sqla_filter,
    order_clauses,
    relation_count,
    relation_loader,
    relationship_property,
)
from .strategy import SQLAlchemyOperator, SQLAlchemyOperatorRegistry

__all__ = [
    "DEFAULT_SQLA_REGISTRY",
    "SQLAlchemyOperator",
    "SQLAlchemyOperatorRegistry",
    "build_default_sqla_registry",
    "build_sqla_filter",
    "order_clauses",
    "relation_count",
    "relation_loader",
    "relationship_property",
]
