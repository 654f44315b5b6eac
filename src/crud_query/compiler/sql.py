"""
Compile predicates, sort keys and relation paths into SQLAlchemy constructs.

Column names reaching this module have already been checked against the
schema catalog. Relation paths are validated here against the ORM mapper,
segment by segment, because they may traverse into other entities.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, func, select
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import selectinload

from ..context import SortDirection
from ..exceptions import UnsupportedRelationError
from .operators import DEFAULT_SQLA_REGISTRY

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import ColumnElement
    from sqlalchemy.orm.relationships import RelationshipProperty

    from ..context import SortKey
    from ..predicates import Exclusion, Predicate
    from .strategy import SQLAlchemyOperatorRegistry


def build_sqla_filter(
    model: type[Any],
    predicates: Sequence[Predicate | Exclusion],
    *,
    registry: SQLAlchemyOperatorRegistry | None = None,
) -> ColumnElement[bool] | None:
    """
    Combine predicates into one conjunctive SQLAlchemy expression.

    Returns ``None`` when there is nothing to filter on.
    """
    reg = registry or DEFAULT_SQLA_REGISTRY
    clauses = [reg.compile(model, predicate) for predicate in predicates]
    if not clauses:
        return None
    return and_(*clauses)


def relationship_property(
    model: type[Any], name: str, entity: str | None = None
) -> RelationshipProperty[Any]:
    """Return the mapper relationship ``name`` or raise."""
    relationships = sa_inspect(model).relationships
    if name not in relationships:
        raise UnsupportedRelationError(entity or model.__name__, name)
    return relationships[name]


def relation_count(
    model: type[Any], relation: str, entity: str | None = None
) -> Any:
    """
    Correlated scalar subquery counting the rows of a to-many relation::

        (SELECT count(*) FROM comments AS comments_1
         WHERE posts.id = comments_1.post_id)

    The counted table is always aliased so that self-referential relations
    (``nodes.children``) compare the outer row with its children and not
    with itself. Many-to-many relations count rows of the association table.
    """
    prop = relationship_property(model, relation, entity)
    if not prop.uselist:
        raise UnsupportedRelationError(entity or model.__name__, relation)

    if prop.secondary is not None:
        # (parent column, association column) from the primary join only.
        counted = prop.secondary.alias()
        pairs = list(prop.synchronize_pairs)
    else:
        counted = prop.target.alias()
        pairs = list(prop.local_remote_pairs or ())
    if not pairs:
        raise UnsupportedRelationError(entity or model.__name__, relation)
    condition = and_(
        *(local == counted.corresponding_column(remote) for local, remote in pairs)
    )
    return (
        select(func.count())
        .select_from(counted)
        .where(condition)
        .correlate(model)
        .scalar_subquery()
    )


def order_clauses(
    model: type[Any], keys: Sequence[SortKey], entity: str | None = None
) -> list[Any]:
    """ORDER BY clauses for ``keys``; derived keys order by relation size."""
    clauses: list[Any] = []
    for key in keys:
        if key.relation is not None:
            expr = relation_count(model, key.relation, entity)
        else:
            expr = getattr(model, key.column)
        descending = key.direction is SortDirection.DESC
        clauses.append(expr.desc() if descending else expr.asc())
    return clauses


def relation_loader(model: type[Any], path: str, entity: str | None = None) -> Any:
    """
    Build a ``selectinload`` option for a dotted relation path.

    ``"comments.author"`` loads ``Post.comments`` and, for each comment,
    ``Comment.author``.
    """
    segments = [s.strip() for s in path.split(".")]
    if not all(segments):
        raise UnsupportedRelationError(entity or model.__name__, path)

    option: Any = None
    current = model
    for segment in segments:
        prop = relationship_property(current, segment, entity)
        attr = getattr(current, segment)
        option = selectinload(attr) if option is None else option.selectinload(attr)
        current = prop.mapper.class_
    return option
