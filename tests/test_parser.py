from __future__ import annotations

import dataclasses
from urllib.parse import parse_qs

import pytest

from crud_query import (
    All,
    Contains,
    CountOnly,
    Exclusion,
    QueryConfig,
    QueryContext,
    QueryParser,
    Range,
    SchemaCatalog,
    SortDirection,
    SortKey,
)


def test_parse_full_request(parser: QueryParser) -> None:
    params = {
        "scope": "published,popular",
        "title": "SQL",
        "views": "10..",
        "not": "status:archived",
        "sort": "comments_count:desc,title",
        "with": "comments,author",
        "return": "count",
    }
    ctx = parser.parse("posts", params)

    assert ctx.entity == "posts"
    assert ctx.scopes == ("published", "popular")
    assert ctx.filters == (Contains("title", "SQL"), Range("views", lower=10))
    assert ctx.exclusions == (Exclusion("status", ("archived",)),)
    assert ctx.sort == (
        SortKey("comments_count", SortDirection.DESC, relation="comments"),
        SortKey("title"),
    )
    assert ctx.relations == ("comments", "author")
    assert ctx.shape == CountOnly()
    assert not ctx.returns_entities


def test_empty_request(parser: QueryParser) -> None:
    ctx = parser.parse("posts", {})
    assert ctx == QueryContext(entity="posts")
    assert ctx.shape == All()
    assert ctx.returns_entities


def test_parsing_is_idempotent(parser: QueryParser) -> None:
    params = {"title": "SQL", "sort": "views:desc", "page": "2", "limit": "2"}
    assert parser.parse("posts", params) == parser.parse("posts", params)


def test_relations_are_deduplicated(parser: QueryParser) -> None:
    ctx = parser.parse("posts", {"with": "comments, author,comments,,"})
    assert ctx.relations == ("comments", "author")


def test_context_is_immutable(parser: QueryParser) -> None:
    ctx = parser.parse("posts", {"title": "SQL"})
    with pytest.raises(dataclasses.FrozenInstanceError):
        ctx.entity = "users"  # type: ignore[misc]
    evolved = ctx.evolve(scopes=("published",))
    assert evolved.scopes == ("published",)
    assert ctx.scopes == ()


def test_parse_qs_mapping(parser: QueryParser) -> None:
    params = parse_qs("views=5&views=18..30&sort=views:desc")
    ctx = parser.parse("posts", params)
    assert ctx.filters == (Range("views", 18, 30),)
    assert ctx.sort == (SortKey("views", SortDirection.DESC),)


def test_custom_parameter_names(catalog: SchemaCatalog) -> None:
    parser = QueryParser(
        catalog, QueryConfig(sort_key="order", not_key="except", with_key="include")
    )
    ctx = parser.parse(
        "posts", {"order": "views", "except": "1", "include": "tags", "sort": "title"}
    )
    assert ctx.sort == (SortKey("views"),)
    assert ctx.exclusions == (Exclusion("id", (1,)),)
    assert ctx.relations == ("tags",)


def test_stages_run_in_pipeline_order(parser: QueryParser) -> None:
    names = [stage.__name__ for stage in parser.stages]
    assert names == [
        "with_scopes",
        "with_filters",
        "with_exclusions",
        "with_sort",
        "with_shape",
        "with_relations",
    ]
