from __future__ import annotations

import pytest
from sqlalchemy import select

from crud_query import ScopeRegistry, UnknownScopeError
from tests.models import Post


def test_registered_names(scopes: ScopeRegistry) -> None:
    assert scopes.names("posts") == ["popular", "published"]
    assert scopes.names("users") == []


def test_unknown_scope_raises_on_get(scopes: ScopeRegistry) -> None:
    with pytest.raises(UnknownScopeError) as exc:
        scopes.get("posts", "bogus")
    assert exc.value.name == "bogus"
    assert exc.value.entity == "posts"


def test_scopes_are_per_entity(scopes: ScopeRegistry) -> None:
    with pytest.raises(UnknownScopeError):
        scopes.get("users", "published")


def test_apply_skips_unknown_names(scopes: ScopeRegistry) -> None:
    stmt = scopes.apply("posts", ["bogus", "published"], select(Post))
    sql = str(stmt.compile())
    assert "WHERE posts.published IS" in sql


def test_apply_in_order(scopes: ScopeRegistry) -> None:
    stmt = scopes.apply("posts", ["popular", "published"], select(Post))
    where = str(stmt.compile()).split("WHERE", 1)[1]
    assert where.index("posts.views") < where.index("posts.published")


def test_register_plain_function() -> None:
    registry = ScopeRegistry()
    registry.register("posts", "drafts", lambda s: s.where(Post.status == "draft"))
    assert "posts.status" in str(registry.apply("posts", ["drafts"], select(Post)))
