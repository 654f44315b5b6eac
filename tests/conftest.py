from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from crud_query import QueryParser, SchemaCatalog, ScopeRegistry
from tests.models import POST_TAGS, Base, Post, post_tags, seed_objects

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from sqlalchemy.ext.asyncio import AsyncEngine


@pytest.fixture
def catalog() -> SchemaCatalog:
    return SchemaCatalog(Base)


@pytest.fixture
def parser(catalog: SchemaCatalog) -> QueryParser:
    return QueryParser(catalog)


@pytest.fixture
def scopes() -> ScopeRegistry:
    registry = ScopeRegistry()

    @registry.scope("posts")
    def published(stmt):
        return stmt.where(Post.published.is_(True))

    @registry.scope("posts", "popular")
    def _popular(stmt):
        return stmt.where(Post.views >= 20)

    return registry


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as seed:
        seed.add_all(seed_objects())
        await seed.flush()
        await seed.execute(
            post_tags.insert(),
            [{"post_id": p, "tag_id": t} for p, t in POST_TAGS],
        )
        await seed.commit()

    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        yield session
