"""Shared fixtures: an in-memory aiosqlite database seeded with 25 posts."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import aliased

from sqla_paginate.resolver import QueryState

from .models import Author, Base, Comment, Post, Publisher, build_posts

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable


@pytest.fixture
async def engine():
    eng = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
async def session(engine) -> AsyncGenerator[AsyncSession, None]:
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as sess:
        yield sess


@pytest.fixture
async def seeded(session: AsyncSession) -> AsyncSession:
    session.add(Publisher(id=1, name="Acme"))
    session.add_all(
        [
            Author(id=1, name="Ann", publisher_id=1),
            Author(id=2, name="Bob", publisher_id=None),
        ]
    )
    session.add_all(build_posts())
    session.add_all(
        [
            Comment(id=1, post_id=1, body="first"),
            Comment(id=2, post_id=1, body="second"),
            Comment(id=3, post_id=1, body="third"),
            Comment(id=4, post_id=2, body="only"),
        ]
    )
    await session.commit()
    session.expunge_all()
    return session


def _make_state(dialect: str = "sqlite") -> QueryState:
    root = aliased(Post, name="__root")
    return QueryState(stmt=select(root), root=root, root_alias="__root", dialect=dialect)


@pytest.fixture
def make_state() -> Callable[..., QueryState]:
    """Factory for a ``__root``-aliased Post state on a given dialect."""
    return _make_state


@pytest.fixture
def state() -> QueryState:
    return _make_state()
