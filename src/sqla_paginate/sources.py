"""
Where the rows come from.

``ModelSource`` pages over a mapped class, aliased as ``__root``; the
configured ``where`` and eager relations apply to it. ``SelectSource`` pages
over a caller-built ``Select`` whose first column entity is the root.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from sqlalchemy import inspect, select
from sqlalchemy.orm import aliased

from .exceptions import InvalidSourceError
from .resolver import QueryState

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

ROOT_ALIAS = "__root"


@dataclass(frozen=True)
class ModelSource:
    session: AsyncSession
    model: type[Any]


@dataclass(frozen=True)
class SelectSource:
    session: AsyncSession
    statement: Select[Any]


Source = Union[ModelSource, SelectSource]


def dialect_name(session: AsyncSession) -> str:
    return session.get_bind().dialect.name


def initial_state(source: Source) -> QueryState:
    """Fresh :class:`QueryState` for ``source``."""
    if isinstance(source, ModelSource):
        root = aliased(source.model, name=ROOT_ALIAS)
        return QueryState(
            stmt=select(root),
            root=root,
            root_alias=ROOT_ALIAS,
            dialect=dialect_name(source.session),
        )

    if isinstance(source, SelectSource):
        descriptions = source.statement.column_descriptions
        root = descriptions[0].get("entity") if descriptions else None
        if root is None:
            raise InvalidSourceError(source)
        info = inspect(root)
        root_alias = getattr(info, "name", None) or info.mapper.local_table.name
        return QueryState(
            stmt=source.statement,
            root=root,
            root_alias=root_alias,
            dialect=dialect_name(source.session),
        )

    raise InvalidSourceError(source)
