"""Case-insensitive ``%term%`` search across the searchable columns."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Any

from sqlalchemy import Text, cast, or_

from .columns import is_entity_key
from .metadata import POSTGRES_FAMILY
from .resolver import resolve_column

if TYPE_CHECKING:
    from .resolver import QueryState
    from .types import PaginateConfig, PaginateQuery


def resolve_search_by(query: PaginateQuery, config: PaginateConfig) -> list[str]:
    """Columns to search: the requested subset of the configured ones, or all."""
    searchable = config.searchable_columns or []
    if query.search_by and not config.ignore_search_by_in_query_param:
        return [c for c in query.search_by if is_entity_key(searchable, c)]
    return list(searchable)


def apply_search(
    state: QueryState, query: PaginateQuery, config: PaginateConfig
) -> QueryState:
    search_by = resolve_search_by(query, config)
    state = replace(state, search_by=search_by)
    if not query.search or not search_by:
        return state

    pattern = f"%{query.search}%"
    clauses: list[Any] = []
    for column in search_by:
        state, resolved = resolve_column(state, column)
        expression = resolved.expression
        if state.dialect in POSTGRES_FAMILY:
            expression = cast(expression, Text)
        clauses.append(expression.ilike(pattern))

    return state.where(or_(*clauses))
