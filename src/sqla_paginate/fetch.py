"""Statement execution: rows, count, or both."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select, tuple_

from .resolver import build_loader_options
from .types import PaginationLimit, PaginationType

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

    from .resolver import QueryState

logger = logging.getLogger(__name__)


def count_statement(state: QueryState) -> Select[Any]:
    """``COUNT`` of distinct root primary keys under the same joins and filters."""
    primary_key = [
        getattr(state.root, key) for key in state.metadata.primary_key_paths()
    ]
    keys = (
        state.stmt.with_only_columns(*primary_key)
        .distinct()
        .order_by(None)
        .limit(None)
        .offset(None)
        .subquery()
    )
    return select(func.count()).select_from(keys)


def page_keys_statement(state: QueryState) -> Select[Any]:
    """
    Distinct root primary keys of the requested page.

    The statement keeps the joins, filters, ORDER BY and LIMIT/OFFSET of
    ``state``; sort expressions are selected alongside the keys so DISTINCT
    can order by them.
    """
    keys = [
        getattr(state.root, key).label(f"pk_{i}")
        for i, key in enumerate(state.metadata.primary_key_paths())
    ]
    ordering = [
        column.label(f"sort_{i}") for i, column in enumerate(state.order_columns)
    ]
    return state.stmt.with_only_columns(*keys, *ordering).distinct()


def rows_statement(state: QueryState) -> Select[Any]:
    """
    Statement for the page rows.

    Take-and-skip over joined relations pages root entities: the joined
    statement is restricted to :func:`page_keys_statement` instead of cutting
    the joined row set, so to-many collections load whole.
    """
    stmt = state.stmt
    if (
        state.is_paginated
        and state.joins
        and state.pagination_type is PaginationType.TAKE_AND_SKIP
    ):
        page = page_keys_statement(state).subquery("page_keys")
        primary_key = [
            getattr(state.root, key) for key in state.metadata.primary_key_paths()
        ]
        page_keys = select(*(page.c[f"pk_{i}"] for i in range(len(primary_key))))
        target = primary_key[0] if len(primary_key) == 1 else tuple_(*primary_key)
        stmt = stmt.limit(None).offset(None).where(target.in_(page_keys))
    return stmt.options(*build_loader_options(state))


async def fetch_records(
    session: AsyncSession, state: QueryState
) -> tuple[list[Any], int]:
    """
    Execute ``state``.

    Returns:
        ``(rows, total_items)``. Count-only requests return no rows;
        unpaginated requests count the rows they fetched.
    """
    if state.limit == PaginationLimit.COUNTER_ONLY:
        total = await session.scalar(count_statement(state))
        return [], total or 0

    result = await session.scalars(rows_statement(state))
    rows = list(result.unique().all())

    if state.is_paginated:
        total = await session.scalar(count_statement(state))
        logger.debug("Fetched %s of %s rows", len(rows), total)
        return rows, total or 0

    return rows, len(rows)
