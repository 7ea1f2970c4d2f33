"""ORDER BY construction with null ordering per dialect family."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from sqlalchemy import asc, desc

from .columns import is_entity_key
from .exceptions import MissingSortableColumnsError
from .metadata import MYSQL_FAMILY
from .resolver import resolve_column
from .types import NullSort, SortDirection

if TYPE_CHECKING:
    from .resolver import QueryState
    from .types import PaginateConfig, PaginateQuery, SortBy

logger = logging.getLogger(__name__)

_DIRECTIONS = frozenset(d.value for d in SortDirection)


def resolve_sort_by(query: PaginateQuery, config: PaginateConfig) -> SortBy:
    """Requested sort entries that pass validation, else the configured default."""
    sort_by: SortBy = []
    for column, raw_direction in query.sort_by or []:
        direction = raw_direction.upper()
        if is_entity_key(config.sortable_columns, column) and direction in _DIRECTIONS:
            sort_by.append((column, direction))
        else:
            logger.debug("Ignoring sort %s:%s", column, direction)

    if not sort_by:
        sort_by = list(
            config.default_sort_by
            or [(config.sortable_columns[0], SortDirection.ASC.value)]
        )
    return sort_by


def apply_sorting(
    state: QueryState,
    query: PaginateQuery,
    config: PaginateConfig,
    *,
    log: logging.Logger | None = None,
) -> QueryState:
    if not config.sortable_columns:
        error = MissingSortableColumnsError()
        (log or logger).debug(str(error))
        raise error

    sort_by = resolve_sort_by(query, config)
    is_mysql = state.dialect in MYSQL_FAMILY
    clauses: list[Any] = []
    columns: list[Any] = []

    for column, direction in sort_by:
        state, resolved = resolve_column(state, column)
        expression = resolved.expression
        columns.append(expression)
        order = desc if direction == SortDirection.DESC else asc
        ordered = order(expression)

        if config.null_sort is None:
            clauses.append(ordered)
        elif is_mysql:
            # IS NULL sorts 0 before 1
            clauses.append(
                expression.is_(None)
                if config.null_sort is NullSort.LAST
                else expression.is_not(None)
            )
            clauses.append(ordered)
        elif config.null_sort is NullSort.LAST:
            clauses.append(ordered.nulls_last())
        else:
            clauses.append(ordered.nulls_first())

    state = state.with_stmt(state.stmt.order_by(*clauses))
    return replace(state, sort_by=sort_by, order_columns=tuple(columns))
