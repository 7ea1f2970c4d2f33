"""Page size resolution and LIMIT/OFFSET application."""

from __future__ import annotations

import math
from dataclasses import replace
from typing import TYPE_CHECKING

from .types import PaginationLimit, PaginationType

if TYPE_CHECKING:
    from .resolver import QueryState
    from .types import PaginateConfig, PaginateQuery


def positive_number_or_default(
    value: int | None, default: int, min_value: int = 0
) -> int:
    if value is None or value < min_value:
        return default
    return value


def requested_limit(query: PaginateQuery) -> int | None:
    """``query.limit``, with anything below ``NO_PAGINATION`` read as unset."""
    if query.limit is None or query.limit < PaginationLimit.NO_PAGINATION:
        return None
    return query.limit


def is_paginated(query: PaginateQuery, config: PaginateConfig) -> bool:
    limit = requested_limit(query)
    return not (
        limit == PaginationLimit.COUNTER_ONLY
        or (
            limit == PaginationLimit.NO_PAGINATION
            and config.max_limit == PaginationLimit.NO_PAGINATION
        )
    )


def get_pagination_limit(
    query: PaginateQuery, paginated: bool, config: PaginateConfig
) -> int:
    """
    Effective page size.

    ``COUNTER_ONLY`` always wins; an unpaginated request reports the default
    limit; ``max_limit == NO_PAGINATION`` lifts the cap.
    """
    limit = requested_limit(query)

    if limit == PaginationLimit.COUNTER_ONLY:
        return PaginationLimit.COUNTER_ONLY
    if not paginated:
        return config.default_limit
    if config.max_limit == PaginationLimit.NO_PAGINATION:
        return config.default_limit if limit is None else limit
    if limit == PaginationLimit.NO_PAGINATION:
        return config.default_limit
    return min(config.default_limit if limit is None else limit, config.max_limit)


def apply_pagination(
    state: QueryState, query: PaginateQuery, config: PaginateConfig
) -> QueryState:
    page = positive_number_or_default(query.page, 1, 1)
    paginated = is_paginated(query, config)
    limit = int(get_pagination_limit(query, paginated, config))
    state = replace(
        state,
        is_paginated=paginated,
        limit=limit,
        page=page,
        pagination_type=config.pagination_type,
    )

    if not paginated:
        return state

    offset = (page - 1) * limit
    if config.pagination_type is PaginationType.LIMIT_AND_OFFSET:
        return state.with_stmt(state.stmt.limit(limit).offset(offset))
    return state.with_stmt(state.stmt.slice(offset, offset + limit))


def total_pages(state: QueryState, total_items: int) -> int:
    if not state.is_paginated:
        return 1
    return math.ceil(total_items / state.limit)
