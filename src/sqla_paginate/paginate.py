"""
Paginate a model or a ``Select`` statement from a structured query.

Usage::

    from sqla_paginate import ModelSource, PaginateConfig, paginate

    config = PaginateConfig(
        sortable_columns=["id", "name"],
        searchable_columns=["name"],
        filterable_columns={"status": ["$eq", "$in", "$not"]},
    )
    page = await paginate(query, ModelSource(session, Post), config)

Stages run in a fixed order (select, filter, paginate, sort, search), each
taking and returning a :class:`~sqla_paginate.resolver.QueryState`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .exceptions import InvalidSourceError
from .fetch import fetch_records
from .filtering.parser import apply_filters
from .pagination import apply_pagination, total_pages
from .query_string import build_links, is_query_selected
from .resolver import join_relations
from .search import apply_search
from .selection import apply_columns_selection
from .sorting import apply_sorting
from .sources import ModelSource, SelectSource, initial_state
from .specifications.compiler import generate_where_statement
from .types import Paginated, PaginatedMeta, PaginationLimit

if TYPE_CHECKING:
    from .resolver import QueryState
    from .sources import Source
    from .specifications.strategy import SQLAlchemyOperatorRegistry
    from .types import PaginateConfig, PaginateQuery


class Paginator:
    """Builds the statement for one request and assembles its page."""

    def __init__(
        self,
        source: Source,
        query: PaginateQuery,
        config: PaginateConfig,
        *,
        registry: SQLAlchemyOperatorRegistry | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.source = source
        self.query = query
        self.config = config
        self.registry = registry
        self.logger = logger or logging.getLogger(__name__)
        self.state = self._initialize()

    def _initialize(self) -> QueryState:
        state = initial_state(self.source)
        is_model = isinstance(self.source, ModelSource)

        if is_model and not self.config.relations and self.config.load_eager_relations:
            state = join_relations(state, state.metadata.eager_relations())

        if self.config.relations:
            state = join_relations(state, self.config.relations)

        if not self.config.with_deleted:
            column = state.metadata.soft_delete_column()
            if column is not None:
                state = state.where(getattr(state.root, column).is_(None))

        if self.config.where and is_model:
            state = generate_where_statement(state, self.config.where, self.registry)

        return state

    def apply_columns_selection(self) -> Paginator:
        self.state = apply_columns_selection(self.state, self.query, self.config)
        return self

    def apply_filters(self) -> Paginator:
        if self.query.filter:
            self.state = apply_filters(
                self.state, self.query, self.config, self.registry
            )
        return self

    def apply_pagination(self) -> Paginator:
        self.state = apply_pagination(self.state, self.query, self.config)
        return self

    def apply_sorting(self) -> Paginator:
        self.state = apply_sorting(
            self.state, self.query, self.config, log=self.logger
        )
        return self

    def apply_search(self) -> Paginator:
        self.state = apply_search(self.state, self.query, self.config)
        return self

    def build_meta(self, rows: list[Any], total_items: int) -> PaginatedMeta:
        state = self.state
        if state.limit == PaginationLimit.COUNTER_ONLY:
            items_per_page = total_items
        elif state.is_paginated:
            items_per_page = state.limit
        else:
            items_per_page = len(rows)

        search_by = None
        if self.query.search and state.search_by != (
            self.config.searchable_columns or []
        ):
            search_by = state.search_by

        return PaginatedMeta(
            items_per_page=items_per_page,
            total_items=total_items,
            current_page=state.page,
            total_pages=total_pages(state, total_items),
            sort_by=state.sort_by,
            search_by=search_by,
            search=self.query.search,
            select=state.select if is_query_selected(state, self.config) else None,
            filter=self.query.filter,
        )

    async def get_paginated_response(self) -> Paginated[Any]:
        rows, total_items = await fetch_records(self.source.session, self.state)
        self.logger.debug(
            "Page %s: %s rows of %s", self.state.page, len(rows), total_items
        )
        return Paginated[Any](
            data=rows,
            meta=self.build_meta(rows, total_items),
            links=build_links(self.state, self.query, self.config, total_items),
        )


async def paginate(
    query: PaginateQuery,
    source: Source,
    config: PaginateConfig,
    *,
    registry: SQLAlchemyOperatorRegistry | None = None,
    logger: logging.Logger | None = None,
) -> Paginated[Any]:
    """
    Fetch one page of ``source`` for ``query`` under ``config``.

    Args:
        query: Parsed request (page, limit, sort, search, filter, select).
        source: :class:`ModelSource` or :class:`SelectSource`.
        config: Per-resource rules.
        registry: Operator registry for where/filter predicates.
            Falls back to ``DEFAULT_SQLA_REGISTRY``.
        logger: Logger for configuration errors.

    Raises:
        MissingSortableColumnsError: If ``config.sortable_columns`` is empty.
        InvalidSourceError: If ``source`` is not a known source.
    """
    if not isinstance(source, ModelSource | SelectSource):
        raise InvalidSourceError(source)

    paginator = Paginator(source, query, config, registry=registry, logger=logger)
    (
        paginator.apply_columns_selection()
        .apply_filters()
        .apply_pagination()
        .apply_sorting()
        .apply_search()
    )
    return await paginator.get_paginated_response()
