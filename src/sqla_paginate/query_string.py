"""
Navigation links and the query-string format they use.

Links repeat the full request state::

    /posts?page=2&limit=10&sortBy=id:DESC&search=foo&filter.status=$eq:a

``$``, ``:`` and ``,`` stay literal; other reserved characters are
percent-encoded and spaces become ``+``. :func:`parse_url` reads such a link
back into a :class:`~sqla_paginate.types.PaginateQuery`.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qsl, urlencode, urlsplit

from .pagination import total_pages as count_pages
from .types import PaginatedLinks, PaginateQuery, PaginationLimit

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from .resolver import QueryState
    from .types import PaginateConfig

_ABSOLUTE_URL = re.compile(r"^(?:[a-z+]+:)?//", re.IGNORECASE)
FILTER_PREFIX = "filter."
LITERAL_CHARACTERS = "$:,"


def get_query_url_components(path: str) -> tuple[str, str]:
    """Split ``path`` into ``(origin, path)``; origin is empty for relative paths."""
    if not _ABSOLUTE_URL.match(path):
        return "", path
    parts = urlsplit(path)
    origin = f"{parts.scheme}://{parts.netloc}" if parts.scheme else f"//{parts.netloc}"
    return origin, parts.path or "/"


def link_path(query: PaginateQuery, config: PaginateConfig) -> str | None:
    if query.path is None:
        return None
    origin, path = get_query_url_components(query.path)
    if config.relative_path:
        return path
    if config.origin:
        return config.origin + path
    return origin + path


def link_limit(state: QueryState) -> int:
    """``limit`` a link repeats; unpaginated requests keep asking for no limit."""
    if state.is_paginated or state.limit == PaginationLimit.COUNTER_ONLY:
        return state.limit
    return PaginationLimit.NO_PAGINATION


def link_options(
    state: QueryState, query: PaginateQuery, config: PaginateConfig
) -> str:
    """Everything after ``page=N`` in a link, URL-encoded."""
    pairs = [("limit", str(int(link_limit(state))))]
    pairs.extend(
        ("sortBy", f"{column}:{direction}") for column, direction in state.sort_by
    )
    if query.search:
        pairs.append(("search", query.search))
    if query.search_by and not config.ignore_search_by_in_query_param:
        pairs.extend(("searchBy", column) for column in state.search_by)
    if is_query_selected(state, config):
        pairs.append(("select", ",".join(state.select or [])))
    for name, value in (query.filter or {}).items():
        values = [value] if isinstance(value, str) else value
        pairs.extend((f"{FILTER_PREFIX}{name}", v) for v in values)
    return "&" + urlencode(pairs, safe=LITERAL_CHARACTERS)


def is_query_selected(state: QueryState, config: PaginateConfig) -> bool:
    return state.select is not None and state.select != config.select


def build_links(
    state: QueryState,
    query: PaginateQuery,
    config: PaginateConfig,
    total_items: int,
) -> PaginatedLinks:
    path = link_path(query, config)
    if path is None:
        return PaginatedLinks()

    page = state.page
    pages = count_pages(state, total_items)
    options = link_options(state, query, config)

    def build_link(p: int) -> str:
        return f"{path}?page={p}{options}"

    return PaginatedLinks(
        current=build_link(page),
        first=build_link(1) if page != 1 else None,
        previous=build_link(page - 1) if page - 1 > 0 else None,
        next=build_link(page + 1) if page + 1 <= pages else None,
        last=build_link(pages) if page != pages and total_items else None,
    )


def parse_query_params(
    params: Mapping[str, str | list[str]] | Iterable[tuple[str, str]],
    path: str | None = None,
) -> PaginateQuery:
    """Build a :class:`PaginateQuery` from decoded query parameters."""
    values = _group(params)

    sort_by = []
    for entry in values.get("sortBy", []):
        column, _, direction = entry.partition(":")
        if column and direction:
            sort_by.append((column, direction.upper()))

    search_by = [
        c for entry in values.get("searchBy", []) for c in entry.split(",") if c
    ]
    select = [c for c in _first(values, "select", "").split(",") if c]
    filters: dict[str, str | list[str]] = {
        key[len(FILTER_PREFIX) :]: items[0] if len(items) == 1 else items
        for key, items in values.items()
        if key.startswith(FILTER_PREFIX) and len(key) > len(FILTER_PREFIX)
    }

    return PaginateQuery(
        page=_int(_first(values, "page")) or 1,
        limit=_int(_first(values, "limit")),
        sort_by=sort_by or None,
        search=_first(values, "search") or None,
        search_by=search_by or None,
        filter=filters or None,
        select=select or None,
        path=path,
    )


def parse_url(url: str) -> PaginateQuery:
    """Parse a full link, e.g. one of :class:`PaginatedLinks`."""
    parts = urlsplit(url)
    origin = f"{parts.scheme}://{parts.netloc}" if parts.netloc else ""
    return parse_query_params(
        parse_qsl(parts.query, keep_blank_values=True), origin + parts.path
    )


def _group(
    params: Mapping[str, str | list[str]] | Iterable[tuple[str, str]],
) -> dict[str, list[str]]:
    grouped: dict[str, list[str]] = {}
    items: Iterable[tuple[str, Any]] = (
        params.items() if hasattr(params, "items") else params
    )
    for key, value in items:
        bucket = grouped.setdefault(key, [])
        if isinstance(value, list | tuple):
            bucket.extend(value)
        else:
            bucket.append(value)
    return grouped


def _first(
    values: Mapping[str, list[str]], key: str, default: str | None = None
) -> Any:
    items = values.get(key)
    return items[0] if items else default


def _int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None
