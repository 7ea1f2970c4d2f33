"""Column selection: restrict loaded attributes to the configured columns."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Any

from .columns import get_properties_by_column_name, relation_alias
from .metadata import EntityMetadata, includes_all_primary_key_columns
from .resolver import join_relation_path

if TYPE_CHECKING:
    from .resolver import QueryState
    from .types import PaginateConfig, PaginateQuery


def resolve_select(
    state: QueryState, query: PaginateQuery, config: PaginateConfig
) -> list[str] | None:
    """
    Columns to load.

    ``query.select`` narrows ``config.select`` unless ignored; a request that
    leaves out a primary-key column gets the configured list.
    """
    select = config.select
    if config.select and query.select and not config.ignore_select_in_query_param:
        select = [c for c in config.select if c in query.select]
    if not includes_all_primary_key_columns(state.metadata, query.select):
        select = config.select
    return select


def apply_columns_selection(
    state: QueryState, query: PaginateQuery, config: PaginateConfig
) -> QueryState:
    select = resolve_select(state, query, config)
    if not select:
        return replace(state, select=select)

    load_only: dict[str, list[str]] = {}
    for column in select:
        state, alias, attribute = _selected_attribute(state, column)
        if attribute is None:
            continue
        keys = load_only.setdefault(alias, [])
        if attribute not in keys:
            keys.append(attribute)

    return replace(
        state,
        select=select,
        load_only={alias: tuple(keys) for alias, keys in load_only.items()},
    )


def _selected_attribute(
    state: QueryState, column: str
) -> tuple[QueryState, str, str | None]:
    properties = get_properties_by_column_name(column)
    metadata = state.metadata
    alias = state.root_alias
    entity: Any = state.root
    attribute: str | None = properties.property_name

    if metadata.has_relation(properties.property_path):
        names = properties.property_name.split(".")
        path = (properties.property_path or "", *names[:-1])
        state = join_relation_path(state, path, eager=True)
        alias = relation_alias(state.root_alias, path)
        entity = state.joins[alias]
        attribute = names[-1]
    elif metadata.has_embedded(properties.property_path):
        attribute = metadata.embedded_attribute(
            properties.property_path or "", properties.property_name
        )

    if attribute is None or not EntityMetadata(entity).has_column(attribute):
        return state, alias, None
    return state, alias, attribute
