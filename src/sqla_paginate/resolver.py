"""
Column resolution against a ``Select`` statement.

:class:`QueryState` is the accumulator threaded through every stage of
``paginate``: the statement plus the aliased entities joined so far, the
relations to load eagerly and the per-entity column restrictions. Stages
never mutate a state; they return a new one.

:func:`resolve_column` turns a dotted column path into a
:class:`ResolvedColumn`, adding any left joins the path needs. Joins are
keyed by the alias from :func:`~sqla_paginate.columns.relation_alias`, so
two paths sharing a relation prefix share the join.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from sqlalchemy import inspect, literal_column
from sqlalchemy.orm import aliased, contains_eager, load_only

from .columns import (
    fix_column_alias,
    get_properties_by_column_name,
    path_prefixes,
    relation_alias,
)
from .exceptions import ColumnResolutionError
from .metadata import EntityMetadata, extract_virtual_property
from .types import PaginationLimit, PaginationType

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sqlalchemy import ColumnElement, Select

    from .types import ColumnProperties, SortBy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryState:
    """Immutable accumulator passed between pagination stages.

    Attributes:
        stmt: Statement built so far.
        root: Root entity (mapped class or ``aliased()`` entity).
        root_alias: Alias used as the prefix of every generated alias.
        dialect: Dialect name of the bound engine (``sqlite``, ``postgresql``...).
        joins: ``{join_alias: aliased_entity}`` for every left join added.
        join_paths: ``{join_alias: relation_path}``.
        eager: Join aliases whose relationship is populated from the join.
        load_only: ``{alias: attribute_keys}`` column restrictions.
        is_paginated / limit / page / pagination_type: Set by the pagination
            stage.
        sort_by / search_by / select: What the stages actually applied.
        order_columns: Expressions the sort stage ordered by.
    """

    stmt: Select[Any]
    root: Any
    root_alias: str
    dialect: str = "default"
    joins: Mapping[str, Any] = field(default_factory=dict)
    join_paths: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    eager: tuple[str, ...] = ()
    load_only: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    is_paginated: bool = True
    limit: int = PaginationLimit.DEFAULT_LIMIT
    page: int = 1
    pagination_type: PaginationType = PaginationType.TAKE_AND_SKIP
    sort_by: SortBy = field(default_factory=list)
    order_columns: tuple[Any, ...] = ()
    search_by: list[str] = field(default_factory=list)
    select: list[str] | None = None

    @property
    def metadata(self) -> EntityMetadata:
        return EntityMetadata(self.root)

    def with_stmt(self, stmt: Select[Any]) -> QueryState:
        return replace(self, stmt=stmt)

    def where(self, *criteria: ColumnElement[bool]) -> QueryState:
        return replace(self, stmt=self.stmt.where(*criteria))


@dataclass(frozen=True)
class ResolvedColumn:
    """A column path bound to an expression usable in the statement."""

    properties: ColumnProperties
    alias: str
    expression: Any
    is_relation: bool = False
    is_embedded: bool = False
    is_virtual_property: bool = False
    is_literal: bool = False
    python_type: type[Any] | None = None


def join_relation_path(
    state: QueryState, relation_path: Sequence[str], *, eager: bool = False
) -> QueryState:
    """Left-join every hop of ``relation_path`` that is not joined yet."""
    joins = dict(state.joins)
    join_paths = dict(state.join_paths)
    eager_aliases = list(state.eager)
    stmt = state.stmt

    for path in path_prefixes(relation_path):
        segment = path[-1]
        alias = relation_alias(state.root_alias, path)
        if alias not in joins:
            parent_alias = relation_alias(state.root_alias, path[:-1])
            parent = joins.get(parent_alias, state.root)
            parent_metadata = EntityMetadata(parent)
            if not parent_metadata.has_relation(segment):
                raise ColumnResolutionError(".".join(path), parent_metadata.name)
            target = aliased(parent_metadata.relation_target(segment), name=alias)
            stmt = stmt.outerjoin(getattr(parent, segment).of_type(target))
            joins[alias] = target
            join_paths[alias] = path
            logger.debug("Joined %s as %s", ".".join(path), alias)
        if eager and alias not in eager_aliases:
            eager_aliases.append(alias)

    return replace(
        state,
        stmt=stmt,
        joins=joins,
        join_paths=join_paths,
        eager=tuple(eager_aliases),
    )


def join_relations(
    state: QueryState, relations: Sequence[str] | Mapping[str, Any]
) -> QueryState:
    """Join and eagerly load ``relations`` (dotted list or nested mapping)."""
    for path in relation_paths(relations):
        state = join_relation_path(state, path, eager=True)
    return state


def relation_paths(
    relations: Sequence[str] | Mapping[str, Any], prefix: tuple[str, ...] = ()
) -> list[tuple[str, ...]]:
    if not isinstance(relations, dict):
        return [(*prefix, *r.split(".")) for r in relations]
    paths: list[tuple[str, ...]] = []
    for name, nested in relations.items():
        if not nested:
            continue
        path = (*prefix, name)
        paths.append(path)
        if isinstance(nested, dict | list | tuple):
            paths.extend(relation_paths(nested, path))
    return paths


def resolve_column(state: QueryState, column: str) -> tuple[QueryState, ResolvedColumn]:
    """Resolve ``column`` to its alias and expression, joining as needed."""
    properties = get_properties_by_column_name(column)
    metadata = state.metadata
    is_relation = metadata.has_relation(properties.property_path)
    is_embedded = not is_relation and metadata.has_embedded(properties.property_path)
    info = extract_virtual_property(
        metadata, properties.property_path, properties.property_name
    )
    alias = fix_column_alias(
        properties,
        state.root_alias,
        is_relation,
        info.is_virtual_property,
        is_embedded,
        info.query,
    )

    entity: Any = state.root
    attribute: str | None = properties.property_name
    if is_relation:
        names = properties.property_name.split(".")
        relation_path = (properties.property_path or "",)
        if properties.is_nested:
            relation_path += tuple(names[:-1])
            attribute = names[-1]
        state = join_relation_path(state, relation_path)
        entity = state.joins[relation_alias(state.root_alias, relation_path)]
    elif is_embedded:
        attribute = metadata.embedded_attribute(
            properties.property_path or "", properties.property_name
        )
    elif properties.property_path is not None:
        raise ColumnResolutionError(column, metadata.name)

    if info.is_virtual_property and info.query is not None:
        return state, ResolvedColumn(
            properties=properties,
            alias=alias,
            expression=literal_column(alias),
            is_relation=is_relation,
            is_virtual_property=True,
            is_literal=True,
            python_type=info.python_type,
        )

    expression = _column_attribute(entity, attribute)
    if expression is None:
        raise ColumnResolutionError(column, metadata.name)

    python_type = info.python_type
    if python_type is None and attribute:
        python_type = EntityMetadata(entity).find_column(attribute).python_type

    return state, ResolvedColumn(
        properties=properties,
        alias=alias,
        expression=expression,
        is_relation=is_relation,
        is_embedded=is_embedded,
        is_virtual_property=info.is_virtual_property,
        python_type=python_type,
    )


def _column_attribute(entity: Any, name: str | None) -> Any | None:
    if not name:
        return None
    mapper = inspect(entity).mapper
    if name in mapper.relationships or name in mapper.composites:
        return None
    if name in mapper.column_attrs or name in mapper.all_orm_descriptors:
        return getattr(entity, name)
    return None


def build_loader_options(state: QueryState) -> list[Any]:
    """Loader options populating eager relations and restricting columns."""
    options: list[Any] = []

    root_columns = state.load_only.get(state.root_alias)
    if root_columns:
        options.append(load_only(*(getattr(state.root, c) for c in root_columns)))

    for alias in state.eager:
        option: Any = None
        parent = state.root
        path = state.join_paths[alias]
        for idx, segment in enumerate(path):
            child = state.joins[relation_alias(state.root_alias, path[: idx + 1])]
            attribute = getattr(parent, segment).of_type(child)
            option = (
                contains_eager(attribute)
                if option is None
                else option.contains_eager(attribute)
            )
            parent = child
        columns = state.load_only.get(alias)
        if columns:
            option = option.load_only(*(getattr(parent, c) for c in columns))
        options.append(option)

    return options
