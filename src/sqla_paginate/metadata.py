"""
Entity metadata lookups over SQLAlchemy mapper inspection.

Wraps ``sqlalchemy.inspect(entity)`` so the resolver can ask the questions
it needs (is this a relation? an embedded composite? a virtual column?)
without touching mapper internals itself. Works for mapped classes and for
``aliased()`` entities alike.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy import Column, inspect
from sqlalchemy.orm import ColumnProperty

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.orm import Composite, Mapper

POSTGRES_FAMILY = frozenset({"postgresql", "cockroachdb"})
MYSQL_FAMILY = frozenset({"mysql", "mariadb"})

SOFT_DELETE_INFO_KEY = "soft_delete"
VIRTUAL_INFO_KEY = "virtual"
QUERY_INFO_KEY = "query"


@dataclass(frozen=True)
class ColumnInfo:
    """What the resolver needs to know about a mapped column attribute."""

    property_name: str
    is_virtual_property: bool = False
    query: Callable[[str], str] | None = None
    python_type: type[Any] | None = None


NOT_A_COLUMN = ColumnInfo(property_name="")


class EntityMetadata:
    """Metadata view of one mapped entity (class or alias)."""

    def __init__(self, entity: Any) -> None:
        self.entity = entity
        self.mapper: Mapper[Any] = inspect(entity).mapper

    @property
    def name(self) -> str:
        return self.mapper.class_.__name__

    # -- relations / embedded ------------------------------------------------

    def has_relation(self, property_path: str | None) -> bool:
        if not property_path:
            return False
        return property_path in self.mapper.relationships

    def relation_target(self, property_path: str) -> type[Any]:
        return self.mapper.relationships[property_path].mapper.class_

    def has_embedded(self, property_path: str | None) -> bool:
        if not property_path:
            return False
        return property_path in self.mapper.composites

    def embedded_attribute(self, property_path: str, property_name: str) -> str | None:
        """Attribute key backing ``property_name`` inside a composite."""
        composite: Composite[Any] = self.mapper.composites[property_path]
        keys = [prop.key for prop in composite.props]
        composite_class = composite.composite_class
        if isinstance(composite_class, type) and dataclasses.is_dataclass(
            composite_class
        ):
            names = [f.name for f in dataclasses.fields(composite_class)]
            if property_name in names and len(names) == len(keys):
                return keys[names.index(property_name)]
        for candidate in (property_name, f"{property_path}_{property_name}"):
            if candidate in keys:
                return candidate
        return None

    def eager_relations(self) -> list[str]:
        """Relationships configured to load eagerly by default."""
        return [
            key
            for key, rel in self.mapper.relationships.items()
            if rel.lazy in ("joined", "selectin")
        ]

    # -- columns ---------------------------------------------------------------

    def find_column(self, property_name: str) -> ColumnInfo:
        prop = self.mapper.attrs.get(property_name)
        if not isinstance(prop, ColumnProperty):
            return NOT_A_COLUMN
        expression = prop.expression
        is_virtual = bool(prop.info.get(VIRTUAL_INFO_KEY)) or not (
            isinstance(expression, Column) and expression.table is not None
        )
        column_type = getattr(expression, "type", None)
        return ColumnInfo(
            property_name=property_name,
            is_virtual_property=is_virtual,
            query=prop.info.get(QUERY_INFO_KEY),
            python_type=_python_type(column_type),
        )

    def has_column(self, property_name: str) -> bool:
        return self.find_column(property_name) is not NOT_A_COLUMN

    def primary_key_paths(self) -> list[str]:
        return [
            self.mapper.get_property_by_column(column).key
            for column in self.mapper.primary_key
        ]

    def soft_delete_column(self) -> str | None:
        for prop in self.mapper.column_attrs:
            for column in prop.columns:
                if isinstance(column, Column) and column.info.get(
                    SOFT_DELETE_INFO_KEY
                ):
                    return prop.key
        return None


def extract_virtual_property(
    metadata: EntityMetadata,
    property_path: str | None,
    property_name: str,
) -> ColumnInfo:
    """Column info for ``property_name``, looked up on the relation target when
    ``property_path`` names a relation."""
    if property_path:
        if not metadata.has_relation(property_path):
            return NOT_A_COLUMN
        metadata = EntityMetadata(metadata.relation_target(property_path))
    return metadata.find_column(property_name)


def includes_all_primary_key_columns(
    metadata: EntityMetadata, property_paths: list[str] | None
) -> bool:
    if not property_paths:
        return False
    return all(pk in property_paths for pk in metadata.primary_key_paths())


def _python_type(column_type: Any) -> type[Any] | None:
    if column_type is None:
        return None
    try:
        return column_type.python_type  # type: ignore[no-any-return]
    except NotImplementedError:
        return None
