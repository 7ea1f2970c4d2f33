"""
Dotted column paths and the alias naming scheme.

Everything here is pure string work: no SQLAlchemy import. The resolver
(``sqla_paginate.resolver``) decides *whether* a path is a relation,
embedded or virtual column and then asks :func:`fix_column_alias` for the
alias; joins are named with :func:`relation_alias` so that both sides agree.

Naming, for root alias ``__root``::

    name                -> __root.name
    address.(city)      -> __root.address.city      (embedded)
    author.name         -> __root_author_rel.name
    author.publisher.id -> __root_author_rel_publisher_rel.id
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .types import ColumnProperties

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

_EMBEDDED_OPEN = "("
_EMBEDDED_CLOSE = ")"


def get_properties_by_column_name(column: str) -> ColumnProperties:
    """Split ``column`` into its anchor segment and the remaining path."""
    segments = column.split(".")

    if len(segments) <= 1:
        return ColumnProperties(
            property_name=segments[0], is_nested=False, column=segments[0]
        )

    rest = segments[1:]
    property_name = ".".join(rest)
    is_nested = not property_name.startswith(_EMBEDDED_OPEN) and len(rest) > 1
    property_name = property_name.replace(_EMBEDDED_OPEN, "", 1).replace(
        _EMBEDDED_CLOSE, "", 1
    )

    return ColumnProperties(
        property_path=segments[0],
        property_name=property_name,
        is_nested=is_nested,
        column=f"{segments[0]}.{property_name}",
    )


def fix_column_alias(
    properties: ColumnProperties,
    alias: str,
    is_relation: bool = False,
    is_virtual_property: bool = False,
    is_embedded: bool = False,
    query: Callable[[str], str] | None = None,
) -> str:
    """Return the SQL alias for a resolved column path.

    ``query`` is the custom SQL expression of a virtual column; it receives
    the table alias and its output is parenthesised so that its bound
    parameters stay apart from the outer statement's.
    """
    if is_relation:
        relation_alias_name = f"{alias}_{properties.property_path}_rel"
        if is_virtual_property and query is not None:
            return f"({query(relation_alias_name)})"
        if is_virtual_property or properties.is_nested:
            if "." in properties.property_name:
                *relations, nested_column = properties.property_name.split(".")
                nested_relations = "_".join(f"{r}_rel" for r in relations)
                return f"{relation_alias_name}_{nested_relations}.{nested_column}"
            return f"{relation_alias_name}_{properties.property_name}"
        return f"{relation_alias_name}.{properties.property_name}"

    if is_virtual_property:
        if query is not None:
            return f"({query(alias)})"
        return f"{alias}_{properties.property_name}"

    if is_embedded:
        return f"{alias}.{properties.property_path}.{properties.property_name}"

    return f"{alias}.{properties.property_name}"


def relation_alias(root_alias: str, relation_path: Sequence[str]) -> str:
    """Join alias for a relation path, e.g. ``("a", "b")`` -> ``root_a_rel_b_rel``."""
    return root_alias + "".join(f"_{segment}_rel" for segment in relation_path)


def path_prefixes(segments: Sequence[str]) -> list[tuple[str, ...]]:
    """Every leading sub-path, shortest first: ``(a, b)`` -> ``[(a,), (a, b)]``."""
    return [tuple(segments[: idx + 1]) for idx in range(len(segments))]


def is_entity_key(entity_columns: Iterable[str] | None, column: str) -> bool:
    return column in (entity_columns or ())
