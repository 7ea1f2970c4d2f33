"""
Compile a predicate tree into a SQLAlchemy filter expression.

Every leaf is resolved through :func:`~sqla_paginate.resolver.resolve_column`,
which adds the left joins its relation path needs (and reuses those already
present), then compiled through the operator registry. Compilation threads
the :class:`~sqla_paginate.resolver.QueryState` so that joins added while
compiling are kept.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, not_, or_

from ..resolver import resolve_column
from .ast import And, Leaf, Not, build_where_tree
from .operators import DEFAULT_SQLA_REGISTRY

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy import ColumnElement

    from ..resolver import QueryState
    from .ast import Node
    from .strategy import SQLAlchemyOperatorRegistry


def compile_predicate(
    state: QueryState,
    node: Node,
    registry: SQLAlchemyOperatorRegistry | None = None,
) -> tuple[QueryState, ColumnElement[bool] | None]:
    """
    Compile ``node`` against ``state``.

    Returns:
        The updated state and the boolean expression, or ``None`` when the
        node holds no predicate (an empty group).
    """
    reg = registry or DEFAULT_SQLA_REGISTRY

    if isinstance(node, Leaf):
        state, resolved = resolve_column(state, node.column)
        return state, reg.apply(node.operator, resolved.expression, node.value)

    if isinstance(node, Not):
        state, inner = compile_predicate(state, node.node, reg)
        return state, None if inner is None else not_(inner)

    clauses: list[ColumnElement[bool]] = []
    for child in node.nodes:
        state, clause = compile_predicate(state, child, reg)
        if clause is not None:
            clauses.append(clause)

    if not clauses:
        return state, None
    if len(clauses) == 1:
        return state, clauses[0]
    combine = and_ if isinstance(node, And) else or_
    return state, combine(*clauses)


def generate_where_statement(
    state: QueryState,
    where: Mapping[str, Any] | list[Mapping[str, Any]],
    registry: SQLAlchemyOperatorRegistry | None = None,
) -> QueryState:
    """AND the flattened ``where`` object into the statement."""
    state, clause = compile_predicate(state, build_where_tree(where), registry)
    if clause is None:
        return state
    return state.where(clause)
