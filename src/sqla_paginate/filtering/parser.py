"""
Turn ``query.filter`` into a predicate tree and AND it into the statement.

Values for the same column combine with OR; distinct columns with AND.
Disallowed or malformed values are dropped and logged at debug level.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..resolver import resolve_column
from ..specifications.ast import And, Leaf, Not, Or
from ..specifications.compiler import compile_predicate
from ..specifications.operators import DEFAULT_SQLA_REGISTRY
from .syntax import parse_filter_token, token_operand
from .whitelist import FilterWhitelist

if TYPE_CHECKING:
    from ..resolver import QueryState
    from ..specifications.ast import Node
    from ..specifications.strategy import SQLAlchemyOperatorRegistry
    from ..types import PaginateConfig, PaginateQuery

logger = logging.getLogger(__name__)


def build_filter_tree(
    state: QueryState,
    query: PaginateQuery,
    config: PaginateConfig,
    registry: SQLAlchemyOperatorRegistry | None = None,
) -> tuple[QueryState, Node | None]:
    """
    Predicate tree for ``query.filter``.

    Tokens whose operator ``registry`` cannot compile are dropped like any
    other disallowed input.
    """
    if not query.filter or not config.filterable_columns:
        return state, None

    reg = registry or DEFAULT_SQLA_REGISTRY
    whitelist = FilterWhitelist(config.filterable_columns)
    groups: list[Node] = []

    for column, raw in query.filter.items():
        if column not in whitelist:
            logger.debug("Ignoring filter on non-filterable column %s", column)
            continue

        tokens = []
        for value in [raw] if isinstance(raw, str) else raw:
            token = parse_filter_token(value)
            if token is None or not whitelist.is_allowed(column, token):
                logger.debug("Ignoring filter %s=%s", column, value)
                continue
            if not reg.has(token.specification_operator):
                logger.debug("Ignoring unsupported filter %s=%s", column, value)
                continue
            tokens.append(token)
        if not tokens:
            continue

        state, resolved = resolve_column(state, column)
        nodes: list[Node] = []
        for token in tokens:
            try:
                operand = token_operand(token, resolved.python_type)
            except ValueError as e:
                logger.debug("Ignoring filter %s: %s", column, e)
                continue
            leaf: Node = Leaf(column, token.specification_operator, operand)
            nodes.append(Not(leaf) if token.suffix is not None else leaf)

        if nodes:
            groups.append(Or(tuple(nodes)))

    if not groups:
        return state, None
    return state, And(tuple(groups))


def apply_filters(
    state: QueryState,
    query: PaginateQuery,
    config: PaginateConfig,
    registry: SQLAlchemyOperatorRegistry | None = None,
) -> QueryState:
    state, tree = build_filter_tree(state, query, config, registry)
    if tree is None:
        return state
    state, clause = compile_predicate(state, tree, registry)
    if clause is None:
        return state
    return state.where(clause)
