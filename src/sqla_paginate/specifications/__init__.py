from __future__ import annotations

from .ast import And, Condition, Leaf, Node, Not, Or, build_where_tree
from .compiler import compile_predicate, generate_where_statement
from .operators import DEFAULT_SQLA_REGISTRY, build_default_sqla_registry
from .strategy import SQLAlchemyOperator, SQLAlchemyOperatorRegistry

__all__ = [
    "And",
    "Condition",
    "DEFAULT_SQLA_REGISTRY",
    "Leaf",
    "Node",
    "Not",
    "Or",
    "SQLAlchemyOperator",
    "SQLAlchemyOperatorRegistry",
    "build_default_sqla_registry",
    "build_where_tree",
    "compile_predicate",
    "generate_where_statement",
]
