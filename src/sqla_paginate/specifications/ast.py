"""
Predicate tree for static ``where`` configuration and parsed filters.

A where object is either a mapping (AND of its entries) or a list of
mappings (OR of the per-item AND groups). Nested mappings accumulate a
dotted key path, so ``{"author": {"name": "x"}}`` becomes the leaf
``author.name = 'x'``. Values stop the recursion when they are a
:class:`Condition`, ``None`` (``IS NULL``) or any other primitive (equality).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from ..operators import SpecificationOperator


@dataclass(frozen=True)
class Condition:
    """Explicit comparison used as a where value, e.g. ``Condition(">", 3)``."""

    operator: SpecificationOperator
    value: Any = None
    negated: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.operator, SpecificationOperator):
            object.__setattr__(self, "operator", SpecificationOperator(self.operator))

    def __invert__(self) -> Condition:
        return Condition(self.operator, self.value, not self.negated)


@dataclass(frozen=True)
class Leaf:
    column: str
    operator: SpecificationOperator
    value: Any = None


@dataclass(frozen=True)
class And:
    nodes: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Or:
    nodes: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Not:
    node: Node


Node = Union[Leaf, And, Or, Not]


def build_where_tree(obj: Mapping[str, Any] | list[Mapping[str, Any]]) -> Node:
    """Flatten a where object into a predicate tree."""
    if isinstance(obj, list | tuple):
        return Or(tuple(_flatten(item) for item in obj))
    return _flatten(obj)


def _flatten(obj: Mapping[str, Any], prefix: str = "") -> And:
    nodes: list[Node] = []
    for key, value in obj.items():
        column = f"{prefix}.{key}" if prefix else key
        if isinstance(value, Mapping):
            nodes.extend(_flatten(value, column).nodes)
        else:
            nodes.append(_leaf(column, value))
    return And(tuple(nodes))


def _leaf(column: str, value: Any) -> Node:
    if isinstance(value, Condition):
        leaf = Leaf(column, value.operator, value.value)
        return Not(leaf) if value.negated else leaf
    if value is None:
        return Leaf(column, SpecificationOperator.IS_NULL)
    return Leaf(column, SpecificationOperator.EQ, value)
