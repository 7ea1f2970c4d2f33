"""
Operator strategies for predicate leaves.

A strategy turns a resolved column and an already coerced operand into a
boolean clause. Leaves are compiled by looking their operator up in a
:class:`SQLAlchemyOperatorRegistry`; a resource can hand ``paginate`` its own
registry to add operators or take some away.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy import ColumnElement

    from ..operators import SpecificationOperator


class SQLAlchemyOperator(ABC):
    """Compiles the operator named by ``name``."""

    name: SpecificationOperator

    @abstractmethod
    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        """
        Args:
            column: Aliased attribute or literal column from the resolver.
            value: Operand, already coerced to the column's Python type.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name.value!r})"


class SQLAlchemyOperatorRegistry:
    """Strategies keyed by :class:`SpecificationOperator`."""

    def __init__(self, operators: Iterable[SQLAlchemyOperator] = ()) -> None:
        self._operators: dict[str, SQLAlchemyOperator] = {}
        self.register(*operators)

    def register(self, *operators: SQLAlchemyOperator) -> None:
        for strategy in operators:
            self._operators[strategy.name] = strategy

    def unregister(self, name: SpecificationOperator) -> None:
        self._operators.pop(name, None)

    def get(self, name: SpecificationOperator) -> SQLAlchemyOperator | None:
        return self._operators.get(name)

    def has(self, name: SpecificationOperator) -> bool:
        return name in self._operators

    __contains__ = has

    @property
    def supported_operators(self) -> frozenset[str]:
        return frozenset(self._operators)

    def copy(self) -> SQLAlchemyOperatorRegistry:
        return SQLAlchemyOperatorRegistry(self._operators.values())

    def apply(
        self, name: SpecificationOperator, column: Any, value: Any
    ) -> ColumnElement[bool]:
        """
        Raises:
            ValueError: If no strategy is registered for ``name``.
        """
        strategy = self._operators.get(name)
        if strategy is None:
            raise ValueError(f"Unsupported operator {name!r} in this registry")
        return strategy.apply(column, value)
