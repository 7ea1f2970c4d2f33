"""Binary comparisons, set membership and inclusive ranges."""

from __future__ import annotations

import operator
from typing import TYPE_CHECKING, Any, cast

from ...operators import SpecificationOperator
from ..strategy import SQLAlchemyOperator

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy import ColumnElement

COMPARISONS: dict[SpecificationOperator, Callable[[Any, Any], Any]] = {
    SpecificationOperator.EQ: operator.eq,
    SpecificationOperator.NE: operator.ne,
    SpecificationOperator.GT: operator.gt,
    SpecificationOperator.GE: operator.ge,
    SpecificationOperator.LT: operator.lt,
    SpecificationOperator.LE: operator.le,
}


class Compare(SQLAlchemyOperator):
    """``column <op> value`` through the column's operator overloads."""

    def __init__(self, name: SpecificationOperator) -> None:
        self.name = name
        self._compare = COMPARISONS[name]

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", self._compare(column, value))


class Membership(SQLAlchemyOperator):
    """``IN`` over a list operand (``$in:a,b``)."""

    def __init__(self, *, negated: bool = False) -> None:
        self.negated = negated
        self.name = (
            SpecificationOperator.NOT_IN if negated else SpecificationOperator.IN
        )

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        clause = column.in_(list(value))
        return cast("ColumnElement[bool]", ~clause if self.negated else clause)


class Range(SQLAlchemyOperator):
    """``BETWEEN`` over a ``(low, high)`` operand, both bounds included."""

    def __init__(self, *, negated: bool = False) -> None:
        self.negated = negated
        self.name = (
            SpecificationOperator.NOT_BETWEEN
            if negated
            else SpecificationOperator.BETWEEN
        )

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        low, high = value
        clause = column.between(low, high)
        return cast("ColumnElement[bool]", ~clause if self.negated else clause)
