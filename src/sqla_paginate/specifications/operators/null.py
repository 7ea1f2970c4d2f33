"""``IS NULL`` / ``IS NOT NULL``; the operand is ignored."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from ...operators import SpecificationOperator
from ..strategy import SQLAlchemyOperator

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement


class NullCheck(SQLAlchemyOperator):
    def __init__(self, *, negated: bool = False) -> None:
        self.negated = negated
        self.name = (
            SpecificationOperator.IS_NOT_NULL
            if negated
            else SpecificationOperator.IS_NULL
        )

    def apply(self, column: Any, _value: Any) -> ColumnElement[bool]:
        if self.negated:
            return cast("ColumnElement[bool]", column.is_not(None))
        return cast("ColumnElement[bool]", column.is_(None))
