"""
Pattern operators.

Case-sensitive affix matches escape ``%`` and ``_`` in the operand. The
case-insensitive ones compile to ``ILIKE`` around the operand as given, the
same way the search stage builds its patterns.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from ...operators import SpecificationOperator
from ..strategy import SQLAlchemyOperator

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement

AFFIX_METHODS = {
    SpecificationOperator.CONTAINS: "contains",
    SpecificationOperator.STARTSWITH: "startswith",
    SpecificationOperator.ENDSWITH: "endswith",
}

ILIKE_TEMPLATES = {
    SpecificationOperator.ICONTAINS: "%{}%",
    SpecificationOperator.ISTARTSWITH: "{}%",
    SpecificationOperator.IENDSWITH: "%{}",
}


class Like(SQLAlchemyOperator):
    """The operand is the pattern."""

    def __init__(self, *, case_sensitive: bool = True) -> None:
        self.case_sensitive = case_sensitive
        self.name = (
            SpecificationOperator.LIKE
            if case_sensitive
            else SpecificationOperator.ILIKE
        )

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        if self.case_sensitive:
            return cast("ColumnElement[bool]", column.like(value))
        return cast("ColumnElement[bool]", column.ilike(value))


class Affix(SQLAlchemyOperator):
    def __init__(self, name: SpecificationOperator) -> None:
        self.name = name
        self._method = AFFIX_METHODS[name]

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        match = getattr(column, self._method)
        return cast("ColumnElement[bool]", match(value, autoescape=True))


class InsensitiveAffix(SQLAlchemyOperator):
    def __init__(self, name: SpecificationOperator) -> None:
        self.name = name
        self._template = ILIKE_TEMPLATES[name]

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.ilike(self._template.format(value)))
