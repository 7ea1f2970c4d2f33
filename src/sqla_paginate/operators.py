"""
Leaf operators of a predicate tree.

Configured ``where`` objects name them through
:class:`~sqla_paginate.specifications.Condition` (``Condition(">", 3)``) and
filter tokens map onto them in :mod:`sqla_paginate.filtering.syntax`.
AND, OR and NOT are node types of the tree, not operators.
"""

from enum import Enum


class SpecificationOperator(str, Enum):
    EQ = "="
    NE = "!="
    GT = ">"
    GE = ">="
    LT = "<"
    LE = "<="

    # Operand is a list / a (low, high) pair
    IN = "in"
    NOT_IN = "not_in"
    BETWEEN = "between"
    NOT_BETWEEN = "not_between"

    LIKE = "like"
    ILIKE = "ilike"
    CONTAINS = "contains"
    ICONTAINS = "icontains"
    STARTSWITH = "startswith"
    ISTARTSWITH = "istartswith"
    ENDSWITH = "endswith"
    IENDSWITH = "iendswith"

    # No operand
    IS_NULL = "is_null"
    IS_NOT_NULL = "is_not_null"
