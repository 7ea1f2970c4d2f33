"""
Filter token syntax: ``[$not:]$op:value``.

The leading ``$`` of a token is optional (``eq:a`` reads as ``$eq:a``) and a
value carrying no operator token is an equality. ``$null`` takes no value;
``$in`` and ``$btw`` split theirs on ``,``. Only tokens from the front of the
string are consumed, so values may contain ``:`` themselves.
"""

from __future__ import annotations

import datetime
import decimal
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..operators import SpecificationOperator


class FilterOperator(str, Enum):
    EQ = "$eq"
    GT = "$gt"
    GTE = "$gte"
    LT = "$lt"
    LTE = "$lte"
    BTW = "$btw"
    IN = "$in"
    NULL = "$null"
    ILIKE = "$ilike"
    SW = "$sw"
    EW = "$ew"
    CONTAINS = "$contains"


class FilterSuffix(str, Enum):
    NOT = "$not"


_OPERATORS: dict[str, FilterOperator] = {op.value: op for op in FilterOperator}

_TOKEN_TO_OPERATOR: dict[FilterOperator, SpecificationOperator] = {
    FilterOperator.EQ: SpecificationOperator.EQ,
    FilterOperator.GT: SpecificationOperator.GT,
    FilterOperator.GTE: SpecificationOperator.GE,
    FilterOperator.LT: SpecificationOperator.LT,
    FilterOperator.LTE: SpecificationOperator.LE,
    FilterOperator.BTW: SpecificationOperator.BETWEEN,
    FilterOperator.IN: SpecificationOperator.IN,
    FilterOperator.NULL: SpecificationOperator.IS_NULL,
    FilterOperator.ILIKE: SpecificationOperator.ICONTAINS,
    FilterOperator.SW: SpecificationOperator.ISTARTSWITH,
    FilterOperator.EW: SpecificationOperator.IENDSWITH,
    FilterOperator.CONTAINS: SpecificationOperator.CONTAINS,
}

# Pattern operators compare against the raw string
_PATTERN_OPERATORS = frozenset(
    {
        FilterOperator.ILIKE,
        FilterOperator.SW,
        FilterOperator.EW,
        FilterOperator.CONTAINS,
    }
)

_TRUE = frozenset({"true", "1"})
_FALSE = frozenset({"false", "0"})


@dataclass(frozen=True)
class FilterToken:
    """One parsed filter value."""

    operator: FilterOperator
    value: str | None = None
    suffix: FilterSuffix | None = None

    @property
    def specification_operator(self) -> SpecificationOperator:
        return _TOKEN_TO_OPERATOR[self.operator]


def normalize_token(token: str) -> str:
    token = token.strip().lower()
    return token if token.startswith("$") else f"${token}"


def parse_filter_token(raw: str) -> FilterToken | None:
    """
    Parse one filter value.

    Returns:
        The token, or ``None`` when the input names an unknown ``$`` operator.
    """
    parts = raw.split(":")
    idx = 0
    suffix: FilterSuffix | None = None

    if len(parts) > 1 and normalize_token(parts[0]) == FilterSuffix.NOT.value:
        suffix = FilterSuffix.NOT
        idx = 1

    head = parts[idx]
    operator = _OPERATORS.get(normalize_token(head))
    if operator is None:
        if head.startswith("$"):
            return None
        operator = FilterOperator.EQ
    else:
        idx += 1

    if operator is FilterOperator.NULL:
        return FilterToken(operator=operator, suffix=suffix)

    rest = parts[idx:]
    if not rest:
        return None
    return FilterToken(operator=operator, value=":".join(rest), suffix=suffix)


def token_operand(token: FilterToken, python_type: type[Any] | None) -> Any:
    """
    Comparison value for ``token``, coerced to the column's type.

    Raises:
        ValueError: If the value cannot be coerced or is malformed.
    """
    if token.operator is FilterOperator.NULL:
        return None
    value = token.value or ""
    if token.operator in _PATTERN_OPERATORS:
        return value
    if token.operator is FilterOperator.IN:
        return [coerce_value(v, python_type) for v in value.split(",")]
    if token.operator is FilterOperator.BTW:
        bounds = value.split(",")
        if len(bounds) != 2:
            raise ValueError(f"$btw expects two values, got {value!r}")
        return [coerce_value(v, python_type) for v in bounds]
    return coerce_value(value, python_type)


def coerce_value(value: str, python_type: type[Any] | None) -> Any:  # noqa: PLR0911
    """Convert a query-string value to ``python_type``."""
    if python_type is None or python_type is str:
        return value
    if python_type is bool:
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise ValueError(f"Invalid boolean: {value!r}")
    if python_type is int:
        return int(value)
    if python_type is float:
        return float(value)
    if python_type is decimal.Decimal:
        try:
            return decimal.Decimal(value)
        except decimal.InvalidOperation as e:
            raise ValueError(f"Invalid decimal: {value!r}") from e
    if python_type is datetime.datetime:
        return datetime.datetime.fromisoformat(value)
    if python_type is datetime.date:
        return datetime.date.fromisoformat(value)
    if python_type is uuid.UUID:
        return uuid.UUID(value)
    if isinstance(python_type, type) and issubclass(python_type, Enum):
        return _coerce_enum(value, python_type)
    return value


def _coerce_enum(value: str, enum_type: type[Enum]) -> Enum:
    try:
        return enum_type(value)
    except ValueError:
        pass
    try:
        return enum_type[value]
    except KeyError as e:
        raise ValueError(f"Invalid {enum_type.__name__}: {value!r}") from e
