"""FilterWhitelist: per-resource filterable columns and operators."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from .syntax import normalize_token

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from .syntax import FilterToken


class FilterWhitelist:
    """
    Allowed filter operators per column.

    A column maps to ``True`` (any operator) or to a list of tokens
    (``"$eq"``, ``"in"``, ``FilterOperator.GT``...). Negation needs ``$not``
    listed as well. A bare value counts as ``$eq``.
    """

    def __init__(
        self, filterable_columns: Mapping[str, Sequence[str] | Literal[True]] | None
    ) -> None:
        self._columns: dict[str, frozenset[str] | None] = {}
        for column, rule in (filterable_columns or {}).items():
            if rule is True:
                self._columns[column] = None
            else:
                self._columns[column] = frozenset(normalize_token(t) for t in rule)

    def __contains__(self, column: object) -> bool:
        return column in self._columns

    def is_allowed(self, column: str, token: FilterToken) -> bool:
        if column not in self._columns:
            return False
        allowed = self._columns[column]
        if allowed is None:
            return True
        if token.suffix is not None and token.suffix.value not in allowed:
            return False
        return token.operator.value in allowed
