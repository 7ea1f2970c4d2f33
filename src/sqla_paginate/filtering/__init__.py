"""Query-string filters: token syntax, per-column allow-list, tree building."""

from __future__ import annotations

from .parser import apply_filters, build_filter_tree
from .syntax import (
    FilterOperator,
    FilterSuffix,
    FilterToken,
    coerce_value,
    parse_filter_token,
    token_operand,
)
from .whitelist import FilterWhitelist

__all__ = [
    "FilterOperator",
    "FilterSuffix",
    "FilterToken",
    "FilterWhitelist",
    "apply_filters",
    "build_filter_tree",
    "coerce_value",
    "parse_filter_token",
    "token_operand",
]
