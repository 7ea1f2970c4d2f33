"""
sqla-paginate: paginated, sortable, searchable and filterable queries over
async SQLAlchemy.
"""

from __future__ import annotations

from .exceptions import (
    ColumnResolutionError,
    ConfigurationError,
    InvalidSourceError,
    MissingSortableColumnsError,
    PaginateError,
)
from .filtering import FilterOperator, FilterSuffix
from .mixins import SoftDeleteMixin
from .operators import SpecificationOperator
from .paginate import Paginator, paginate
from .query_string import parse_query_params, parse_url
from .sources import ModelSource, SelectSource, Source
from .specifications import Condition
from .types import (
    NullSort,
    Paginated,
    PaginatedLinks,
    PaginatedMeta,
    PaginateConfig,
    PaginateQuery,
    PaginationLimit,
    PaginationType,
    SortDirection,
)

__all__ = [
    "ColumnResolutionError",
    "Condition",
    "ConfigurationError",
    "FilterOperator",
    "FilterSuffix",
    "InvalidSourceError",
    "MissingSortableColumnsError",
    "ModelSource",
    "NullSort",
    "PaginateConfig",
    "PaginateError",
    "PaginateQuery",
    "Paginated",
    "PaginatedLinks",
    "PaginatedMeta",
    "PaginationLimit",
    "PaginationType",
    "Paginator",
    "SelectSource",
    "SoftDeleteMixin",
    "SortDirection",
    "Source",
    "SpecificationOperator",
    "paginate",
    "parse_query_params",
    "parse_url",
]
