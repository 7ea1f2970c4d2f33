"""Query, configuration and response models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")

SortBy = list[tuple[str, str]]


class PaginationLimit(IntEnum):
    """Limit sentinels. Never overlap with a real page size."""

    NO_PAGINATION = -1
    COUNTER_ONLY = 0
    DEFAULT_LIMIT = 20
    DEFAULT_MAX_LIMIT = 100


class PaginationType(str, Enum):
    LIMIT_AND_OFFSET = "limit"
    TAKE_AND_SKIP = "take"


class NullSort(str, Enum):
    FIRST = "first"
    LAST = "last"


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


@dataclass(frozen=True)
class ColumnProperties:
    """Structured form of a dotted column reference.

    Attributes:
        property_path: Root segment (relation or embedded name), if any.
        property_name: Remaining path, dot-joined, escape markers removed.
        is_nested: The remaining path crosses at least one more relation.
        column: Canonical ``root.rest`` form.
    """

    property_name: str
    is_nested: bool
    column: str
    property_path: str | None = None


class PaginateQuery(BaseModel):
    """Structured request produced by the transport layer."""

    model_config = ConfigDict(frozen=True)

    page: int = 1
    limit: int | None = None
    sort_by: SortBy | None = None
    search: str | None = None
    search_by: list[str] | None = None
    filter: dict[str, str | list[str]] | None = None
    select: list[str] | None = None
    path: str | None = None


class PaginateConfig(BaseModel):
    """Static, per-resource pagination rules."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    sortable_columns: list[str]
    searchable_columns: list[str] | None = None
    select: list[str] | None = None
    filterable_columns: dict[str, list[str] | Literal[True]] | None = None
    default_sort_by: SortBy | None = None
    default_limit: int = PaginationLimit.DEFAULT_LIMIT
    max_limit: int = PaginationLimit.DEFAULT_MAX_LIMIT
    null_sort: NullSort | None = None
    pagination_type: PaginationType = PaginationType.TAKE_AND_SKIP
    relations: list[str] | dict[str, Any] | None = None
    where: dict[str, Any] | list[dict[str, Any]] | None = None
    load_eager_relations: bool = False
    with_deleted: bool = False
    relative_path: bool = False
    origin: str | None = None
    ignore_search_by_in_query_param: bool = False
    ignore_select_in_query_param: bool = False

    @field_validator("default_limit", mode="before")
    @classmethod
    def _default_limit_or_fallback(cls, value: Any) -> Any:
        return value or PaginationLimit.DEFAULT_LIMIT

    @field_validator("max_limit", mode="before")
    @classmethod
    def _max_limit_or_fallback(cls, value: Any) -> Any:
        return value or PaginationLimit.DEFAULT_MAX_LIMIT


class PaginatedMeta(BaseModel):
    items_per_page: int
    total_items: int
    current_page: int
    total_pages: int
    sort_by: SortBy = Field(default_factory=list)
    search_by: list[str] | None = None
    search: str | None = None
    select: list[str] | None = None
    filter: dict[str, str | list[str]] | None = None


class PaginatedLinks(BaseModel):
    first: str | None = None
    previous: str | None = None
    current: str | None = None
    next: str | None = None
    last: str | None = None


class Paginated(BaseModel, Generic[T]):
    """Page of entities with its metadata and navigation links."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    data: list[T]
    meta: PaginatedMeta
    links: PaginatedLinks = Field(default_factory=PaginatedLinks)
