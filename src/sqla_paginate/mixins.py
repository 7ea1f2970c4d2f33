"""
Soft-delete column mixin.

Rows whose ``deleted_at`` is set are left out of every page unless the
resource is configured with ``with_deleted=True``. Any column can play this
role by carrying ``info={"soft_delete": True}``; the mixin is the usual way.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, Index, text
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from .metadata import SOFT_DELETE_INFO_KEY


class SoftDeleteMixin:
    """Adds a nullable ``deleted_at`` column marked as the soft-delete column."""

    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True, info={SOFT_DELETE_INFO_KEY: True}
    )

    @declared_attr.directive
    def __table_args__(cls: Any) -> tuple[Any, ...]:  # noqa: N805
        # Partial index over live rows
        live_where = text("deleted_at IS NULL")
        return (
            Index(
                f"ix_{cls.__tablename__}_soft_delete_live",
                "deleted_at",
                postgresql_where=live_where,
                sqlite_where=live_where,
            ),
        )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self, at: datetime | None = None) -> None:
        self.deleted_at = at or datetime.now(timezone.utc)

    def restore(self) -> None:
        self.deleted_at = None
