"""
Pagination exception hierarchy.

Only configuration problems and unsupported sources are raised; malformed
client input is dropped by the stages that consume it. All exceptions
provide ``to_dict()`` for API-friendly error responses.
"""

from __future__ import annotations

from typing import Any


class PaginateError(Exception):
    """Root exception for sqla-paginate."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class ConfigurationError(PaginateError):
    """The resource definition is broken, not the request.

    Maps to a service-unavailable response.
    """

    status_code = 503

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "CONFIGURATION_ERROR",
            "message": str(self),
            "status_code": self.status_code,
        }


class MissingSortableColumnsError(ConfigurationError):
    """Raised when ``sortable_columns`` is empty."""

    def __init__(
        self, message: str = "Missing required 'sortable_columns' config."
    ) -> None:
        super().__init__(message)


class ColumnResolutionError(ConfigurationError):
    """A configured column path does not exist on the model."""

    def __init__(self, column: str, model: str) -> None:
        self.column = column
        self.model = model
        super().__init__(f"Column {column!r} cannot be resolved on {model}")

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["column"] = self.column
        return data


class InvalidSourceError(PaginateError, TypeError):
    """Raised when ``paginate`` receives something other than a known source."""

    def __init__(self, source: object) -> None:
        self.source = source
        super().__init__(
            f"Unsupported source {type(source).__name__}; "
            "expected ModelSource or SelectSource"
        )
