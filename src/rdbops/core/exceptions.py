"""
Exception hierarchy for rdbops.

Every error the service layer raises derives from BaseApplicationException and
carries the HTTP status the API answers with plus a JSON-ready body.
"""

from typing import Any


class BaseApplicationException(Exception):
    """Root of the rdbops exceptions."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Args:
            message: Human readable description
            error_code: Machine readable code, defaults to the class name
            details: Structured context echoed in API error bodies
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or type(self).__name__
        self.details = dict(details or {})

    def to_dict(self) -> dict[str, Any]:
        """Body of the API error response."""
        return {"error": self.error_code, "message": self.message, "details": self.details}


class SnapshotNotFoundException(BaseApplicationException):
    """No summary is registered under the requested name (it may still be parsing)."""

    status_code = 404

    def __init__(self, name: str, **kwargs: Any) -> None:
        details = {**kwargs.pop("details", {}), "snapshot": name}
        super().__init__(f"Snapshot '{name}' not found or still parsing", details=details, **kwargs)
        self.name = name


class InvalidSnapshotSummaryException(BaseApplicationException):
    """A summary document failed validation."""

    status_code = 422

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None, **kwargs: Any) -> None:
        """
        Args:
            message: Error message
            errors: Field-level validation errors as ``{"loc", "msg", "type"}`` dicts
        """
        details = kwargs.pop("details", {})
        if errors:
            details = {**details, "errors": errors}
        super().__init__(message, details=details, **kwargs)


class HistoryStoreException(BaseApplicationException):
    """The history file could not be read or written."""

    def __init__(self, message: str, path: str | None = None, **kwargs: Any) -> None:
        details = kwargs.pop("details", {})
        if path:
            details = {**details, "path": path}
        super().__init__(message, details=details, **kwargs)
