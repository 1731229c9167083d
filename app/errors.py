"""Exception taxonomy shared by the services and the API layer."""
from typing import Optional


class CatalogError(Exception):
    """Base class for failures that map to an HTTP error envelope."""

    status_code = 500
    default_message = "Something went wrong on the server"

    def __init__(self, message: Optional[str] = None, errors: Optional[list[str]] = None):
        self.message = message or self.default_message
        self.errors = list(errors) if errors else []
        super().__init__(self.message)


class ValidationError(CatalogError):
    """One or more field-level constraint violations."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, errors: list[str], message: Optional[str] = None):
        super().__init__(message, errors)


class NotFoundError(CatalogError):
    status_code = 404
    default_message = "Resource not found"


class ConflictError(CatalogError):
    """A uniqueness constraint was violated."""

    status_code = 400

    def __init__(self, field: Optional[str] = None):
        if field:
            message = f"{field[:1].upper()}{field[1:]} already exists."
        else:
            message = "Duplicate value already exists."
        super().__init__(message)
        self.field = field


class StorageError(CatalogError):
    """The store failed for a reason other than a constraint violation."""

    status_code = 500
