"""Exception hierarchy for the catalog service.

Each error carries the HTTP status the API layer answers with.
"""


class CatalogError(Exception):
    """Base exception for all catalog errors."""

    status_code = 500


class NotFoundError(CatalogError):
    """Raised when an id does not resolve to an existing project or property."""

    status_code = 404


class ValidationError(CatalogError):
    """Raised when a payload fails schema or domain constraints."""

    status_code = 400


class InvalidFilterError(ValidationError):
    """Raised when a search filter value is outside its enumeration."""

    def __init__(self, filter_name: str, message: str):
        super().__init__(message)
        self.filter_name = filter_name


class StoreError(CatalogError):
    """Raised when the persistence layer fails.

    The message is safe to show to callers; the underlying exception is
    chained as ``__cause__`` and only logged.
    """

    status_code = 500


class ConfigurationError(CatalogError):
    """Raised when configuration is invalid or missing."""
