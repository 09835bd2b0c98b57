"""
Kind-tagged errors raised by the catalog engine.

The engine never maps these to HTTP status codes; that is the API layer's job.
"""


class CatalogError(Exception):
    code = "UNKNOWN_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidFilterError(CatalogError):
    """Malformed caller input, rejected by a validation layer."""

    code = "VALIDATION_ERROR"


class DataSourceError(CatalogError):
    """Any failure reported by the data source collaborator."""

    code = "DATABASE_ERROR"


class NotFoundError(CatalogError):
    """Single-offering lookup found no row."""

    code = "NOT_FOUND"
