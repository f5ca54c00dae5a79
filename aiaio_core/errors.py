"""
Exceptions raised by the core package.

Library functions raise these; entry points (CLI, tools, API routes)
catch them and decide how to report.
"""


class AdminError(RuntimeError):
    """Base class for every error raised by aiaio_core."""


class ConfigurationError(AdminError):
    """A required setting or credential is missing."""


class QueryError(AdminError):
    """The database client returned an error for a query."""

    def __init__(self, table: str, message: str):
        super().__init__(f"{table}: {message}")
        self.table = table


class RecordNotFound(AdminError):
    """A lookup by id returned no row."""

    def __init__(self, table: str, record_id: str):
        super().__init__(f"{table} record {record_id} not found")
        self.table = table
        self.record_id = record_id


class StorageError(AdminError):
    """An object storage call failed."""


class ValidationFailed(AdminError):
    """Input was rejected before anything was written."""
