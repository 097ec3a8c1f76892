# clash_solver/errors.py
"""
Error taxonomy of the timetable core.

All of these are recoverable: they are raised at the operation that caused
them and never leave the schedule store half-updated. ``status_code`` is what
the HTTP layer answers with.
"""


class ClashSolverError(Exception):
    status_code = 400

    def __init__(self, message: str, **detail):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_dict(self) -> dict:
        return {"error": type(self).__name__, "message": self.message, **self.detail}


class InvalidSession(ClashSolverError):
    """end <= start, malformed time, or a duration off the grid step."""
    status_code = 422


class InvalidGridConfig(ClashSolverError):
    status_code = 422


class DuplicateEntry(ClashSolverError):
    status_code = 409


class NotFound(ClashSolverError):
    """Catalog lookup missed."""
    status_code = 404


class EntryNotFound(NotFound):
    pass


class SnapshotNotFound(NotFound):
    pass


class CatalogUnavailable(ClashSolverError):
    # network/database side, the caller may retry or fall back to manual entry
    status_code = 503


class StaleLookup(ClashSolverError):
    """A newer lookup was issued before this one resolved."""
    status_code = 409
