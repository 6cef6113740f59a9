"""
Domain errors raised by the stores and services.

Each class carries the HTTP status it is reported with; the handlers
registered in main.py turn them into `{"detail": ...}` responses.
"""


class AnalyticsError(Exception):
    status_code = 500

    def __init__(self, message: str = "Server error"):
        super().__init__(message)
        self.message = message


class NotFound(AnalyticsError):
    status_code = 404


class Forbidden(AnalyticsError):
    status_code = 403

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


class AlreadyExists(AnalyticsError):
    status_code = 409


class InvalidArgument(AnalyticsError):
    status_code = 400


class StorageFailure(AnalyticsError):
    """Persistence-layer failure. Never retried; reported as a generic 500."""
    status_code = 500


class Unauthorized(AnalyticsError):
    status_code = 401
