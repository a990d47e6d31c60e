"""Domain exceptions for the sales admin API.

Services raise these instead of HTTP errors; ``sales_admin.main`` maps each
one to a status code. All of them inherit from SalesAdminError.
"""


class SalesAdminError(Exception):
    """Base exception for all sales admin errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgumentError(SalesAdminError):
    """Raised when a request is missing a required parameter or uses an unknown value.

    Examples:
    - ``period`` is not one of day, week, month, year
    - a comparison is requested without both subjects
    - a stock change would take the quantity below zero
    """

    status_code = 400


class NotFoundError(SalesAdminError):
    """Raised when a referenced category, product or inventory record does not exist."""

    status_code = 404


class ConflictError(SalesAdminError):
    """Raised when a create or update would break a uniqueness rule."""

    status_code = 409


class UpstreamFailureError(SalesAdminError):
    """Raised when a query against the data store fails.

    Never retried; the whole operation fails.
    """

    status_code = 500
