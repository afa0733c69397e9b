"""
API-level exceptions.

Raised by views and middleware and turned into the JSON error envelope by
ApiErrorMiddleware.
"""


class ApiError(Exception):
    """
    Base exception for errors reported to API clients.

    Attributes:
        message: Client-facing error (never contains internals)
        status_code: HTTP status code of the response
        detail: Optional longer explanation sent as the envelope message
    """

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None, detail: str | None = None):
        super().__init__(message)
        self.message = message
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class ValidationFailed(ApiError):
    """Raised when request data does not pass validation (HTTP 400)"""

    status_code = 400

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or []


class NotFound(ApiError):
    """Raised for unknown routes (HTTP 404)"""

    status_code = 404

    def __init__(self, message: str = 'Recurso no encontrado', detail: str | None = None):
        super().__init__(message, detail=detail)


class TooManyRequests(ApiError):
    """Raised when a client exceeds the request budget (HTTP 429)"""

    status_code = 429


class InternalServerError(ApiError):
    """Raised when the server cannot complete a valid request (HTTP 500)"""

    status_code = 500

    def __init__(self, message: str = 'Error interno del servidor'):
        super().__init__(message)
