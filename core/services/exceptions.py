"""
Service-layer exceptions for consistent error handling across the certificate service.

Recoverable problems (a missing font, a missing signature image, a value
that is too wide for its slot) never reach this module: they are handled
where they happen. Only failures that make a render impossible are raised.
"""


class ServiceError(Exception):
    """Base exception for all service-related errors."""
    pass


class CertificateRenderError(ServiceError):
    """
    Raised when the rendering engine cannot produce a finished document.

    The original engine exception is chained as ``__cause__``. Callers never
    receive a partially written buffer when this is raised.

    Example:
        The canvas cannot be finalized because an image stream is corrupt.
    """

    def __init__(self, message: str = "render failed"):
        super().__init__(message)
