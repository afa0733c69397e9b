"""
Custom middleware for the certificate API.
"""
import logging
import time
import uuid

from django.conf import settings
from django.core.cache import cache

from core.errors import ApiError, TooManyRequests
from core.responses import api_error

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware:
    """
    Middleware that logs every request with its status and duration.

    Each request gets a short id, echoed back in the X-Request-ID header so
    client reports can be matched with log lines.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.request_id = uuid.uuid4().hex[:8]
        started = time.monotonic()

        response = self.get_response(request)

        duration_ms = (time.monotonic() - started) * 1000
        message = (
            f"[{request.request_id}] {request.method} {request.path} "
            f"{response.status_code} {duration_ms:.1f}ms"
        )
        if response.status_code >= 500:
            logger.error(message)
        elif response.status_code >= 400:
            logger.warning(message)
        else:
            logger.info(message)

        response['X-Request-ID'] = request.request_id
        return response


class RateLimitMiddleware:
    """
    Fixed-window rate limit per client address on /api/ endpoints.

    Counters live in Django's cache; the window starts with a client's first
    request and lasts RATE_LIMIT_WINDOW_SECONDS.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    @property
    def max_requests(self):
        return getattr(settings, 'RATE_LIMIT_MAX_REQUESTS', 100)

    @property
    def window(self):
        return getattr(settings, 'RATE_LIMIT_WINDOW_SECONDS', 15 * 60)

    def __call__(self, request):
        if request.path.startswith('/api/'):
            count = self._hit(self._client_key(request))
            if count > self.max_requests:
                logger.warning(
                    f"Rate limit exceeded for {request.META.get('REMOTE_ADDR', 'unknown')} on {request.path}"
                )
                error = TooManyRequests(
                    'Demasiadas solicitudes',
                    detail=f'Límite de {self.max_requests} solicitudes por {self.window // 60} minutos excedido',
                )
                return api_error(error.message, status=error.status_code, message=error.detail)

        return self.get_response(request)

    def _client_key(self, request):
        return f"ratelimit:{request.META.get('REMOTE_ADDR', 'unknown')}"

    def _hit(self, key):
        cache.add(key, 0, timeout=self.window)
        try:
            return cache.incr(key)
        except ValueError:
            # Entry expired between add() and incr()
            cache.set(key, 1, timeout=self.window)
            return 1


class ApiErrorMiddleware:
    """
    Middleware that turns exceptions raised by views into the JSON envelope.

    ApiError subclasses keep their status code and message; anything else is
    logged with its traceback and answered with a generic 500.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if isinstance(exception, ApiError):
            if exception.status_code >= 500:
                logger.error(f"{request.method} {request.path} failed: {exception.message}")
            return api_error(
                exception.message,
                status=exception.status_code,
                message=exception.detail,
                errors=getattr(exception, 'errors', None),
            )

        logger.error(
            f"Unhandled error on {request.method} {request.path}: {exception}",
            exc_info=True,
        )
        return api_error('Error interno del servidor', status=500)
