"""
JSON response envelope shared by views and middleware.

Every JSON body has the shape {success, data?, error?, message?}.
"""

from typing import Any, Optional

from django.http import JsonResponse


def api_response(
    data: Any = None,
    *,
    message: Optional[str] = None,
    status: int = 200,
) -> JsonResponse:
    """Successful envelope"""
    body: dict[str, Any] = {'success': True}
    if data is not None:
        body['data'] = data
    if message:
        body['message'] = message
    return JsonResponse(body, status=status)


def api_error(
    error: str,
    *,
    status: int,
    message: Optional[str] = None,
    errors: Optional[list[str]] = None,
) -> JsonResponse:
    """
    Error envelope.

    Server errors (5xx) always carry a generic message so internals never
    reach the client.
    """
    body: dict[str, Any] = {
        'success': False,
        'error': error,
        'message': 'Error interno del servidor' if status >= 500 else (message or error),
    }
    if errors:
        body['errors'] = errors
    return JsonResponse(body, status=status)
