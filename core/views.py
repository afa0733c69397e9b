"""
Certificate HTTP API.

JSON endpoints under /api/certificados/ plus the root health check.
Successful PDF requests return the document itself; everything else uses the
{success, data?, error?, message?} envelope from core.responses.
"""
import json
import logging
import time

from django.conf import settings
from django.http import HttpResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from core.errors import InternalServerError, NotFound, ValidationFailed
from core.responses import api_response
from core.services.certificates import build_filename
from core.services.config import get_certificate_service
from core.services.exceptions import CertificateRenderError
from core.validators import (
    clean_certificate_payload,
    parse_telegram_message,
    sanitize_payload,
    validate_certificate_payload,
)

logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()

NO_CACHE_HEADERS = {
    'Cache-Control': 'no-cache, no-store, must-revalidate',
    'Pragma': 'no-cache',
    'Expires': '0',
}


def _read_json(request):
    """
    Parse the JSON body of a request.

    Raises:
        ValidationFailed: For a non-JSON content type, an oversized body or a
            body that is not a JSON object
    """
    if request.content_type != 'application/json':
        raise ValidationFailed('Content-Type debe ser application/json')

    limit = getattr(settings, 'CERTIFICATE_MAX_PAYLOAD_BYTES', 5 * 1024 * 1024)
    try:
        declared = int(request.META.get('CONTENT_LENGTH') or 0)
    except ValueError:
        declared = 0
    if declared > limit or len(request.body) > limit:
        raise ValidationFailed(f'El payload excede el tamaño máximo permitido ({limit} bytes)')

    try:
        payload = json.loads(request.body or b'{}')
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationFailed('JSON inválido')

    if not isinstance(payload, dict):
        raise ValidationFailed('Se esperaba un objeto JSON')
    return payload


def _pdf_response(result, attachment=False):
    response = HttpResponse(result.pdf_bytes, content_type=result.content_type)
    response['Content-Disposition'] = result.content_disposition(attachment)
    response['Content-Length'] = str(len(result))
    for header, value in NO_CACHE_HEADERS.items():
        response[header] = value
    return response


def _render(data):
    try:
        return get_certificate_service().render(data)
    except CertificateRenderError as e:
        logger.error(f"Certificate rendering failed for DNI {data.national_id}: {e}")
        raise InternalServerError('Error al generar el certificado PDF')


@csrf_exempt
@require_http_methods(["POST"])
def certificate_generate(request):
    """
    POST /api/certificados/generate

    Validate the form data and return the certificate PDF inline.

    Returns:
        200: application/pdf
        400: Validation errors
    """
    data = clean_certificate_payload(_read_json(request))
    logger.info(f"Generating certificate for DNI {data.national_id}")
    return _pdf_response(_render(data))


@csrf_exempt
@require_http_methods(["POST"])
def certificate_telegram(request):
    """
    POST /api/certificados/telegram

    Body: {"mensaje": "33824963,JARA,JORGE,24HS.,Sindrome,gripal,B349"}

    Returns:
        200: application/pdf as attachment
        400: Malformed message or invalid data
    """
    payload = _read_json(request)
    data = parse_telegram_message(payload.get('mensaje'))
    logger.info(f"Generating certificate from message for DNI {data.national_id}")
    return _pdf_response(_render(data), attachment=True)


@csrf_exempt
@require_http_methods(["POST"])
def certificate_preview(request):
    """
    POST /api/certificados/preview

    Returns the sanitized data and the filename the PDF would get, without
    rendering it.
    """
    data = get_certificate_service().prepare(clean_certificate_payload(_read_json(request)))
    preview = data.to_dict()
    preview['filename'] = build_filename(data, data.issue_date)
    return api_response(preview, message='Vista previa generada')


@csrf_exempt
@require_http_methods(["POST"])
def certificate_validate(request):
    """
    POST /api/certificados/validate

    Always answers 200; the outcome is in data.isValid.
    """
    result = validate_certificate_payload(sanitize_payload(_read_json(request)))
    body = {'isValid': result.is_valid}
    if result.errors:
        body['errors'] = result.errors
    message = 'Datos válidos' if result.is_valid else 'Datos inválidos'
    return api_response(body, message=message)


def _health_data():
    return {
        'status': 'OK',
        'timestamp': timezone.now().isoformat(),
        'uptime': round(time.monotonic() - STARTED_AT, 3),
    }


@require_http_methods(["GET"])
def certificate_health(request):
    """GET /api/certificados/health"""
    return api_response(_health_data(), message='Servicio de certificados funcionando correctamente')


@require_http_methods(["GET"])
def health(request):
    """GET /health"""
    data = _health_data()
    data['environment'] = 'development' if settings.DEBUG else 'production'
    return api_response(data)


def not_found(request, *args, **kwargs):
    """Catch-all for unknown routes"""
    raise NotFound(
        f'Ruta no encontrada: {request.method} {request.path}',
        detail='El endpoint solicitado no existe',
    )
