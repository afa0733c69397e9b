"""
Certificate request sanitization and validation.

Incoming JSON uses the field names of the web form (nombre, apellido, dni,
codigoDiagnostico, horasReposo, textoEntrada, fechaEmision). Payloads are
sanitized first, then every rule is checked and all errors are reported
together.
"""

import html
import logging
import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

import bleach
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from core.errors import ValidationFailed
from core.services.certificates import CertificateData


logger = logging.getLogger(__name__)

NAME_PATTERN = re.compile(r'^[a-zA-ZáéíóúÁÉÍÓÚñÑ\s]+$')
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50

DNI_PATTERN = re.compile(r'^[0-9]{7,8}$')
DNI_REPEATED_DIGIT = re.compile(r'^(\d)\1{6,7}$')
DNI_SEQUENCES = {'1234567', '12345678'}

DIAGNOSTIC_CODE_PATTERN = re.compile(r'^[A-Z][0-9]{2,3}(\.[0-9])?$')
DIAGNOSTIC_CODE_MAX_LENGTH = 10

REST_HOURS_MIN = 1
REST_HOURS_MAX = 720  # 30 days
REST_HOURS_DAILY_THRESHOLD = 72

FREE_TEXT_MIN_LENGTH = 10
FREE_TEXT_MAX_LENGTH = 500

UNSAFE_CHARS = re.compile(r'[<>"\'&]')
WHITESPACE = re.compile(r'\s+')

TELEGRAM_FORMAT = 'DNI,APELLIDO,NOMBRE,TIEMPO,PALABRA1,PALABRA2,CODIGO'
TELEGRAM_DEFAULT_CODE = 'Z76.1'
TELEGRAM_DEFAULT_HOURS = 24


@dataclass
class ValidationResult:
    """Outcome of validating a certificate payload"""

    is_valid: bool
    errors: list[str] = field(default_factory=list)
    data: Optional[CertificateData] = None


def sanitize_string(value: str) -> str:
    """
    Strip markup and unsafe characters, and normalize whitespace.

    Args:
        value: Raw user input

    Returns:
        Plain text without tags, without < > " ' & and with single spaces
    """
    text = html.unescape(bleach.clean(value, tags=[], strip=True))
    text = UNSAFE_CHARS.sub('', text)
    return WHITESPACE.sub(' ', text).strip()


def sanitize_payload(payload: dict) -> dict:
    """
    Sanitize a raw request payload.

    Only known fields are kept. Strings are cleaned, the DNI keeps only its
    digits, the diagnostic code is upper-cased and rest hours are truncated
    to a non-negative integer.
    """
    sanitized: dict[str, Any] = {}

    for key in ('nombre', 'apellido', 'textoEntrada'):
        value = payload.get(key)
        if isinstance(value, str) and value:
            sanitized[key] = sanitize_string(value)

    dni = payload.get('dni')
    if isinstance(dni, (str, int)) and not isinstance(dni, bool) and str(dni):
        sanitized['dni'] = re.sub(r'\D', '', str(dni))

    code = payload.get('codigoDiagnostico')
    if isinstance(code, str) and code:
        sanitized['codigoDiagnostico'] = code.upper().strip()

    hours = _to_number(payload.get('horasReposo'))
    if hours:
        sanitized['horasReposo'] = int(abs(hours) // 1)

    if payload.get('fechaEmision'):
        sanitized['fechaEmision'] = payload['fechaEmision']

    return sanitized


def validate_dni(dni: str) -> bool:
    """Check the DNI format and reject trivially fake numbers"""
    if not DNI_PATTERN.match(dni):
        return False
    if DNI_REPEATED_DIGIT.match(dni) or dni in DNI_SEQUENCES:
        return False
    return True


def validate_certificate_payload(payload: dict) -> ValidationResult:
    """
    Validate a sanitized certificate payload.

    Args:
        payload: Output of sanitize_payload

    Returns:
        ValidationResult with all errors, or with the CertificateData when valid
    """
    errors: list[str] = []

    name = payload.get('nombre', '')
    last_name = payload.get('apellido', '')
    errors += _check_name(name, 'El nombre')
    errors += _check_name(last_name, 'El apellido')

    dni = payload.get('dni', '')
    if not dni:
        errors.append('El DNI es requerido')
    elif not DNI_PATTERN.match(dni):
        errors.append('El DNI debe contener entre 7 y 8 dígitos numéricos')
    elif not validate_dni(dni):
        errors.append('El DNI no cumple con el formato válido argentino')

    code = payload.get('codigoDiagnostico', '')
    if not code:
        errors.append('El código de diagnóstico es requerido')
    elif len(code) > DIAGNOSTIC_CODE_MAX_LENGTH:
        errors.append('El código de diagnóstico no puede exceder 10 caracteres')
    elif not DIAGNOSTIC_CODE_PATTERN.match(code):
        errors.append('El código de diagnóstico debe seguir el formato CIE-10/ICD-10 (ej: A09, N300)')

    hours = payload.get('horasReposo')
    if hours is None:
        errors.append('Las horas de reposo son requeridas')
    elif not isinstance(hours, int):
        errors.append('Las horas de reposo deben ser un número entero')
    elif hours < REST_HOURS_MIN:
        errors.append('Las horas de reposo deben ser al menos 1')
    elif hours > REST_HOURS_MAX:
        errors.append('Las horas de reposo no pueden exceder 720 (30 días)')
    elif hours > REST_HOURS_DAILY_THRESHOLD and hours % 24 != 0:
        errors.append('Las horas de reposo deben ser múltiplos de 24 para períodos largos')

    free_text = payload.get('textoEntrada', '')
    if not free_text:
        errors.append('El texto de entrada es requerido')
    elif len(free_text) < FREE_TEXT_MIN_LENGTH:
        errors.append('El texto de entrada debe tener al menos 10 caracteres')
    elif len(free_text) > FREE_TEXT_MAX_LENGTH:
        errors.append('El texto de entrada no puede exceder 500 caracteres')

    issue_date = None
    raw_date = payload.get('fechaEmision')
    if raw_date:
        issue_date = _parse_issue_date(raw_date)
        if issue_date is None:
            errors.append('La fecha de emisión no es válida')
        elif issue_date > timezone.localdate():
            errors.append('La fecha de emisión no puede ser futura')

    if errors:
        logger.warning(f"Certificate validation failed: {errors}")
        return ValidationResult(is_valid=False, errors=errors)

    return ValidationResult(
        is_valid=True,
        data=CertificateData(
            name=name,
            last_name=last_name,
            national_id=dni,
            diagnostic_code=code,
            rest_hours=hours,
            free_text=free_text,
            issue_date=issue_date,
        ),
    )


def clean_certificate_payload(payload: dict) -> CertificateData:
    """
    Sanitize and validate a payload in one step.

    Raises:
        ValidationFailed: With every validation error
    """
    result = validate_certificate_payload(sanitize_payload(payload))
    if not result.is_valid:
        raise ValidationFailed(', '.join(result.errors) or 'Datos inválidos', result.errors)
    return result.data


def parse_telegram_message(message: str) -> CertificateData:
    """
    Build certificate data from a comma-separated chat message.

    Expected format: "33824963,JARA,JORGE,24HS.,Sindrome,gripal,B349"
    The hours are the first number in the time token (24 when there is none),
    an empty code field becomes Z76.1, and the free text joins the time
    token, both words and the code.

    Raises:
        ValidationFailed: If the message is malformed or its data is invalid
    """
    if not isinstance(message, str) or not message.strip():
        raise ValidationFailed('Se requiere el campo "mensaje" con el texto a procesar')

    parts = [part.strip() for part in message.strip().split(',')]
    if len(parts) < 7:
        raise ValidationFailed(f'Formato de mensaje incorrecto. Esperado: {TELEGRAM_FORMAT}')

    dni, last_name, name, time_text, word1, word2, code = parts[:7]
    code = code or TELEGRAM_DEFAULT_CODE

    match = re.search(r'(\d+)', time_text)
    hours = int(match.group(1)) if match else TELEGRAM_DEFAULT_HOURS

    return clean_certificate_payload({
        'dni': dni,
        'apellido': last_name,
        'nombre': name,
        'horasReposo': hours,
        'codigoDiagnostico': code,
        'textoEntrada': f"{time_text} {word1} {word2} {code}".strip(),
        'fechaEmision': timezone.localdate().isoformat(),
    })


def _check_name(value: str, subject: str) -> list[str]:
    if not value:
        return [f'{subject} es requerido']
    if len(value) < NAME_MIN_LENGTH:
        return [f'{subject} debe tener al menos {NAME_MIN_LENGTH} caracteres']
    if len(value) > NAME_MAX_LENGTH:
        return [f'{subject} no puede exceder {NAME_MAX_LENGTH} caracteres']
    if not NAME_PATTERN.match(value):
        return [f'{subject} solo puede contener letras y espacios']
    return []


def _to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, (int, float)) and math.isfinite(value):
        return value
    return None


def _parse_issue_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    try:
        parsed = parse_datetime(value)
        if parsed is not None:
            return parsed.date()
        return parse_date(value)
    except ValueError:
        return None
