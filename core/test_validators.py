"""
Tests for certificate request sanitization and validation
"""

from datetime import date, timedelta

from django.test import TestCase
from django.utils import timezone

from core.errors import ValidationFailed
from core.validators import (
    clean_certificate_payload,
    parse_telegram_message,
    sanitize_payload,
    sanitize_string,
    validate_certificate_payload,
    validate_dni,
)


def make_payload(**overrides):
    payload = {
        'nombre': 'Jorge',
        'apellido': 'Jara',
        'dni': '33824963',
        'codigoDiagnostico': 'B349',
        'horasReposo': 24,
        'textoEntrada': 'Sindrome gripal',
    }
    payload.update(overrides)
    return payload


class SanitizeTestCase(TestCase):
    """Test cases for payload sanitization"""

    def test_strips_markup(self):
        self.assertEqual(sanitize_string('<b>Jorge</b>'), 'Jorge')

    def test_removes_unsafe_characters_and_collapses_spaces(self):
        self.assertEqual(sanitize_string('  Jorge  &  "Ana"  '), 'Jorge Ana')

    def test_dni_keeps_digits(self):
        self.assertEqual(sanitize_payload({'dni': '33.824.963'})['dni'], '33824963')
        self.assertEqual(sanitize_payload({'dni': 33824963})['dni'], '33824963')

    def test_code_is_upper_cased(self):
        self.assertEqual(sanitize_payload({'codigoDiagnostico': ' b349 '})['codigoDiagnostico'], 'B349')

    def test_hours_truncated(self):
        self.assertEqual(sanitize_payload({'horasReposo': 24.9})['horasReposo'], 24)
        self.assertEqual(sanitize_payload({'horasReposo': -48})['horasReposo'], 48)
        self.assertEqual(sanitize_payload({'horasReposo': '72'})['horasReposo'], 72)

    def test_invalid_hours_dropped(self):
        self.assertNotIn('horasReposo', sanitize_payload({'horasReposo': 'mucho'}))
        self.assertNotIn('horasReposo', sanitize_payload({'horasReposo': True}))
        self.assertNotIn('horasReposo', sanitize_payload({'horasReposo': 'nan'}))

    def test_unknown_fields_dropped(self):
        sanitized = sanitize_payload(make_payload(admin=True))
        self.assertNotIn('admin', sanitized)


class ValidateDniTestCase(TestCase):

    def test_valid(self):
        self.assertTrue(validate_dni('33824963'))
        self.assertTrue(validate_dni('3382496'))

    def test_rejects_fake_numbers(self):
        self.assertFalse(validate_dni('11111111'))
        self.assertFalse(validate_dni('12345678'))
        self.assertFalse(validate_dni('1234567'))
        self.assertFalse(validate_dni('123456'))
        self.assertFalse(validate_dni('123456789'))


class ValidateCertificatePayloadTestCase(TestCase):
    """Test cases for validate_certificate_payload"""

    def test_valid_payload(self):
        result = validate_certificate_payload(sanitize_payload(make_payload()))

        self.assertTrue(result.is_valid)
        self.assertEqual(result.errors, [])
        self.assertEqual(result.data.full_name, 'JORGE JARA')
        self.assertEqual(result.data.rest_hours, 24)
        self.assertIsNone(result.data.issue_date)

    def test_collects_all_errors(self):
        """Test that validation reports every failing field at once"""
        result = validate_certificate_payload({})

        self.assertFalse(result.is_valid)
        self.assertIsNone(result.data)
        self.assertEqual(len(result.errors), 6)

    def test_name_rules(self):
        errors = validate_certificate_payload(make_payload(nombre='J')).errors
        self.assertIn('El nombre debe tener al menos 2 caracteres', errors)

        errors = validate_certificate_payload(make_payload(apellido='Jara2')).errors
        self.assertIn('El apellido solo puede contener letras y espacios', errors)

        self.assertTrue(validate_certificate_payload(make_payload(nombre='José Ñandú')).is_valid)

    def test_dni_rules(self):
        errors = validate_certificate_payload(make_payload(dni='11111111')).errors
        self.assertIn('El DNI no cumple con el formato válido argentino', errors)

        errors = validate_certificate_payload(make_payload(dni='123')).errors
        self.assertIn('El DNI debe contener entre 7 y 8 dígitos numéricos', errors)

    def test_diagnostic_code_rules(self):
        for code in ('A09', 'B349', 'J06.9', 'N300'):
            self.assertTrue(validate_certificate_payload(make_payload(codigoDiagnostico=code)).is_valid, code)

        for code in ('09A', 'B3', 'B34.99'):
            self.assertFalse(validate_certificate_payload(make_payload(codigoDiagnostico=code)).is_valid, code)

    def test_rest_hours_rules(self):
        for hours in (1, 48, 72, 96, 720):
            self.assertTrue(validate_certificate_payload(make_payload(horasReposo=hours)).is_valid, hours)

        errors = validate_certificate_payload(make_payload(horasReposo=100)).errors
        self.assertIn('Las horas de reposo deben ser múltiplos de 24 para períodos largos', errors)

        errors = validate_certificate_payload(make_payload(horasReposo=744)).errors
        self.assertIn('Las horas de reposo no pueden exceder 720 (30 días)', errors)

        errors = validate_certificate_payload(make_payload(horasReposo=1.5)).errors
        self.assertIn('Las horas de reposo deben ser un número entero', errors)

    def test_free_text_rules(self):
        errors = validate_certificate_payload(make_payload(textoEntrada='gripe')).errors
        self.assertIn('El texto de entrada debe tener al menos 10 caracteres', errors)

        errors = validate_certificate_payload(make_payload(textoEntrada='x' * 501)).errors
        self.assertIn('El texto de entrada no puede exceder 500 caracteres', errors)

    def test_issue_date(self):
        result = validate_certificate_payload(make_payload(fechaEmision='2024-05-10'))
        self.assertEqual(result.data.issue_date, date(2024, 5, 10))

        result = validate_certificate_payload(make_payload(fechaEmision='2024-05-10T12:30:00Z'))
        self.assertEqual(result.data.issue_date, date(2024, 5, 10))

    def test_invalid_issue_date(self):
        errors = validate_certificate_payload(make_payload(fechaEmision='10/05/2024')).errors
        self.assertIn('La fecha de emisión no es válida', errors)

    def test_future_issue_date(self):
        tomorrow = (timezone.localdate() + timedelta(days=1)).isoformat()
        errors = validate_certificate_payload(make_payload(fechaEmision=tomorrow)).errors
        self.assertIn('La fecha de emisión no puede ser futura', errors)


class CleanCertificatePayloadTestCase(TestCase):

    def test_returns_certificate_data(self):
        data = clean_certificate_payload(make_payload(nombre='<i>Jorge</i>', dni='33.824.963'))
        self.assertEqual(data.name, 'Jorge')
        self.assertEqual(data.national_id, '33824963')

    def test_raises_with_all_errors(self):
        with self.assertRaises(ValidationFailed) as cm:
            clean_certificate_payload(make_payload(nombre='', dni='1'))

        self.assertEqual(cm.exception.status_code, 400)
        self.assertEqual(len(cm.exception.errors), 2)
        self.assertIn('El nombre es requerido', cm.exception.message)


class ParseTelegramMessageTestCase(TestCase):
    """Test cases for parse_telegram_message"""

    def test_parses_message(self):
        data = parse_telegram_message('33824963,JARA,JORGE,24HS.,Sindrome,gripal,B349')

        self.assertEqual(data.national_id, '33824963')
        self.assertEqual(data.last_name, 'JARA')
        self.assertEqual(data.name, 'JORGE')
        self.assertEqual(data.rest_hours, 24)
        self.assertEqual(data.diagnostic_code, 'B349')
        self.assertEqual(data.free_text, '24HS. Sindrome gripal B349')
        self.assertEqual(data.issue_date, timezone.localdate())

    def test_tolerates_spaces(self):
        data = parse_telegram_message(' 33824963 , JARA , JORGE , 48 hs , Lumbalgia , aguda , M545 ')
        self.assertEqual(data.rest_hours, 48)
        self.assertEqual(data.diagnostic_code, 'M545')

    def test_hours_default(self):
        data = parse_telegram_message('33824963,JARA,JORGE,UN DIA,Sindrome,gripal,B349')
        self.assertEqual(data.rest_hours, 24)

    def test_empty_code_uses_default(self):
        data = parse_telegram_message('33824963,JARA,JORGE,24HS.,Sindrome,gripal,')

        self.assertEqual(data.diagnostic_code, 'Z76.1')
        self.assertEqual(data.free_text, '24HS. Sindrome gripal Z76.1')

    def test_blank_code_uses_default(self):
        data = parse_telegram_message('33824963,JARA,JORGE,24HS.,Sindrome,gripal,   ')
        self.assertEqual(data.diagnostic_code, 'Z76.1')

    def test_too_few_parts(self):
        with self.assertRaises(ValidationFailed) as cm:
            parse_telegram_message('33824963,JARA,JORGE')
        self.assertIn('Formato de mensaje incorrecto', cm.exception.message)

    def test_empty_message(self):
        with self.assertRaises(ValidationFailed):
            parse_telegram_message('')
        with self.assertRaises(ValidationFailed):
            parse_telegram_message(None)

    def test_invalid_data(self):
        with self.assertRaises(ValidationFailed):
            parse_telegram_message('11111111,JARA,JORGE,24HS.,Sindrome,gripal,B349')
