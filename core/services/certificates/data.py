"""
Certificate input record.
"""

from dataclasses import dataclass, replace
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class CertificateData:
    """
    Validated patient data for one rest certificate.

    The compositor trusts the shape of these fields; validation and
    sanitization happen before a record is built (see core.validators).
    """

    name: str
    last_name: str
    national_id: str
    diagnostic_code: str
    rest_hours: int
    free_text: str
    issue_date: Optional[date] = None

    @property
    def full_name(self) -> str:
        """Upper-cased 'NAME LASTNAME' as printed on the certificate"""
        return f"{self.name.upper()} {self.last_name.upper()}"

    def with_issue_date(self, default: date) -> 'CertificateData':
        """Return a copy whose issue date is set, using ``default`` when absent"""
        if self.issue_date is not None:
            return self
        return replace(self, issue_date=default)

    def to_dict(self) -> dict:
        """Serialize with the field names used by the HTTP API"""
        return {
            'nombre': self.name,
            'apellido': self.last_name,
            'dni': self.national_id,
            'codigoDiagnostico': self.diagnostic_code,
            'horasReposo': self.rest_hours,
            'textoEntrada': self.free_text,
            'fechaEmision': self.issue_date.isoformat() if self.issue_date else None,
        }
