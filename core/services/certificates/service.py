"""
Certificate Service

Renders rest certificates and names the resulting files.
"""

import logging
import re
import unicodedata
from datetime import date
from typing import Optional

from django.utils import timezone

from core.printing import RenderResult
from .compositor import CertificateCompositor
from .data import CertificateData


logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r'[^A-Za-z0-9]')


def _filename_part(value: str) -> str:
    folded = unicodedata.normalize('NFKD', value).encode('ascii', 'ignore').decode('ascii')
    return _UNSAFE_FILENAME_CHARS.sub('', folded)


def build_filename(data: CertificateData, on: date) -> str:
    """
    Build the download filename for a certificate.

    Format: certificado_<Nombre>_<Apellido>_<DNI>_<YYYY-MM-DD>.pdf
    Accents are folded to ASCII and anything else that is not a letter or a
    digit is dropped, so the name is safe in a Content-Disposition header.
    """
    return (
        f"certificado_{_filename_part(data.name)}_{_filename_part(data.last_name)}"
        f"_{_filename_part(data.national_id)}_{on.isoformat()}.pdf"
    )


class CertificateService:
    """
    Service for certificate rendering.

    This service:
    - Fills the issue date when the caller did not supply one
    - Delegates page composition to CertificateCompositor
    - Returns a RenderResult ready for an HTTP response
    """

    def __init__(self, compositor: Optional[CertificateCompositor] = None):
        self.compositor = compositor or CertificateCompositor()

    def prepare(self, data: CertificateData, today: Optional[date] = None) -> CertificateData:
        """Return the data with its issue date set"""
        return data.with_issue_date(today or timezone.localdate())

    def render(self, data: CertificateData) -> RenderResult:
        """
        Render a certificate.

        Args:
            data: Validated certificate data

        Returns:
            RenderResult with PDF bytes and filename

        Raises:
            CertificateRenderError: If the rendering engine fails
        """
        data = self.prepare(data)
        pdf_bytes = self.compositor.render(data)
        result = RenderResult(pdf_bytes=pdf_bytes, filename=build_filename(data, data.issue_date))
        logger.info(f"Generated certificate {result.filename} ({len(result)} bytes)")
        return result
