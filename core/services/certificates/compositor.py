"""
Certificate Compositor

Places the fixed set of labeled fields and decorative elements of the rest
certificate on a single page and returns the finished PDF.

Phases, in order:
    1. background and frame
    2. header
    3. patient information (with filler lines)
    4. medical information
    5. signature image, or its text substitute
    6. footer
    7. watermark (when configured)
    8. finalize through the renderer
"""

import logging
from io import BytesIO
from pathlib import Path
from typing import Callable, Optional

from django.utils import timezone
from reportlab.lib.utils import ImageReader

from core.printing import ICanvasRenderer, ReportLabRenderer
from core.printing.commands import DrawCommand
from core.services.fonts import FontRegistry
from .data import CertificateData
from .layout import DEFAULT_LAYOUT, FieldLayout, LayoutConfig
from .phases import (
    build_background,
    build_footer,
    build_header,
    build_medical_info,
    build_patient_info,
    build_signature,
    build_watermark,
    field_value,
    filler_count,
    measure,
    value_font,
)


logger = logging.getLogger(__name__)


def load_signature_image(path: Optional[str | Path]) -> Optional[bytes]:
    """
    Read and verify the signature image.

    Args:
        path: Image file path, or None when no signature is configured

    Returns:
        The raw image bytes, or None if the file is missing or cannot be decoded
    """
    if not path:
        return None

    try:
        with open(path, 'rb') as fh:
            data = fh.read()
        # Full decode, not just the header
        ImageReader(BytesIO(data)).getRGBData()
    except Exception as e:
        logger.warning(f"Signature image unavailable ({path}): {e}. Using text signature.")
        return None

    return data


class CertificateCompositor:
    """
    Builds and renders rest certificates.

    The layout, font registry and renderer are shared and never modified, so
    one compositor can serve concurrent renders.

    Usage:
        compositor = CertificateCompositor(config, registry, signature_path='firma.jpeg')
        pdf_bytes = compositor.render(data)
    """

    def __init__(
        self,
        config: LayoutConfig = DEFAULT_LAYOUT,
        registry: Optional[FontRegistry] = None,
        *,
        signature_path: Optional[str | Path] = None,
        renderer: Optional[ICanvasRenderer] = None,
        image_loader: Callable[[Optional[str | Path]], Optional[bytes]] = load_signature_image,
    ):
        self.config = config
        self.registry = registry or FontRegistry()
        self.signature_path = signature_path
        self.renderer = renderer or ReportLabRenderer()
        self.image_loader = image_loader

    def compose(self, data: CertificateData) -> list[DrawCommand]:
        """
        Build the ordered draw commands for one certificate.

        Args:
            data: Validated certificate data

        Returns:
            Draw commands in painting order
        """
        config = self.config
        issue_date = data.issue_date or timezone.localdate()

        commands: list[DrawCommand] = []
        commands += build_background(config)
        commands += build_header(config, self.registry)
        commands += build_patient_info(config, self.registry, data)
        commands += build_medical_info(config, self.registry, data)
        commands += build_signature(config, self.registry, self.image_loader(self.signature_path))
        commands += build_footer(config, self.registry, issue_date)
        commands += build_watermark(config, self.registry)
        return commands

    def render(self, data: CertificateData) -> bytes:
        """
        Render one certificate to PDF bytes.

        Raises:
            CertificateRenderError: If the rendering engine fails
        """
        commands = self.compose(data)
        pdf_bytes = self.renderer.render_commands(
            commands,
            self.config.width,
            self.config.height,
            title=self.config.title,
            author=self.config.practitioner.name,
        )
        logger.info(f"Certificate rendered for DNI {data.national_id} ({len(pdf_bytes)} bytes)")
        return pdf_bytes

    def filler_for(self, field: FieldLayout, data: CertificateData) -> int:
        """Number of filler dots the given field gets for this data"""
        if field.filler is None:
            return 0
        font = value_font(self.config, self.registry)
        width = measure(field_value(field, data), font, field.size)
        return filler_count(width, field.filler.available_width, field.filler.dot_advance)

    def field_layout(self, key: str) -> FieldLayout:
        """Look up a patient or medical field layout by key"""
        for field in self.config.patient_fields + self.config.medical_fields:
            if field.key == key:
                return field
        raise KeyError(f"Field '{key}' not found")
