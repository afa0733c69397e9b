"""
ReportLab Renderer Implementation

Adapter replaying draw commands onto a ReportLab canvas.
"""

from io import BytesIO
from typing import Optional, Sequence
import logging

from reportlab.lib import colors
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas as pdf_canvas

from core.services.exceptions import CertificateRenderError
from .commands import (
    DrawCommand,
    ImageCommand,
    LineCommand,
    RectCommand,
    RotatedTextCommand,
    TextCommand,
)
from .interfaces import ICanvasRenderer


logger = logging.getLogger(__name__)

PDF_SIGNATURE = b'%PDF'


class ReportLabRenderer(ICanvasRenderer):
    """
    PDF renderer using the ReportLab canvas.

    Supports:
    - Filled rectangles and stroked lines
    - Left, centered and right-aligned text with opacity
    - Raster images fitted into a box
    - Rotated text isolated in its own graphics state

    Documents are produced in ReportLab's invariant mode, so the same
    commands always give the same bytes.
    """

    def __init__(self, page_compression: bool = True):
        """
        Initialize the renderer.

        Args:
            page_compression: Deflate page content streams
        """
        self.page_compression = page_compression
        self._drawers = {
            RectCommand: self._draw_rect,
            LineCommand: self._draw_line,
            TextCommand: self._draw_text,
            ImageCommand: self._draw_image,
            RotatedTextCommand: self._draw_rotated_text,
        }

    def render_commands(
        self,
        commands: Sequence[DrawCommand],
        width: float,
        height: float,
        *,
        title: Optional[str] = None,
        author: Optional[str] = None,
    ) -> bytes:
        """
        Render draw commands to PDF using ReportLab.

        The output is collected in memory and only returned once the canvas
        has been saved completely.

        Raises:
            CertificateRenderError: If any command or the final save fails
        """
        buffer = BytesIO()
        try:
            c = pdf_canvas.Canvas(
                buffer,
                pagesize=(width, height),
                invariant=1,
                pageCompression=1 if self.page_compression else 0,
            )
            if title:
                c.setTitle(title)
            if author:
                c.setAuthor(author)

            for command in commands:
                self._drawers[type(command)](c, command)

            c.showPage()
            c.save()
        except Exception as e:
            logger.error(f"Failed to render PDF: {e}", exc_info=True)
            raise CertificateRenderError() from e

        pdf_bytes = buffer.getvalue()
        buffer.close()

        if not pdf_bytes.startswith(PDF_SIGNATURE):
            logger.error("Renderer produced a buffer without a PDF header")
            raise CertificateRenderError()

        logger.debug(f"Rendered {len(commands)} draw commands into {len(pdf_bytes)} bytes")
        return pdf_bytes

    def _draw_rect(self, c, command: RectCommand):
        c.setFillColor(colors.HexColor(command.fill_color), alpha=1)
        c.rect(command.x, command.y, command.width, command.height, stroke=0, fill=1)

    def _draw_line(self, c, command: LineCommand):
        c.setStrokeColor(colors.HexColor(command.stroke_color), alpha=1)
        c.setLineWidth(command.line_width)
        c.line(command.x1, command.y1, command.x2, command.y2)

    def _draw_text(self, c, command: TextCommand):
        c.setFont(command.font, command.size)
        c.setFillColor(colors.HexColor(command.color), alpha=command.alpha)
        if command.align == 'center':
            c.drawCentredString(command.x, command.y, command.text)
        elif command.align == 'right':
            c.drawRightString(command.x, command.y, command.text)
        else:
            c.drawString(command.x, command.y, command.text)

    def _draw_image(self, c, command: ImageCommand):
        c.drawImage(
            ImageReader(BytesIO(command.data)),
            command.x,
            command.y,
            width=command.width,
            height=command.height,
            preserveAspectRatio=True,
            anchor='c',
            mask='auto',
        )

    def _draw_rotated_text(self, c, command: RotatedTextCommand):
        c.saveState()
        c.translate(command.cx, command.cy)
        c.rotate(command.angle)
        c.setFont(command.font, command.size)
        c.setFillColor(colors.HexColor(command.color), alpha=command.alpha)
        c.drawCentredString(0, 0, command.text)
        c.restoreState()
