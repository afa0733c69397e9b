"""
Certificate drawing phases

Each phase is a pure function returning the draw commands for one region of
the page. The compositor concatenates them in a fixed order; later phases may
draw over earlier ones.
"""

import math
from datetime import date
from typing import Optional

from reportlab.pdfbase import pdfmetrics

from core.services.fonts import FontRegistry
from core.printing.commands import (
    DrawCommand,
    ImageCommand,
    LineCommand,
    RectCommand,
    RotatedTextCommand,
    TextCommand,
)
from .data import CertificateData
from .layout import (
    BODY_LINES,
    BORDER_WIDTH,
    CAPTION_INSET,
    CAPTION_SIZE,
    CAPTION_Y,
    DATE_POSITION,
    DATE_SIZE,
    HEADER_LINES,
    LEFT_BORDER_WIDTH,
    PRESCRIPTION_MARK,
    SEPARATOR_OFFSETS,
    WATERMARK_ANGLE,
    WATERMARK_SIZE,
    FieldLayout,
    LayoutConfig,
    StaticLine,
)

# Fallback signature line sizes: name, title, specialty, license
SIGNATURE_FALLBACK_SIZES = (8, 7, 6, 7)

# Built-in font used when even the configured body font is unavailable
BASE_FONT = 'Helvetica'


def measure(text: str, font: str, size: float) -> float:
    """Rendered width of text in points"""
    return pdfmetrics.stringWidth(text, font, size)


def baseline(config: LayoutConfig, top: float, font: str, size: float) -> float:
    """Convert a top-down line position into a PDF baseline y coordinate"""
    return config.height - top - pdfmetrics.getAscent(font, size)


def filler_count(measured_width: float, available_width: float, dot_advance: float) -> int:
    """
    Number of filler dots for a value of the given rendered width.

    Never negative: a value wider than its slot gets no dots and is allowed
    to overflow.
    """
    return max(0, math.floor((available_width - measured_width) / dot_advance))


def format_issue_date(issue_date: date) -> str:
    """Format as DD/MM/YYYY"""
    return f"{issue_date.day:02d}/{issue_date.month:02d}/{issue_date.year}"


def role_font(config: LayoutConfig, registry: FontRegistry, role: str) -> str:
    """Font for a role, falling back to the body font and then to Helvetica"""
    return registry.resolve(getattr(config.fonts, role), config.fonts.body, fallback=BASE_FONT)


def value_font(config: LayoutConfig, registry: FontRegistry) -> str:
    """Font for patient-specific values: decorative when registered, else body"""
    fonts = config.fonts
    return registry.resolve(fonts.decorative_medium, fonts.decorative, fonts.body, fallback=BASE_FONT)


def field_value(field: FieldLayout, data: CertificateData) -> str:
    values = {
        'full_name': data.full_name,
        'national_id': data.national_id,
        'free_text': data.free_text,
        'rest_hours': str(data.rest_hours),
        'diagnostic_code': data.diagnostic_code,
    }
    return f"{values[field.key]}{field.suffix}"


def build_background(config: LayoutConfig) -> list[DrawCommand]:
    """White page, left/top/right/bottom borders and the two separators"""
    w, h = config.width, config.height
    ink = config.colors.ink

    commands: list[DrawCommand] = [
        RectCommand(0, 0, w, h, fill_color=config.colors.paper),
        RectCommand(0, 0, LEFT_BORDER_WIDTH, h, fill_color=ink),
        RectCommand(w - BORDER_WIDTH, 0, BORDER_WIDTH, h, fill_color=ink),
        RectCommand(0, h - BORDER_WIDTH, w, BORDER_WIDTH, fill_color=ink),
        RectCommand(0, 0, w, BORDER_WIDTH, fill_color=ink),
    ]
    for offset in SEPARATOR_OFFSETS:
        commands.append(LineCommand(0, h - offset, w, h - offset, stroke_color=ink, line_width=0.5))
    return commands


def build_header(config: LayoutConfig, registry: FontRegistry) -> list[DrawCommand]:
    """Practitioner name, specialty and license centered, plus the 'Rp /' mark"""
    practitioner = config.practitioner
    texts = (practitioner.name, practitioner.specialty, practitioner.license)
    center_x = config.width / 2

    commands: list[DrawCommand] = []
    for text, (top, size, role) in zip(texts, HEADER_LINES):
        font = role_font(config, registry, role)
        commands.append(TextCommand(
            text, center_x, baseline(config, top, font, size),
            font=font, size=size, color=config.colors.ink, align='center',
        ))

    commands.append(_static_line(config, registry, PRESCRIPTION_MARK))
    return commands


def build_patient_info(
    config: LayoutConfig, registry: FontRegistry, data: CertificateData
) -> list[DrawCommand]:
    """Opening sentence and the patient fields, each with its filler line"""
    commands: list[DrawCommand] = [_static_line(config, registry, line) for line in BODY_LINES]
    font = value_font(config, registry)
    for field in config.patient_fields:
        commands.extend(_labeled_field(config, registry, field, field_value(field, data), font))
    return commands


def build_medical_info(
    config: LayoutConfig, registry: FontRegistry, data: CertificateData
) -> list[DrawCommand]:
    """Rest hours and diagnostic code"""
    font = value_font(config, registry)
    commands: list[DrawCommand] = []
    for field in config.medical_fields:
        commands.extend(_labeled_field(config, registry, field, field_value(field, data), font))
    return commands


def build_signature(
    config: LayoutConfig, registry: FontRegistry, image_data: Optional[bytes]
) -> list[DrawCommand]:
    """
    Signature image, or a four-line text block when no image is available.
    """
    box = config.signature
    if image_data:
        return [ImageCommand(
            image_data, box.x, config.height - box.y - box.height, box.width, box.height,
        )]

    practitioner = config.practitioner
    texts = (
        practitioner.signature_name,
        practitioner.title,
        practitioner.signature_specialty,
        practitioner.license,
    )
    font = role_font(config, registry, 'signature')
    center_x = box.x + box.fallback_width / 2

    commands: list[DrawCommand] = []
    for index, (text, size) in enumerate(zip(texts, SIGNATURE_FALLBACK_SIZES)):
        top = box.fallback_y + index * box.fallback_leading
        commands.append(TextCommand(
            text, center_x, baseline(config, top, font, size),
            font=font, size=size, color=config.colors.ink, align='center',
        ))
    return commands


def build_footer(
    config: LayoutConfig, registry: FontRegistry, issue_date: date
) -> list[DrawCommand]:
    """Issue date and the fixed caption"""
    font = value_font(config, registry)
    x, top = DATE_POSITION
    body = role_font(config, registry, 'body')
    return [
        TextCommand(
            format_issue_date(issue_date), x, baseline(config, top, font, DATE_SIZE),
            font=font, size=DATE_SIZE, color=config.colors.ink,
        ),
        TextCommand(
            config.caption, config.width - CAPTION_INSET, baseline(config, CAPTION_Y, body, CAPTION_SIZE),
            font=body, size=CAPTION_SIZE, color=config.colors.ink, align='right',
        ),
    ]


def build_watermark(config: LayoutConfig, registry: FontRegistry) -> list[DrawCommand]:
    """Diagonal translucent caption across the page center; empty when disabled"""
    if not config.watermark:
        return []
    return [RotatedTextCommand(
        config.watermark, config.width / 2, config.height / 2, WATERMARK_ANGLE,
        font=role_font(config, registry, 'body'), size=WATERMARK_SIZE,
        color=config.colors.watermark, alpha=0.1,
    )]


def _static_line(config: LayoutConfig, registry: FontRegistry, line: StaticLine) -> TextCommand:
    font = role_font(config, registry, 'body')
    return TextCommand(
        line.text, line.x, baseline(config, line.y, font, line.size),
        font=font, size=line.size, color=config.color(line.color),
        alpha=config.colors.text_opacity if line.translucent else 1.0,
    )


def _labeled_field(
    config: LayoutConfig, registry: FontRegistry, field: FieldLayout, value: str, font: str
) -> list[DrawCommand]:
    label_font = role_font(config, registry, 'body')
    opacity = config.colors.text_opacity
    y = baseline(config, field.y, label_font, field.size)
    value_x = field.x + measure(field.label, label_font, field.size)

    commands: list[DrawCommand] = [
        TextCommand(field.label, field.x, y, font=label_font, size=field.size,
                    color=config.color(field.color), alpha=opacity),
        TextCommand(value, value_x, y, font=font, size=field.size,
                    color=config.colors.handwriting, alpha=opacity),
    ]

    if field.filler is not None:
        count = filler_count(measure(value, font, field.size), field.filler.available_width,
                             field.filler.dot_advance)
        if count:
            commands.append(TextCommand(
                '.' * count, value_x, y - field.filler.offset_y, font=label_font,
                size=field.size, color=config.colors.handwriting, alpha=opacity,
            ))
    return commands
