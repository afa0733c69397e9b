"""
Certificate Layout

Page geometry, palette, font roles and the per-field layout tables of the
rest certificate. Vertical positions in the tables are measured from the
top edge of the page to the top of the text line, the way the printed form
is designed; the compositor converts them to PDF baselines.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Optional

from reportlab.lib.units import cm


@dataclass(frozen=True)
class Margins:
    top: float = 25
    bottom: float = 25
    left: float = 20
    right: float = 20


@dataclass(frozen=True)
class Palette:
    """
    Certificate colors as hex strings.

    ``handwriting`` and ``medical`` are drawn with ``text_opacity`` so the
    filled-in entries look like ink on paper.
    """

    primary: str = '#1976D2'
    secondary: str = '#DC004E'
    text: str = '#333333'
    accent: str = '#666666'
    ink: str = '#000000'
    paper: str = '#FFFFFF'
    handwriting: str = '#503A65'
    medical: str = '#201E1E'
    watermark: str = '#999999'
    text_opacity: float = 0.68


@dataclass(frozen=True)
class FontRoles:
    """
    Font names per role.

    Every role is drawn only when the font registry reports it as available;
    otherwise ``body`` is used, and Helvetica when ``body`` itself is missing.
    """

    title: str = 'Helvetica-Bold'
    body: str = 'Helvetica'
    signature: str = 'Helvetica-Oblique'
    decorative: Optional[str] = 'Caveat-Regular'
    decorative_medium: Optional[str] = 'Caveat-Medium'


@dataclass(frozen=True)
class Practitioner:
    """Issuing practitioner, printed in the header and the signature fallback"""

    name: str = 'Dra. Kardasz Ivana Noelia'
    signature_name: str = 'Kardasz Ivana Noelia'
    title: str = 'Especialista'
    specialty: str = 'ESPECIALISTA CLINICA GENERAL'
    signature_specialty: str = 'Medicina General y Familiar'
    license: str = 'M.P. 7532'


@dataclass(frozen=True)
class SignatureBox:
    """
    Where the signature image goes, and where its text substitute goes.

    The image is fitted into the (x, y, width, height) box. The four fallback
    lines are centered in a column of ``fallback_width`` starting at x.
    """

    x: float = 160
    y: float = 300
    width: float = 120
    height: float = 80
    fallback_y: float = 360
    fallback_width: float = 100
    fallback_leading: float = 10


@dataclass(frozen=True)
class FillerSpec:
    """
    Dotted line drawn under a value.

    ``available_width`` is the slot width in points and ``dot_advance`` the
    horizontal space each dot is assumed to take; both are design constants.
    """

    available_width: float
    dot_advance: float
    offset_y: float = 4


@dataclass(frozen=True)
class FieldLayout:
    """One labeled field: a label run followed by its value on the same baseline"""

    key: str
    label: str
    x: float
    y: float
    size: float
    color: str
    suffix: str = ''
    filler: Optional[FillerSpec] = None


@dataclass(frozen=True)
class StaticLine:
    """Fixed text printed on every certificate"""

    text: str
    x: float
    y: float
    size: float
    color: str = 'ink'
    translucent: bool = False


PATIENT_FIELDS = (
    FieldLayout('full_name', 'Sr/a ', 25, 150, 14, 'handwriting',
                filler=FillerSpec(available_width=200, dot_advance=3)),
    FieldLayout('national_id', 'DNI: ', 25, 180, 14, 'handwriting', suffix=',',
                filler=FillerSpec(available_width=100, dot_advance=2)),
    FieldLayout('free_text', 'por presentar ', 25, 240, 14, 'handwriting', suffix=',',
                filler=FillerSpec(available_width=170, dot_advance=3)),
)

MEDICAL_FIELDS = (
    FieldLayout('rest_hours', 'se sugiere reposo por ', 25, 270, 12, 'medical', suffix='hs.'),
    FieldLayout('diagnostic_code', 'Diagnóstico: ', 25, 300, 12, 'medical'),
)

PRESCRIPTION_MARK = StaticLine('Rp /', 10, 90, 10)

BODY_LINES = (
    StaticLine('Dejo constancia que el/la', 25, 120, 14, color='handwriting', translucent=True),
    StaticLine('consulta el día de la fecha', 25, 210, 14, color='handwriting', translucent=True),
)

# Header lines: (y, size, font role)
HEADER_LINES = (
    (25, 12, 'title'),
    (40, 10, 'body'),
    (50, 10, 'body'),
)

SEPARATOR_OFFSETS = (70, 410)
LEFT_BORDER_WIDTH = 2
BORDER_WIDTH = 1

DATE_POSITION = (25, 380)
DATE_SIZE = 14
CAPTION_Y = 430
CAPTION_SIZE = 8
CAPTION_INSET = 10

WATERMARK_SIZE = 48
WATERMARK_ANGLE = 45


@dataclass(frozen=True)
class LayoutConfig:
    """
    Complete, immutable description of the certificate page.

    Built once and shared by every render.
    """

    width: float = 10 * cm
    height: float = 21 * cm
    margins: Margins = field(default_factory=Margins)
    colors: Palette = field(default_factory=Palette)
    fonts: FontRoles = field(default_factory=FontRoles)
    practitioner: Practitioner = field(default_factory=Practitioner)
    signature: SignatureBox = field(default_factory=SignatureBox)
    patient_fields: tuple = PATIENT_FIELDS
    medical_fields: tuple = MEDICAL_FIELDS
    caption: str = 'Escaneado con CamScanner'
    watermark: Optional[str] = None
    title: str = 'Certificado médico'

    def color(self, role: str) -> str:
        """Hex value of a palette role"""
        return getattr(self.colors, role)

    def with_overrides(self, overrides: Optional[dict] = None) -> 'LayoutConfig':
        """
        Return a copy with the given overrides applied.

        Nested sections (margins, colors, fonts, practitioner, signature) are
        merged key by key. ``fillers`` maps a field key to a FillerSpec
        keyword dict, or to None to remove that field's filler line.

        Raises:
            ValueError: If an override names an unknown setting
        """
        if not overrides:
            return self

        changes = {}
        nested = {
            'margins': self.margins,
            'colors': self.colors,
            'fonts': self.fonts,
            'practitioner': self.practitioner,
            'signature': self.signature,
        }
        scalar_names = {f.name for f in fields(self)} - set(nested) - {'patient_fields', 'medical_fields'}

        for key, value in overrides.items():
            if key in nested:
                changes[key] = replace(nested[key], **value)
            elif key == 'fillers':
                changes['patient_fields'] = _apply_fillers(self.patient_fields, value)
                changes['medical_fields'] = _apply_fillers(self.medical_fields, value)
            elif key in scalar_names:
                changes[key] = value
            else:
                raise ValueError(f"Unknown layout setting '{key}'")

        return replace(self, **changes)


def _apply_fillers(field_layouts: tuple, fillers: dict) -> tuple:
    updated = []
    for layout in field_layouts:
        if layout.key in fillers:
            spec = fillers[layout.key]
            layout = replace(layout, filler=FillerSpec(**spec) if spec is not None else None)
        updated.append(layout)
    return tuple(updated)


DEFAULT_LAYOUT = LayoutConfig()
