"""
Font Registry

Registers TrueType fonts with ReportLab and records which ones are usable.
A font that cannot be loaded is recorded as failed and logged; it never
aborts a render. Callers ask ``is_available`` (or ``resolve``) before
issuing a text command and fall back to a built-in font otherwise.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont


logger = logging.getLogger(__name__)

# The 14 standard Type 1 fonts ReportLab can always draw without resources.
BUILTIN_FONTS = frozenset(pdfmetrics.standardFonts)


@dataclass
class RegistrationResult:
    """Outcome of a ``register_fonts`` call."""

    registered: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def all_registered(self) -> bool:
        return not self.failed


class FontRegistry:
    """
    Registry of fonts usable by the certificate renderer.

    Registration happens once at start-up; afterwards the registry is only
    read, so a single instance can be shared by concurrent renders.
    """

    def __init__(self):
        self._available: dict[str, bool] = {}

    def register_fonts(self, font_files: dict[str, str | Path]) -> RegistrationResult:
        """
        Register each font file under its name.

        Args:
            font_files: Mapping of font name (e.g. 'Caveat-Medium') to TTF path

        Returns:
            RegistrationResult listing registered and failed names
        """
        result = RegistrationResult()

        for name, path in font_files.items():
            try:
                pdfmetrics.registerFont(TTFont(name, str(path)))
            except Exception as e:
                logger.warning(f"Could not register font '{name}' from {path}: {e}")
                self._available[name] = False
                result.failed.append(name)
                continue

            self._available[name] = True
            result.registered.append(name)
            logger.debug(f"Registered font '{name}' from {path}")

        if result.failed:
            logger.warning(
                f"Font registration finished with fallbacks: "
                f"{len(result.registered)} registered, failed: {', '.join(result.failed)}"
            )
        else:
            logger.info(f"Registered {len(result.registered)} font(s)")

        return result

    def is_available(self, name: str | None) -> bool:
        """Check whether text can be drawn with the given font name"""
        if not name:
            return False
        if name in BUILTIN_FONTS:
            return True
        return self._available.get(name, False)

    def resolve(self, *candidates: str | None, fallback: str) -> str:
        """
        Return the first available candidate font, or the fallback.

        Args:
            candidates: Preferred font names in order (None entries are skipped)
            fallback: Font used when no candidate is available

        Returns:
            Font name to draw with
        """
        for name in candidates:
            if self.is_available(name):
                return name
        return fallback

    def failed_fonts(self) -> list[str]:
        """List the names whose registration failed"""
        return [name for name, ok in self._available.items() if not ok]
