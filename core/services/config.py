"""
Core configuration service for the certificate service.

This module provides a centralized configuration layer that:
- Builds the layout configuration from defaults merged with settings overrides
- Registers the certificate fonts once per process
- Hands out shared, read-only instances with explicit invalidation

Views and services should use this module instead of reading the
CERTIFICATE_* settings directly.
"""

import logging
import threading
from typing import Optional

from django.conf import settings

from core.printing import ReportLabRenderer
from core.services.certificates import CertificateCompositor, CertificateService, LayoutConfig
from core.services.fonts import FontRegistry


logger = logging.getLogger(__name__)

_lock = threading.RLock()
_instances: dict = {}


def _get_or_create(key: str, factory):
    """
    Return the cached instance for key, creating it on first use.

    Creation runs under a lock so concurrent first requests build a single
    instance; later reads never mutate it.
    """
    instance = _instances.get(key)
    if instance is not None:
        return instance

    with _lock:
        instance = _instances.get(key)
        if instance is None:
            instance = factory()
            _instances[key] = instance
    return instance


def invalidate_certificate_config() -> None:
    """
    Drop all cached configuration objects.

    This should be called when CERTIFICATE_* settings change (e.g., in tests).

    Example:
        >>> invalidate_certificate_config()
    """
    with _lock:
        _instances.clear()


def get_layout_config() -> LayoutConfig:
    """
    Get the certificate layout.

    Returns:
        LayoutConfig built from defaults and settings.CERTIFICATE_LAYOUT
    """
    def build():
        overrides: Optional[dict] = getattr(settings, 'CERTIFICATE_LAYOUT', None)
        return LayoutConfig().with_overrides(overrides)

    return _get_or_create('layout', build)


def get_font_registry() -> FontRegistry:
    """
    Get the font registry, registering settings.CERTIFICATE_FONT_FILES on first use.

    Returns:
        FontRegistry instance
    """
    def build():
        registry = FontRegistry()
        result = registry.register_fonts(getattr(settings, 'CERTIFICATE_FONT_FILES', {}))
        if result.failed:
            logger.warning(
                f"Certificates will use fallback fonts instead of: {', '.join(result.failed)}"
            )
        return registry

    return _get_or_create('fonts', build)


def get_certificate_compositor() -> CertificateCompositor:
    """
    Get the shared certificate compositor.

    Returns:
        CertificateCompositor wired to the configured layout, fonts and signature
    """
    def build():
        return CertificateCompositor(
            get_layout_config(),
            get_font_registry(),
            signature_path=getattr(settings, 'CERTIFICATE_SIGNATURE_IMAGE', None),
            renderer=ReportLabRenderer(
                page_compression=getattr(settings, 'CERTIFICATE_PAGE_COMPRESSION', True)
            ),
        )

    return _get_or_create('compositor', build)


def get_certificate_service() -> CertificateService:
    """
    Get the shared certificate service.

    Returns:
        CertificateService using the shared compositor
    """
    return _get_or_create('service', lambda: CertificateService(get_certificate_compositor()))
