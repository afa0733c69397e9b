"""
Certificate Service

Composes and renders the medical rest certificate.
"""

from .data import CertificateData
from .layout import LayoutConfig, DEFAULT_LAYOUT
from .compositor import CertificateCompositor, load_signature_image
from .service import CertificateService, build_filename

__all__ = [
    'CertificateData',
    'LayoutConfig',
    'DEFAULT_LAYOUT',
    'CertificateCompositor',
    'CertificateService',
    'build_filename',
    'load_signature_image',
]
