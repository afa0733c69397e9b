"""
Font Registry

Makes the certificate fonts available to ReportLab before any text is drawn.
"""

from .registry import FontRegistry, RegistrationResult, BUILTIN_FONTS

__all__ = ['FontRegistry', 'RegistrationResult', 'BUILTIN_FONTS']
