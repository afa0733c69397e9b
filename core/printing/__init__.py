"""
Core Printing Framework

Turns draw commands into a finished single-page PDF using ReportLab.
"""

from .dto import RenderResult
from .interfaces import ICanvasRenderer
from .reportlab_renderer import ReportLabRenderer

__all__ = [
    'RenderResult',
    'ICanvasRenderer',
    'ReportLabRenderer',
]
