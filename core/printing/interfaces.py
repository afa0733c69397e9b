"""
Interfaces for the Printing Framework

Defines the interface implemented by canvas rendering engines.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from .commands import DrawCommand


class ICanvasRenderer(ABC):
    """
    Interface for PDF rendering engines.

    Implementations replay a list of draw commands onto a single page and
    return the finished document.
    """

    @abstractmethod
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
        Render draw commands to a one-page PDF.

        Args:
            commands: Draw commands in painting order
            width: Page width in points
            height: Page height in points
            title: Optional document title metadata
            author: Optional document author metadata

        Returns:
            PDF content as bytes

        Raises:
            CertificateRenderError: If the document cannot be finalized
        """
        pass
