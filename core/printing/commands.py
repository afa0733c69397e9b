"""
Draw Commands

Immutable drawing instructions produced by the compositor phases and
consumed by a canvas renderer in a single pass. Every command carries its
own font and color, so no drawing state leaks from one command into the
next regardless of ordering.

Coordinates are PDF points with the origin at the bottom-left corner of the
page; text commands are positioned on their baseline.
"""

from dataclasses import dataclass
from typing import Literal, Union


Align = Literal['left', 'center', 'right']


@dataclass(frozen=True)
class RectCommand:
    """Filled rectangle"""

    x: float
    y: float
    width: float
    height: float
    fill_color: str = '#000000'


@dataclass(frozen=True)
class LineCommand:
    """Stroked straight line"""

    x1: float
    y1: float
    x2: float
    y2: float
    stroke_color: str = '#000000'
    line_width: float = 0.5


@dataclass(frozen=True)
class TextCommand:
    """
    Single run of text.

    For ``align='center'`` x is the center of the run, for ``'right'`` it is
    the right edge.
    """

    text: str
    x: float
    y: float
    font: str
    size: float
    color: str = '#000000'
    alpha: float = 1.0
    align: Align = 'left'


@dataclass(frozen=True)
class ImageCommand:
    """Raster image fitted into a box, aspect ratio preserved"""

    data: bytes
    x: float
    y: float
    width: float
    height: float

    def __repr__(self):
        return (
            f"ImageCommand(<{len(self.data)} bytes>, x={self.x}, y={self.y}, "
            f"width={self.width}, height={self.height})"
        )


@dataclass(frozen=True)
class RotatedTextCommand:
    """Text centered on (cx, cy) and rotated counter-clockwise by ``angle`` degrees"""

    text: str
    cx: float
    cy: float
    angle: float
    font: str
    size: float
    color: str = '#999999'
    alpha: float = 0.1


DrawCommand = Union[RectCommand, LineCommand, TextCommand, ImageCommand, RotatedTextCommand]
