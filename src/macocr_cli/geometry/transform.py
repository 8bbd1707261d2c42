from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Tuple, Union

import numpy as np

from ..ocr.base import NormalizedQuad

Number = Union[int, Decimal]

FIXED_DIGITS = 3


@dataclass(frozen=True)
class PixelBox:
    """
    Pixel-space geometry of one text unit, origin top-left.

    ``corners`` keeps the quadrilateral shape as ``(x0, y0, ..., x3, y3)`` in
    top-left, top-right, bottom-right, bottom-left order.
    """

    x: Number
    y: Number
    width: Number
    height: Number
    corners: Tuple[Number, ...]

    @classmethod
    def zero(cls, fixed_precision: bool = False) -> "PixelBox":
        value: Number = round_fixed(0) if fixed_precision else 0
        return cls(x=value, y=value, width=value, height=value, corners=(value,) * 8)


def round_fixed(value: float, digits: int = FIXED_DIGITS) -> Decimal:
    """
    Round in base 10 with ties going away from zero.

    The result keeps exactly ``digits`` fractional digits, so 25 becomes 25.000.
    """
    quantum = Decimal(1).scaleb(-digits)
    return Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP)


def _emit(value: float, fixed_precision: bool) -> Number:
    if fixed_precision:
        return round_fixed(value)
    return int(value)


def to_pixel_box(
    quad: Optional[NormalizedQuad],
    width: int,
    height: int,
    fixed_precision: bool = False,
) -> PixelBox:
    """
    Map a normalized, y-up quadrilateral onto an image of ``width`` x ``height``.

    Only the vertical axis is flipped. Without a quad the zero box is returned.
    """
    if quad is None:
        return PixelBox.zero(fixed_precision)

    points = np.array([[point.x, point.y] for point in quad.corners], dtype=float)
    points *= np.array([width, height], dtype=float)
    points[:, 1] = height - points[:, 1]

    min_x, min_y, rect_w, rect_h = quad.enclosing_rect()
    px_x = min_x * width
    px_w = rect_w * width
    px_h = rect_h * height
    px_y = height - min_y * height - px_h

    return PixelBox(
        x=_emit(px_x, fixed_precision),
        y=_emit(px_y, fixed_precision),
        width=_emit(px_w, fixed_precision),
        height=_emit(px_h, fixed_precision),
        corners=tuple(_emit(value, fixed_precision) for value in points.flatten().tolist()),
    )
