from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Tuple

from PIL import Image


class OCREngineError(RuntimeError):
    """Raised when the recognition engine fails on a single image."""


@dataclass(frozen=True)
class NormalizedPoint:
    """Point in the unit square, origin bottom-left, y pointing up."""

    x: float
    y: float


@dataclass(frozen=True)
class NormalizedQuad:
    """Four corners of a (possibly rotated) text region in normalized space."""

    top_left: NormalizedPoint
    top_right: NormalizedPoint
    bottom_right: NormalizedPoint
    bottom_left: NormalizedPoint

    @property
    def corners(self) -> Tuple[NormalizedPoint, NormalizedPoint, NormalizedPoint, NormalizedPoint]:
        return (self.top_left, self.top_right, self.bottom_right, self.bottom_left)

    def enclosing_rect(self) -> Tuple[float, float, float, float]:
        """Return ``(min_x, min_y, width, height)`` of the enclosing box."""
        xs = [point.x for point in self.corners]
        ys = [point.y for point in self.corners]
        return min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys)

    @classmethod
    def from_rect(cls, x: float, y: float, width: float, height: float) -> "NormalizedQuad":
        """Build an axis-aligned quad from a normalized rect anchored bottom-left."""
        return cls(
            top_left=NormalizedPoint(x, y + height),
            top_right=NormalizedPoint(x + width, y + height),
            bottom_right=NormalizedPoint(x + width, y),
            bottom_left=NormalizedPoint(x, y),
        )


class RecognizedCandidate(Protocol):
    """Top-ranked text interpretation of one detected region."""

    text: str
    confidence: float
    quad: Optional[NormalizedQuad]

    def bounding_quad(self, start: int, end: int) -> Optional[NormalizedQuad]:
        """Geometry of ``text[start:end]`` or None when the engine cannot locate it."""
        ...


class BaseOCREngine(Protocol):
    name: str

    def recognize(self, image: Image.Image, languages: Sequence[str]) -> List[RecognizedCandidate]:
        """Run recognition on one decoded image, in the engine's observation order."""
        ...

    def supported_languages(self) -> List[str]:
        ...
