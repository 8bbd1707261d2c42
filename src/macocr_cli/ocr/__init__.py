"""OCR engine abstractions."""

from .base import BaseOCREngine, NormalizedPoint, NormalizedQuad, OCREngineError, RecognizedCandidate
from .tesseract_client import TesseractOCREngine

__all__ = [
    "BaseOCREngine",
    "NormalizedPoint",
    "NormalizedQuad",
    "OCREngineError",
    "RecognizedCandidate",
    "TesseractOCREngine",
]
