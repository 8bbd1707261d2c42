from __future__ import annotations

import io
from dataclasses import dataclass
from typing import List, Optional, Sequence

from PIL import Image

from ..utils.logging import get_logger
from .base import BaseOCREngine, NormalizedPoint, NormalizedQuad, OCREngineError

logger = get_logger("ocr.vision")

try:
    import Foundation  # type: ignore
    import objc  # type: ignore
    import Vision  # type: ignore
except ImportError:  # pragma: no cover - macOS only
    Vision = None  # type: ignore


def _utf16_offset(text: str, index: int) -> int:
    return len(text[:index].encode("utf-16-le")) // 2


def _quad_from_observation(observation) -> NormalizedQuad:
    def point(value) -> NormalizedPoint:
        return NormalizedPoint(float(value.x), float(value.y))

    return NormalizedQuad(
        top_left=point(observation.topLeft()),
        top_right=point(observation.topRight()),
        bottom_right=point(observation.bottomRight()),
        bottom_left=point(observation.bottomLeft()),
    )


@dataclass
class VisionCandidate:  # pragma: no cover - macOS only
    """Top candidate of one ``VNRecognizedTextObservation``."""

    text: str
    confidence: float
    quad: Optional[NormalizedQuad]
    recognized: object

    def bounding_quad(self, start: int, end: int) -> Optional[NormalizedQuad]:
        location = _utf16_offset(self.text, start)
        length = _utf16_offset(self.text, end) - location
        box, error = self.recognized.boundingBoxForRange_error_(
            Foundation.NSMakeRange(location, length), None
        )
        if error is not None or box is None:
            logger.debug("No geometry for range %d..%d of %r", start, end, self.text)
            return None
        return _quad_from_observation(box)


@dataclass
class VisionOCREngine(BaseOCREngine):  # pragma: no cover - macOS only
    """Apple Vision text recognition through pyobjc."""

    name: str = "vision"
    fast_mode: bool = False
    use_language_correction: bool = False

    def __post_init__(self) -> None:
        if Vision is None:
            raise ImportError(
                "Apple Vision is not available. Install pyobjc-framework-Vision on macOS."
            )

    def _build_request(self, languages: Sequence[str] = ()):
        request = Vision.VNRecognizeTextRequest.alloc().init()
        # Newest revision the running OS supports.
        revisions = Vision.VNRecognizeTextRequest.supportedRevisions()
        if revisions is not None and revisions.count():
            request.setRevision_(revisions.lastIndex())
        if self.fast_mode:
            request.setRecognitionLevel_(Vision.VNRequestTextRecognitionLevelFast)
        else:
            request.setRecognitionLevel_(Vision.VNRequestTextRecognitionLevelAccurate)
        request.setUsesLanguageCorrection_(self.use_language_correction)
        if languages:
            request.setRecognitionLanguages_(list(languages))
        return request

    def recognize(self, image: Image.Image, languages: Sequence[str]) -> List[VisionCandidate]:
        with io.BytesIO() as buffer:
            image.save(buffer, format="PNG")
            payload = buffer.getvalue()

        with objc.autorelease_pool():
            request = self._build_request(languages)
            data = Foundation.NSData.dataWithBytes_length_(payload, len(payload))
            handler = Vision.VNImageRequestHandler.alloc().initWithData_options_(data, None)
            success, error = handler.performRequests_error_([request], None)
            if not success or error is not None:
                raise OCREngineError(f"Vision request failed: {error}")

            candidates: List[VisionCandidate] = []
            for observation in request.results() or []:
                top = observation.topCandidates_(1)
                if not top:
                    continue
                recognized = top[0]
                candidates.append(
                    VisionCandidate(
                        text=str(recognized.string()),
                        confidence=float(recognized.confidence()),
                        quad=_quad_from_observation(observation),
                        recognized=recognized,
                    )
                )
        logger.debug("Vision returned %d observations", len(candidates))
        return candidates

    def supported_languages(self) -> List[str]:
        request = self._build_request()
        request.setRecognitionLevel_(Vision.VNRequestTextRecognitionLevelAccurate)
        languages, error = request.supportedRecognitionLanguagesAndReturnError_(None)
        if error is not None:
            raise OCREngineError(f"Unable to list Vision languages: {error}")
        return [str(language) for language in languages]
